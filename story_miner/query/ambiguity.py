"""
Query Ambiguity Detection

從 confidence 1.0 開始扣分：
- 多義實體 (apple, bank...)   -0.2 / 個
- 模糊詞 (stuff, news...)      -0.1 / 個
- 查詢 <= 2 個字                -0.15
- 同時命中 > 2 個分類           -0.1
最低為 0.1。
"""

from typing import List, Optional
from datetime import datetime
import re
import logging

from story_miner.models import (
    AmbiguityOption, AmbiguityResult, Document, EnhancedResponse, ParsedQuery
)
from story_miner.query.parser import (
    contains_phrase, extract_categories, generate_response, phrase_pattern
)
from story_miner.query.vocabulary import AMBIGUOUS_ENTITIES, VAGUE_TERMS

logger = logging.getLogger(__name__)

ENTITY_PENALTY = 0.2
VAGUE_PENALTY = 0.1
SHORT_QUERY_PENALTY = 0.15
MULTI_CATEGORY_PENALTY = 0.1
MIN_CONFIDENCE = 0.1


def clarity_from_confidence(confidence: float) -> int:
    """confidence (0.1-1) → clarity 1-10，四捨五入"""
    return int(confidence * 10 + 0.5)


def detect_ambiguity(
    query: str,
    documents: Optional[List[Document]] = None,
    threshold: float = 0.7,
    max_suggestions: int = 3
) -> AmbiguityResult:
    """
    評估查詢的模糊度

    Args:
        query: 使用者輸入
        documents: 目前的文章集合 (目前的扣分規則不需要)
        threshold: confidence 低於此值視為模糊
        max_suggestions: 改寫建議上限

    Returns:
        AmbiguityResult
    """
    lower_query = query.lower()
    words = lower_query.split()

    ambiguous_terms: List[str] = []
    options: List[AmbiguityOption] = []
    suggestions: List[str] = []
    penalty = 0.0

    for term, term_options in AMBIGUOUS_ENTITIES.items():
        if not contains_phrase(lower_query, term):
            continue

        ambiguous_terms.append(term)
        options.extend(term_options)
        penalty += ENTITY_PENALTY

        for option in term_options:
            replacement = option.label.split(' ')[0]
            suggestions.append(re.sub(phrase_pattern(term), replacement, query, flags=re.IGNORECASE))

    for term in VAGUE_TERMS:
        if term in words:
            ambiguous_terms.append(term)
            penalty += VAGUE_PENALTY

    if len(words) <= 2:
        penalty += SHORT_QUERY_PENALTY

    categories = extract_categories(lower_query)
    if len(categories) > 2:
        penalty += MULTI_CATEGORY_PENALTY
        suggestions.append(f"Show me {categories[0]} news specifically")

    # 浮點誤差修正後再套用下限
    confidence = max(MIN_CONFIDENCE, round(1.0 - penalty, 4))

    unique_suggestions: List[str] = []
    for suggestion in suggestions:
        if suggestion not in unique_suggestions:
            unique_suggestions.append(suggestion)

    result = AmbiguityResult(
        is_ambiguous=confidence < threshold,
        confidence=confidence,
        clarity_score=clarity_from_confidence(confidence),
        options=options,
        suggestions=unique_suggestions[:max_suggestions],
        ambiguous_terms=ambiguous_terms
    )

    if result.is_ambiguous:
        logger.info(f"Ambiguous query {query!r}: confidence={confidence:.2f}, terms={ambiguous_terms}")

    return result


def get_ambiguity_prompt(result: AmbiguityResult) -> str:
    """產生請使用者釐清的提示，不模糊時回傳空字串"""
    if not result.is_ambiguous:
        return ''

    if result.ambiguous_terms:
        terms = '", "'.join(result.ambiguous_terms)
        return f'Your query contains "{terms}" which could mean different things. Please clarify:'

    return 'Your query is a bit vague. Here are some suggestions:'


def generate_enhanced_response(
    parsed: ParsedQuery,
    results: List[Document],
    ambiguity: AmbiguityResult,
    now: datetime,
    tz_name: str = "UTC"
) -> EnhancedResponse:
    """
    在一般回覆後附上 clarity 資訊

    clarity < 7 時附加 "(Clarity: n/10)" 與第一個改寫建議。
    """
    text = generate_response(parsed, results, now, tz_name)

    if ambiguity.clarity_score < 7:
        text += f" (Clarity: {ambiguity.clarity_score}/10)"
        if ambiguity.suggestions:
            text += f' Try: "{ambiguity.suggestions[0]}"'

    return EnhancedResponse(
        text=text,
        confidence=ambiguity.confidence,
        clarity_score=ambiguity.clarity_score
    )
