"""
Natural-language Query Parser

將自由文字查詢轉為結構化 filters，套用到文章，並產生回覆文字。
日期相關的解析一律使用呼叫端傳入的 now。
"""

from typing import List, Optional
from datetime import datetime, timedelta
import re
import logging

from story_miner.models import (
    DateRange, Document, ParsedQuery, QueryFilters, QueryIntent, Sentiment
)
from story_miner.query.vocabulary import (
    CATEGORY_PATTERNS, INTENT_PATTERNS, RECENT_PATTERNS, SENTIMENT_PATTERNS,
    TIME_PATTERNS, pattern_words
)
from story_miner.utils.stopwords import QUERY_STOP
from story_miner.utils.time import (
    end_of_day, local_date_str, start_of_day, start_of_month, start_of_week, to_utc
)

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[^\W_][\w'.&-]*")

# 比對片語時允許的字尾 (elections, movies, stocks...)
INFLECTION = r"(?:s|es|ed|ing)?"

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


def phrase_pattern(phrase: str) -> str:
    """
    片語的 regex：左側需為字首，右側允許常見字尾變化

    "election" 可命中 "elections"，但 "ai" 不會命中 "said" 或 "air"。
    字尾以 lookahead 比對，re.sub 只會取代片語本身。
    """
    return rf"\b{re.escape(phrase)}(?={INFLECTION}\b)"


def contains_phrase(query: str, phrase: str) -> bool:
    """以單字邊界比對片語 (含複數等字尾變化)"""
    return re.search(phrase_pattern(phrase), query) is not None


def parse_query(
    query: str,
    now: datetime,
    tz_name: str = "UTC",
    recent_days: int = 7
) -> ParsedQuery:
    """
    解析自然語言查詢

    Args:
        query: 使用者輸入
        now: 當前時間 (日期區間基準)
        tz_name: 日期區間的時區
        recent_days: recent/latest 回溯天數

    Returns:
        ParsedQuery (original_query 保留原字串)
    """
    now = to_utc(now)
    lower_query = query.lower()

    filters = QueryFilters(
        sentiment=extract_sentiment(lower_query),
        categories=extract_categories(lower_query),
        date_range=extract_date_range(lower_query, now, tz_name, recent_days),
        keywords=extract_query_keywords(lower_query)
    )

    parsed = ParsedQuery(
        intent=detect_intent(lower_query),
        filters=filters,
        original_query=query
    )

    logger.debug(f"Parsed query {query!r}: intent={parsed.intent.value}, " +
                 f"sentiment={filters.sentiment}, categories={filters.categories}, " +
                 f"keywords={filters.keywords}")
    return parsed


def detect_intent(query: str) -> QueryIntent:
    """依優先序以子字串比對 intent，皆未命中則為 search"""
    for intent, words in INTENT_PATTERNS.items():
        if any(word in query for word in words):
            return intent
    return QueryIntent.SEARCH


def extract_sentiment(query: str) -> Optional[Sentiment]:
    for sentiment, words in SENTIMENT_PATTERNS.items():
        if any(contains_phrase(query, word) for word in words):
            return sentiment
    return None


def extract_categories(query: str) -> List[str]:
    """回傳所有命中的分類 (表格順序)"""
    return [
        category for category, words in CATEGORY_PATTERNS.items()
        if any(contains_phrase(query, word) for word in words)
    ]


def resolve_time_window(pattern: str, now: datetime, tz_name: str = "UTC") -> DateRange:
    """
    將命名時間窗轉成 DateRange

    Args:
        pattern: today | yesterday | this week | last week | this month | last month
        now: 當前時間
        tz_name: 計算日/週/月邊界的時區

    Returns:
        DateRange (UTC)
    """
    now = to_utc(now)
    one_tick = timedelta(microseconds=1)

    if pattern == 'today':
        return DateRange(start=start_of_day(now, tz_name), end=end_of_day(now, tz_name))

    if pattern == 'yesterday':
        end = start_of_day(now, tz_name) - one_tick
        return DateRange(start=start_of_day(end, tz_name), end=end)

    if pattern == 'this week':
        return DateRange(start=start_of_week(now, tz_name), end=now)

    if pattern == 'last week':
        end = start_of_week(now, tz_name) - one_tick
        return DateRange(start=start_of_week(end, tz_name), end=end)

    if pattern == 'this month':
        return DateRange(start=start_of_month(now, tz_name), end=now)

    if pattern == 'last month':
        end = start_of_month(now, tz_name) - one_tick
        return DateRange(start=start_of_month(end, tz_name), end=end)

    raise ValueError(f"Unsupported time window: {pattern}")


def extract_date_range(
    query: str,
    now: datetime,
    tz_name: str = "UTC",
    recent_days: int = 7
) -> Optional[DateRange]:
    now = to_utc(now)
    for pattern in TIME_PATTERNS:
        if contains_phrase(query, pattern):
            return resolve_time_window(pattern, now, tz_name)

    if any(contains_phrase(query, word) for word in RECENT_PATTERNS):
        return DateRange(start=now - timedelta(days=recent_days), end=now)

    return None


def extract_query_keywords(query: str) -> List[str]:
    """
    取出其他抽取器未使用的字

    排除停用詞、長度 <= 2 的字與所有 vocabulary 單字 (含字尾變化)，去重並保留順序。
    """
    alternatives = "|".join(re.escape(word) for word in sorted(pattern_words()))
    vocabulary_re = re.compile(rf"(?:{alternatives}){INFLECTION}")

    keywords: List[str] = []
    for word in _WORD_RE.findall(query.lower()):
        word = word.rstrip(".'")
        if len(word) <= 2 or word in QUERY_STOP or vocabulary_re.fullmatch(word):
            continue
        if word not in keywords:
            keywords.append(word)

    return keywords


def matches_sentiment(document: Document, sentiment: Sentiment) -> bool:
    compound = document.sentiment_compound
    if sentiment == Sentiment.POSITIVE:
        return compound > POSITIVE_THRESHOLD
    if sentiment == Sentiment.NEGATIVE:
        return compound < NEGATIVE_THRESHOLD
    return NEGATIVE_THRESHOLD <= compound <= POSITIVE_THRESHOLD


def matches_category(document: Document, categories: List[str]) -> bool:
    doc_category = document.category.lower()
    return any(
        doc_category in category.lower() or category.lower() in doc_category
        for category in categories
    )


def apply_filters(documents: List[Document], filters: QueryFilters) -> List[Document]:
    """
    套用 filters (各維度 AND)

    Args:
        documents: 文章
        filters: parse_query 產生的 filters

    Returns:
        符合條件的文章 (保留原順序)
    """
    filtered = documents

    if filters.sentiment is not None:
        filtered = [doc for doc in filtered if matches_sentiment(doc, filters.sentiment)]

    if filters.categories:
        filtered = [doc for doc in filtered if matches_category(doc, filters.categories)]

    if filters.date_range is not None:
        date_range = filters.date_range
        filtered = [
            doc for doc in filtered
            if doc.published_at is not None and date_range.contains(doc.published_at)
        ]

    if filters.keywords:
        filtered = [
            doc for doc in filtered
            if any(keyword in doc.content.lower() for keyword in filters.keywords)
        ]

    logger.debug(f"Filters kept {len(filtered)} of {len(documents)} documents")
    return filtered


def describe_date_range(date_range: DateRange, now: datetime, tz_name: str = "UTC") -> str:
    if local_date_str(date_range.start, tz_name) == local_date_str(now, tz_name):
        return 'from today'
    if date_range.end - date_range.start <= timedelta(days=7):
        return 'from this week'
    return (f"from {local_date_str(date_range.start, tz_name)} " +
            f"to {local_date_str(date_range.end, tz_name)}")


def generate_response(
    parsed: ParsedQuery,
    results: List[Document],
    now: datetime,
    tz_name: str = "UTC"
) -> str:
    """
    產生自然語言回覆

    Args:
        parsed: 解析後的查詢
        results: apply_filters 的結果
        now: 當前時間 (判斷 "today")
        tz_name: 時區

    Returns:
        回覆文字
    """
    now = to_utc(now)
    if not results:
        return ("I couldn't find any articles matching your query. " +
                "Try adjusting your search criteria or using different keywords.")

    filters = parsed.filters
    count = len(results)
    response = f"Found {count} article{'' if count == 1 else 's'}"

    descriptions = []
    if filters.sentiment is not None:
        descriptions.append(f"with {filters.sentiment.value} sentiment")
    if filters.categories:
        descriptions.append(f"in {', '.join(filters.categories)}")
    if filters.date_range is not None:
        descriptions.append(describe_date_range(filters.date_range, now, tz_name))
    if filters.keywords:
        descriptions.append(f'matching "{", ".join(filters.keywords)}"')

    if descriptions:
        response += ' ' + ' '.join(descriptions)
    response += '.'

    if parsed.intent == QueryIntent.SUMMARIZE:
        response += ' I can provide a summary of these articles.'
    elif parsed.intent == QueryIntent.ANALYZE:
        response += ' I can analyze these articles for patterns and insights.'
    elif parsed.intent == QueryIntent.COMPARE and count > 1:
        response += ' I can compare how different sources cover this topic.'

    return response
