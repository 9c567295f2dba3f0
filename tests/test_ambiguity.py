"""
Tests for query ambiguity detection
"""

from datetime import datetime, timezone

import pytest

from story_miner.models import AmbiguityResult, Document
from story_miner.query.ambiguity import (
    clarity_from_confidence, detect_ambiguity, generate_enhanced_response, get_ambiguity_prompt
)
from story_miner.query.parser import parse_query


NOW = datetime(2026, 2, 12, 15, 30, tzinfo=timezone.utc)


def test_single_ambiguous_word():
    """測試 'apple'：多義實體 + 過短查詢"""
    result = detect_ambiguity("apple")

    assert result.is_ambiguous
    assert result.confidence <= 0.65 + 1e-9
    assert result.confidence == pytest.approx(0.65)
    assert result.ambiguous_terms == ["apple"]

    labels = [option.label for option in result.options]
    assert any(label.startswith("Apple Inc.") for label in labels)
    assert "Apple (Fruit)" in labels


def test_suggestions_deduplicated():
    """測試兩個選項的第一個字相同時只保留一個建議"""
    result = detect_ambiguity("apple earnings report")

    assert result.suggestions == ["Apple earnings report"]


def test_suggestions_capped_at_three():
    result = detect_ambiguity("Show me the latest news about Tesla and Amazon stock today")

    assert result.ambiguous_terms == ["amazon", "tesla", "news", "latest"]
    assert result.confidence == pytest.approx(0.4)
    assert result.clarity_score == 4
    assert len(result.suggestions) == 3
    assert result.suggestions[0] == "Show me the latest news about Tesla and Amazon.com stock today"


def test_clear_query():
    result = detect_ambiguity("Show me positive technology articles from this week")

    assert not result.is_ambiguous
    assert result.confidence == 1.0
    assert result.clarity_score == 10
    assert result.options == []
    assert result.suggestions == []


def test_confidence_floor():
    """測試 confidence 最低為 0.1"""
    result = detect_ambiguity("apple bank amazon python tesla china virus stuff things")

    assert result.confidence == 0.1
    assert result.clarity_score == 1


def test_many_categories_penalized():
    result = detect_ambiguity("tech politics business update for investors")

    assert result.confidence == pytest.approx(0.9)
    assert result.suggestions == ["Show me Technology news specifically"]
    assert not result.is_ambiguous


def test_plural_entity_detected():
    result = detect_ambiguity("apples and bananas prices")

    assert result.ambiguous_terms == ["apple"]
    assert result.suggestions == ["Apples and bananas prices"]


def test_entity_matches_whole_word():
    result = detect_ambiguity("pineapple harvest report today")

    assert "apple" not in result.ambiguous_terms


@pytest.mark.parametrize("query", [
    "",
    "apple",
    "news",
    "recent stuff things",
    "bank virus china",
    "Compare how global health and climate policy coverage differs across sources",
])
def test_confidence_and_clarity_bounds(query):
    """測試 confidence ∈ [0.1, 1]、clarity = round(confidence * 10)"""
    result = detect_ambiguity(query)

    assert 0.1 <= result.confidence <= 1.0
    assert 1 <= result.clarity_score <= 10
    assert result.clarity_score == clarity_from_confidence(result.confidence)
    assert result.is_ambiguous == (result.confidence < 0.7)


def test_ambiguity_prompt():
    ambiguous = detect_ambiguity("apple")
    clear = detect_ambiguity("Show me positive technology articles from this week")
    vague = AmbiguityResult(is_ambiguous=True, confidence=0.5, clarity_score=5)

    assert get_ambiguity_prompt(ambiguous) == \
        'Your query contains "apple" which could mean different things. Please clarify:'
    assert get_ambiguity_prompt(clear) == ''
    assert get_ambiguity_prompt(vague) == 'Your query is a bit vague. Here are some suggestions:'


def test_enhanced_response_clarity_seven_unchanged():
    """測試 clarity >= 7 時不附加提示"""
    query = "apple"
    parsed = parse_query(query, NOW)
    results = [Document(id=1, content="Apple unveils a new phone", category="Technology")]
    ambiguity = detect_ambiguity(query)

    enhanced = generate_enhanced_response(parsed, results, ambiguity, NOW)

    assert ambiguity.clarity_score == 7
    assert enhanced.text == 'Found 1 article matching "apple".'
    assert enhanced.confidence == ambiguity.confidence
    assert enhanced.clarity_score == ambiguity.clarity_score


def test_enhanced_response_low_clarity():
    query = "apple stuff"
    parsed = parse_query(query, NOW)
    results = [Document(id=1, content="Apple stuff", category="Technology")]
    ambiguity = detect_ambiguity(query)

    enhanced = generate_enhanced_response(parsed, results, ambiguity, NOW)

    assert ambiguity.clarity_score == 6
    assert enhanced.text == 'Found 1 article matching "apple, stuff". (Clarity: 6/10) Try: "Apple stuff"'
