"""
Tests for the content analytics engine handle
"""

from datetime import datetime, timedelta, timezone

from story_miner.config import StoryMinerConfig, TopicConfig
from story_miner.engine import ContentAnalyticsEngine
from story_miner.models import Document, QueryIntent, TrendDirection


NOW = datetime(2026, 2, 12, 15, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


def create_test_document(doc_id, content, category="Technology", sentiment=0.0, hours_ago=None):
    """Helper to create test document"""
    return Document(
        id=doc_id,
        content=content,
        category=category,
        sentiment_compound=sentiment,
        published_at=None if hours_ago is None else NOW - timedelta(hours=hours_ago),
        publisher="Wire"
    )


DOCS = [
    create_test_document(1, "Researchers unveiled the new artificial intelligence chip", sentiment=0.6, hours_ago=2),
    create_test_document(2, "Artificial intelligence chip launch draws crowds", sentiment=0.3, hours_ago=30),
    create_test_document(3, "Chipmaker shares slide after artificial intelligence chip delay", sentiment=-0.4, hours_ago=200),
    create_test_document(4, "Championship final ends in dramatic penalty shootout", category="Sports", hours_ago=5),
]


def test_interpret_uses_injected_clock():
    """測試 interpret 使用注入的 clock 計算本週區間"""
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    result = engine.interpret("Show me positive tech news from this week", DOCS)

    assert result.parsed.intent == QueryIntent.FILTER
    assert [d.id for d in result.documents] == [1, 2]
    assert result.response == "Found 2 articles with positive sentiment in Technology from this week."
    assert not result.ambiguity.is_ambiguous


def test_interpret_ambiguous_query():
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    result = engine.interpret("apple", DOCS)

    assert result.documents == []
    assert result.ambiguity.is_ambiguous
    assert result.response.startswith("I couldn't find any articles")


def test_cluster_and_topics():
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    clusters = engine.cluster(DOCS)
    topics = engine.discover_topics(DOCS)

    assert sum(c.size for c in clusters) == len(DOCS)
    assert "artificial" in [t.name for t in topics]


def test_config_flows_through():
    """測試設定值傳遞到各元件"""
    config = StoryMinerConfig(topics=TopicConfig(min_articles=4))
    engine = ContentAnalyticsEngine(config, clock=fixed_clock)

    assert engine.discover_topics(DOCS) == []
    assert engine.discover_topics(DOCS, min_articles=3) != []


def test_emerging_topics_have_trend():
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    for topic in engine.emerging_topics(DOCS):
        assert topic.trend in (TrendDirection.RISING, TrendDirection.STABLE, TrendDirection.FALLING)


def test_keywords_and_brief_score():
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    keywords = engine.extract_keywords(DOCS[3], DOCS, k=3)
    score = engine.brief_score(DOCS)

    assert len(keywords) == 3
    assert score.novelty_score == 50


def test_related_topics_by_category():
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    by_category = engine.topics_by_category(DOCS)
    tech_topics = by_category["Technology"]

    assert by_category["Sports"] == []
    related = engine.related_topics(tech_topics[0], tech_topics)
    assert tech_topics[0] not in related


def test_generate_insights():
    """測試洞察：科技類主導且只有單一來源"""
    engine = ContentAnalyticsEngine(clock=fixed_clock)

    insights = engine.generate_insights(DOCS)

    assert [i.title for i in insights] == ["Technology Dominates Coverage", "Limited Source Diversity"]
    assert insights[0].related_ids == [1, 2, 3]


def test_generate_insights_major_story_from_clusters():
    engine = ContentAnalyticsEngine(clock=fixed_clock)
    docs = [
        create_test_document(i, "Parliament approves sweeping climate legislation package", hours_ago=i)
        for i in range(1, 5)
    ]

    insights = engine.generate_insights(docs)

    major = [i for i in insights if i.title == "Major Story Developing"]
    assert major[0].description == "4 sources covering the same story"
    assert major[0].related_ids == [1]
