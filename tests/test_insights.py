"""
Tests for corpus insights
"""

from story_miner.config import InsightConfig
from story_miner.models import Cluster, Document, InsightType, TrendDirection
from story_miner.processing.insights import (
    analyze_sentiment_patterns, analyze_source_diversity, detect_breaking_news,
    detect_category_dominance, detect_frequent_terms, generate_insights
)


def create_test_document(
    doc_id: int,
    category: str = "Technology",
    sentiment: float = 0.0,
    publisher: str = None,
    is_breaking: bool = False,
    content: str = "story"
) -> Document:
    """Helper to create test document"""
    return Document(
        id=doc_id,
        content=content,
        category=category,
        sentiment_compound=sentiment,
        publisher=publisher,
        is_breaking=is_breaking
    )


def test_category_dominance():
    """測試單一分類超過 25% 時回報主導"""
    docs = [
        create_test_document(1),
        create_test_document(2, category="Sports"),
        create_test_document(3),
        create_test_document(4),
    ]

    insights = detect_category_dominance(docs)

    assert len(insights) == 1
    assert insights[0].type == InsightType.TREND
    assert insights[0].title == "Technology Dominates Coverage"
    assert insights[0].description == "75% of articles (3/4) are about Technology"
    assert insights[0].related_ids == [1, 3, 4]


def test_even_categories_not_dominant():
    docs = [create_test_document(i, category=name) for i, name in enumerate(["A", "B", "C", "D"], 1)]

    assert detect_category_dominance(docs) == []


def test_predominantly_positive():
    """測試正面佔比 > 60%，相關文章依 compound 由高到低"""
    docs = [
        create_test_document(1, sentiment=0.2),
        create_test_document(2, sentiment=0.6),
        create_test_document(3, sentiment=0.3),
        create_test_document(4, sentiment=-0.4),
    ]

    insights = analyze_sentiment_patterns(docs)

    assert insights[0].title == "Predominantly Positive Coverage"
    assert insights[0].description == "75% of articles have positive sentiment"
    assert insights[0].related_ids == [2, 3, 1]


def test_predominantly_negative():
    docs = [
        create_test_document(1, sentiment=-0.2),
        create_test_document(2, sentiment=-0.9),
        create_test_document(3, sentiment=0.1),
    ]

    insights = analyze_sentiment_patterns(docs)

    assert insights[0].title == "Predominantly Negative Coverage"
    assert insights[0].related_ids == [2, 1]


def test_balanced_sentiment():
    docs = [
        create_test_document(1, sentiment=0.5),
        create_test_document(2, sentiment=-0.5),
        create_test_document(3),
        create_test_document(4),
    ]

    insights = analyze_sentiment_patterns(docs)

    assert insights[0].title == "Balanced Sentiment Coverage"
    assert insights[0].description == \
        "Sentiment is evenly distributed: 25% positive, 25% negative, 50% neutral"
    assert insights[0].confidence == 0.75


def test_mildly_positive_has_no_sentiment_insight():
    docs = [
        create_test_document(1, sentiment=0.5),
        create_test_document(2, sentiment=0.5),
        create_test_document(3, sentiment=-0.1),
        create_test_document(4),
    ]

    assert analyze_sentiment_patterns(docs) == []


def test_source_diversity():
    """測試來源數 > 10 為高多樣性、< 3 為低多樣性"""
    many = [create_test_document(i, publisher=f"Outlet {i}") for i in range(11)]
    few = [create_test_document(1, publisher="Wire"), create_test_document(2, publisher="Wire")]
    some = [create_test_document(i, publisher=f"Outlet {i}") for i in range(5)]

    assert analyze_source_diversity(many)[0].title == "High Source Diversity"
    assert analyze_source_diversity(few)[0].description == "Only 1 publisher represented"
    assert analyze_source_diversity([create_test_document(1)])[0].description == "Only 0 publishers represented"
    assert analyze_source_diversity(some) == []


def test_breaking_news_and_major_story():
    docs = [
        create_test_document(1, is_breaking=True),
        create_test_document(2),
        create_test_document(3, is_breaking=True),
    ]
    story = [create_test_document(i) for i in range(10, 14)]
    clusters = [
        Cluster(cluster_id="cluster-10", representative=story[2], size=4, members=story),
        Cluster(cluster_id="cluster-2", representative=docs[1], size=1, members=[docs[1]]),
    ]

    insights = detect_breaking_news(docs, clusters)

    assert insights[0].title == "Breaking News Alert"
    assert insights[0].description == "2 breaking news stories detected"
    assert insights[0].related_ids == [1, 3]
    assert insights[1].title == "Major Story Developing"
    assert insights[1].description == "4 sources covering the same story"
    assert insights[1].related_ids == [12]


def test_small_clusters_are_not_major_stories():
    story = [create_test_document(i) for i in range(3)]
    clusters = [Cluster(cluster_id="cluster-0", representative=story[0], size=3, members=story)]

    assert detect_breaking_news(story, clusters) == []


def test_generate_insights_sorted_by_confidence():
    """測試整體輸出依 confidence 降序"""
    docs = [
        create_test_document(1, is_breaking=True, publisher="Wire"),
        create_test_document(2, publisher="Wire"),
        create_test_document(3, category="Sports", publisher="Wire", sentiment=0.4),
    ]

    insights = generate_insights(docs)

    assert [i.title for i in insights] == [
        "Breaking News Alert",
        "Technology Dominates Coverage",
        "Limited Source Diversity",
    ]


def test_config_thresholds():
    docs = [create_test_document(1), create_test_document(2, category="Sports")]

    assert detect_category_dominance(docs) != []
    assert detect_category_dominance(docs, InsightConfig(dominance_percent=50)) == []


def test_empty_documents():
    assert generate_insights([]) == []
    assert detect_frequent_terms([]) == []


def test_frequent_terms():
    """測試出現超過 3 次的長詞"""
    docs = [
        create_test_document(1, content="Budget talks stall as budget deadline nears"),
        create_test_document(2, content="Budget vote delayed"),
        create_test_document(3, content="Senate passes budget"),
    ]

    topics = detect_frequent_terms(docs)

    assert [t.name for t in topics] == ["budget"]
    assert topics[0].count == 4
    assert topics[0].document_ids == [1, 2, 3]
    assert topics[0].trend == TrendDirection.RISING
