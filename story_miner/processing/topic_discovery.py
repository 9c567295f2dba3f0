"""
Topic Discovery & Trend Analysis

以各文章的 TF-IDF 關鍵字反向索引成主題，並比較兩個時間窗計算趨勢。
"""

from typing import Dict, List, Optional
from collections import defaultdict
import logging

from story_miner.config import KeywordConfig, TopicConfig
from story_miner.models import Document, Topic, TopicTrend, TrendDirection
from story_miner.processing.keywords import extract_keywords, fit_corpus
from story_miner.utils.time import EPOCH

logger = logging.getLogger(__name__)


def discover_topics(
    documents: List[Document],
    min_articles: Optional[int] = None,
    config: Optional[TopicConfig] = None,
    keyword_config: Optional[KeywordConfig] = None
) -> List[Topic]:
    """
    從文章集合探索主題

    Args:
        documents: 文章
        min_articles: 主題最少文章數 (None = config.min_articles)
        config: 主題設定
        keyword_config: 關鍵字設定

    Returns:
        List of Topic，依支持文章數降序，最多 max_topics 個
    """
    config = config or TopicConfig()
    keyword_config = keyword_config or KeywordConfig()
    if min_articles is None:
        min_articles = config.min_articles

    if not documents:
        return []

    corpus = [doc.content for doc in documents]
    vectorizer = fit_corpus(corpus, keyword_config.min_term_length)

    # document index -> keywords
    document_keywords: List[List[str]] = [
        extract_keywords(
            doc.content,
            corpus,
            config.keywords_per_document,
            keyword_config.min_term_length,
            vectorizer
        )
        for doc in documents
    ]

    # keyword -> document indexes (dict 保留首次出現順序)
    keyword_documents: Dict[str, List[int]] = defaultdict(list)
    for index, keywords in enumerate(document_keywords):
        for keyword in keywords:
            keyword_documents[keyword].append(index)

    significant = [
        (keyword, indexes) for keyword, indexes in keyword_documents.items()
        if len(indexes) >= min_articles
    ]
    significant.sort(key=lambda entry: len(entry[1]), reverse=True)

    topics = []
    for keyword, indexes in significant[:config.max_topics]:
        related: List[str] = []
        for index in indexes:
            for other in document_keywords[index]:
                if other != keyword and other not in related:
                    related.append(other)

        topics.append(Topic(
            name=keyword,
            count=len(indexes),
            documents=[documents[i] for i in indexes],
            keywords=related[:config.max_related_keywords],
            trend=TrendDirection.STABLE,
            velocity=0.0
        ))

    logger.info(f"Discovered {len(topics)} topics from {len(documents)} documents " +
                f"(min_articles={min_articles})")
    return topics


def classify_trend(percentage_change: float, config: Optional[TopicConfig] = None) -> TrendDirection:
    """依變化率分類為 rising / stable / falling"""
    config = config or TopicConfig()
    if percentage_change > config.rising_threshold:
        return TrendDirection.RISING
    if percentage_change < config.falling_threshold:
        return TrendDirection.FALLING
    return TrendDirection.STABLE


def calculate_percentage_change(current_count: int, previous_count: int) -> float:
    """
    變化率 (%)

    previous_count 為 0 (新主題) 時固定回傳 100。
    """
    if previous_count > 0:
        return (current_count - previous_count) / previous_count * 100
    return 100.0


def analyze_topic_trends(
    current_documents: List[Document],
    previous_documents: List[Document],
    config: Optional[TopicConfig] = None,
    keyword_config: Optional[KeywordConfig] = None
) -> List[TopicTrend]:
    """
    比較目前與先前時間窗的主題

    Args:
        current_documents: 目前時間窗
        previous_documents: 先前時間窗
        config: 主題設定
        keyword_config: 關鍵字設定

    Returns:
        List of TopicTrend，依 |percentage_change| 降序
    """
    config = config or TopicConfig()
    current_topics = discover_topics(current_documents, config=config, keyword_config=keyword_config)
    previous_topics = discover_topics(previous_documents, config=config, keyword_config=keyword_config)

    previous_counts = {topic.name: topic.count for topic in previous_topics}

    trends = []
    for topic in current_topics:
        previous_count = previous_counts.get(topic.name, 0)
        change = calculate_percentage_change(topic.count, previous_count)
        trends.append(TopicTrend(
            topic=topic.name,
            current_count=topic.count,
            previous_count=previous_count,
            percentage_change=change,
            trend=classify_trend(change, config)
        ))

    trends.sort(key=lambda t: abs(t.percentage_change), reverse=True)
    return trends


def split_by_recency(documents: List[Document]):
    """
    依發布時間 (新到舊) 切成兩半

    Returns:
        (recent, older)；奇數時多出的一篇歸 older
    """
    ordered = sorted(documents, key=lambda doc: doc.published_at or EPOCH, reverse=True)
    midpoint = len(ordered) // 2
    return ordered[:midpoint], ordered[midpoint:]


def get_emerging_topics(
    documents: List[Document],
    config: Optional[TopicConfig] = None,
    keyword_config: Optional[KeywordConfig] = None
) -> List[Topic]:
    """
    取得帶有趨勢資訊的主題 (近期 vs 較早)

    Returns:
        List of Topic，依 |velocity| 降序
    """
    if not documents:
        return []

    recent, older = split_by_recency(documents)
    trends = analyze_topic_trends(recent, older, config, keyword_config)
    topics = discover_topics(documents, config=config, keyword_config=keyword_config)

    trend_by_topic = {trend.topic: trend for trend in trends}

    enriched = []
    for topic in topics:
        trend = trend_by_topic.get(topic.name)
        if trend is None:
            enriched.append(topic)
        else:
            enriched.append(topic.model_copy(update={
                'trend': trend.trend,
                'velocity': trend.percentage_change
            }))

    enriched.sort(key=lambda t: abs(t.velocity), reverse=True)

    rising = sum(1 for t in enriched if t.trend == TrendDirection.RISING)
    logger.info(f"Emerging topics: {len(enriched)} topics ({rising} rising), " +
                f"recent={len(recent)} older={len(older)}")
    return enriched


def get_topics_by_category(
    documents: List[Document],
    config: Optional[TopicConfig] = None,
    keyword_config: Optional[KeywordConfig] = None
) -> Dict[str, List[Topic]]:
    """
    各分類獨立探索主題 (門檻 category_min_articles)

    Returns:
        {category: [Topic]}，分類依首次出現順序
    """
    config = config or TopicConfig()

    by_category: Dict[str, List[Document]] = defaultdict(list)
    for doc in documents:
        by_category[doc.category].append(doc)

    return {
        category: discover_topics(
            category_documents,
            config.category_min_articles,
            config,
            keyword_config
        )
        for category, category_documents in by_category.items()
    }


def find_related_topics(
    topic: Topic,
    all_topics: List[Topic],
    limit: int = 5
) -> List[Topic]:
    """
    以共同文章數找出相關主題

    Args:
        topic: 目標主題
        all_topics: 候選主題
        limit: 最多回傳數

    Returns:
        依重疊文章數降序，排除自身與零重疊
    """
    topic_ids = set(topic.document_ids)

    scored = []
    for candidate in all_topics:
        if candidate.name == topic.name:
            continue
        overlap = sum(1 for doc_id in candidate.document_ids if doc_id in topic_ids)
        if overlap > 0:
            scored.append((candidate, overlap))

    scored.sort(key=lambda entry: entry[1], reverse=True)
    return [candidate for candidate, _ in scored[:limit]]
