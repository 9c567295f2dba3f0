"""
Corpus Insights

從整個文集找出值得提示的現象：
- 單一分類主導報導
- 情緒偏斜 (或均衡)
- 來源多樣性過高 / 過低
- 即時新聞與多來源的重大事件
結果依 confidence 降序。
"""

from typing import List, Optional
from collections import Counter
import re
import logging

from story_miner.config import InsightConfig
from story_miner.models import Cluster, Document, Insight, InsightType, Topic, TrendDirection
from story_miner.processing.scoring import round_half_up
from story_miner.query.parser import NEGATIVE_THRESHOLD, POSITIVE_THRESHOLD
from story_miner.utils.stopwords import CLUSTER_STOP

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"\W+")


def detect_category_dominance(documents: List[Document], config: Optional[InsightConfig] = None) -> List[Insight]:
    """最大分類佔比 > dominance_percent 時產生 trend 洞察"""
    config = config or InsightConfig()
    if not documents:
        return []

    # most_common 同數量時保留首次出現順序
    top_category, count = Counter(doc.category for doc in documents).most_common(1)[0]
    total = len(documents)
    percentage = round_half_up(count / total * 100)

    if percentage <= config.dominance_percent:
        return []

    return [Insight(
        type=InsightType.TREND,
        title=f"{top_category} Dominates Coverage",
        description=f"{percentage}% of articles ({count}/{total}) are about {top_category}",
        confidence=0.9,
        related_ids=[doc.id for doc in documents if doc.category == top_category][:config.max_related]
    )]


def analyze_sentiment_patterns(documents: List[Document], config: Optional[InsightConfig] = None) -> List[Insight]:
    """
    情緒分布

    正面或負面佔比 > sentiment_skew_percent 時回報偏斜；
    兩者皆未偏斜且平均 compound 接近 0 時回報均衡。
    """
    config = config or InsightConfig()
    if not documents:
        return []

    total = len(documents)
    positive = [doc for doc in documents if doc.sentiment_compound > POSITIVE_THRESHOLD]
    negative = [doc for doc in documents if doc.sentiment_compound < NEGATIVE_THRESHOLD]
    neutral_count = total - len(positive) - len(negative)
    average = sum(doc.sentiment_compound for doc in documents) / total

    pos_percent = round_half_up(len(positive) / total * 100)
    neg_percent = round_half_up(len(negative) / total * 100)

    if pos_percent > config.sentiment_skew_percent:
        strongest = sorted(positive, key=lambda doc: doc.sentiment_compound, reverse=True)
        return [Insight(
            type=InsightType.SENTIMENT,
            title="Predominantly Positive Coverage",
            description=f"{pos_percent}% of articles have positive sentiment",
            confidence=0.85,
            related_ids=[doc.id for doc in strongest][:config.max_related]
        )]

    if neg_percent > config.sentiment_skew_percent:
        strongest = sorted(negative, key=lambda doc: doc.sentiment_compound)
        return [Insight(
            type=InsightType.SENTIMENT,
            title="Predominantly Negative Coverage",
            description=f"{neg_percent}% of articles have negative sentiment",
            confidence=0.85,
            related_ids=[doc.id for doc in strongest][:config.max_related]
        )]

    if abs(average) < POSITIVE_THRESHOLD:
        neutral_percent = round_half_up(neutral_count / total * 100)
        return [Insight(
            type=InsightType.SENTIMENT,
            title="Balanced Sentiment Coverage",
            description=(f"Sentiment is evenly distributed: {pos_percent}% positive, " +
                         f"{neg_percent}% negative, {neutral_percent}% neutral"),
            confidence=0.75,
            related_ids=[doc.id for doc in documents][:config.max_related]
        )]

    return []


def analyze_source_diversity(documents: List[Document], config: Optional[InsightConfig] = None) -> List[Insight]:
    """以不重複的 publisher 數判斷來源多樣性 (沒有 publisher 的文章不計)"""
    config = config or InsightConfig()
    if not documents:
        return []

    unique_count = len({doc.publisher for doc in documents if doc.publisher})
    related_ids = [doc.id for doc in documents][:config.max_related]

    if unique_count > config.high_diversity_publishers:
        return [Insight(
            type=InsightType.COMPARISON,
            title="High Source Diversity",
            description=f"Coverage from {unique_count} different publishers",
            confidence=0.8,
            related_ids=related_ids
        )]

    if unique_count < config.low_diversity_publishers:
        plural = '' if unique_count == 1 else 's'
        return [Insight(
            type=InsightType.ANOMALY,
            title="Limited Source Diversity",
            description=f"Only {unique_count} publisher{plural} represented",
            confidence=0.7,
            related_ids=related_ids
        )]

    return []


def detect_breaking_news(
    documents: List[Document],
    clusters: Optional[List[Cluster]] = None,
    config: Optional[InsightConfig] = None
) -> List[Insight]:
    """
    即時新聞與重大事件

    Args:
        documents: 文章
        clusters: 同一批文章的分群結果 (None = 不檢查重大事件)
        config: 洞察設定

    Returns:
        最多兩則洞察 (breaking news alert, major story developing)
    """
    config = config or InsightConfig()
    insights = []

    breaking = [doc for doc in documents if doc.is_breaking]
    if breaking:
        noun = 'story' if len(breaking) == 1 else 'stories'
        insights.append(Insight(
            type=InsightType.ANOMALY,
            title="Breaking News Alert",
            description=f"{len(breaking)} breaking news {noun} detected",
            confidence=0.95,
            related_ids=[doc.id for doc in breaking]
        ))

    major = [cluster for cluster in clusters or [] if cluster.size > config.major_story_size]
    if major:
        # max() 同分時取第一個
        top_story = max(major, key=lambda cluster: cluster.size)
        insights.append(Insight(
            type=InsightType.TREND,
            title="Major Story Developing",
            description=f"{top_story.size} sources covering the same story",
            confidence=0.9,
            related_ids=[top_story.representative.id]
        ))

    return insights


def generate_insights(
    documents: List[Document],
    clusters: Optional[List[Cluster]] = None,
    config: Optional[InsightConfig] = None
) -> List[Insight]:
    """
    產生文集洞察

    Args:
        documents: 文章
        clusters: 同一批文章的分群結果 (用於偵測重大事件)
        config: 洞察設定

    Returns:
        List of Insight，依 confidence 降序 (同分保留偵測順序)
    """
    config = config or InsightConfig()
    if not documents:
        return []

    insights = (
        detect_category_dominance(documents, config) +
        analyze_sentiment_patterns(documents, config) +
        analyze_source_diversity(documents, config) +
        detect_breaking_news(documents, clusters, config)
    )
    insights.sort(key=lambda insight: insight.confidence, reverse=True)

    logger.info(f"Generated {len(insights)} insights from {len(documents)} documents")
    return insights


def detect_frequent_terms(documents: List[Document], config: Optional[InsightConfig] = None) -> List[Topic]:
    """
    全文集的高頻詞 (不需時間資訊的快速版本)

    計算所有內文中長度 > 4 的詞出現次數，次數 > frequent_term_min_count 者
    依次數降序輸出，標記為 rising。需要實際趨勢請用 topic_discovery.get_emerging_topics。

    Returns:
        List of Topic (documents 為內文含該詞的文章)
    """
    config = config or InsightConfig()

    counts: Counter = Counter()
    document_terms = []
    for doc in documents:
        words = [
            word for word in _SPLIT_RE.split(doc.content.lower())
            if len(word) > 4 and word not in CLUSTER_STOP
        ]
        counts.update(words)
        document_terms.append(set(words))

    frequent = [(term, count) for term, count in counts.most_common() if count > config.frequent_term_min_count]

    return [
        Topic(
            name=term,
            count=count,
            documents=[doc for doc, terms in zip(documents, document_terms) if term in terms],
            trend=TrendDirection.RISING
        )
        for term, count in frequent[:config.max_frequent_terms]
    ]
