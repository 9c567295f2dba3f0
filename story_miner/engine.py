"""
Content Analytics Engine

呼叫端持有的可重複使用 handle：綁定一份設定與一個可注入的 clock，
本身不保存任何跨呼叫的狀態。
"""

from typing import Callable, Dict, List, Optional
from datetime import datetime
import logging

from story_miner.config import StoryMinerConfig
from story_miner.models import (
    AmbiguityResult, BriefScore, Cluster, Document, Insight, ParsedQuery, QueryFilters,
    QueryResult, Topic, TopicTrend, WeightedTerm
)
from story_miner.processing import clustering, insights, keywords, scoring, topic_discovery
from story_miner.query import ambiguity, parser
from story_miner.utils.time import utcnow

logger = logging.getLogger(__name__)


class ContentAnalyticsEngine:
    """關鍵字、分群、主題、查詢解析的統一入口"""

    def __init__(
        self,
        config: Optional[StoryMinerConfig] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Args:
            config: 完整設定 (None = 預設值)
            clock: 回傳當前時間的函式 (測試時可固定)
        """
        self.config = config or StoryMinerConfig()
        self.clock = clock

    # ---- Keyword Extractor ----

    def extract_keywords(self, document: Document, collection: List[Document], k: Optional[int] = None) -> List[str]:
        cfg = self.config.keywords
        return keywords.extract_keywords(
            document.content,
            [doc.content for doc in collection],
            cfg.top_k if k is None else k,
            cfg.min_term_length
        )

    def extract_weighted_terms(self, document: Document, collection: List[Document], k: Optional[int] = None) -> List[WeightedTerm]:
        cfg = self.config.keywords
        return keywords.extract_weighted_terms(
            document.content,
            [doc.content for doc in collection],
            cfg.top_k if k is None else k,
            cfg.min_term_length
        )

    # ---- Similarity Clustering ----

    def cluster(self, documents: List[Document]) -> List[Cluster]:
        return clustering.cluster_documents(documents, self.config.clustering)

    # ---- Topic Discovery ----

    def discover_topics(self, documents: List[Document], min_articles: Optional[int] = None) -> List[Topic]:
        return topic_discovery.discover_topics(
            documents, min_articles, self.config.topics, self.config.keywords
        )

    def analyze_topic_trends(self, current: List[Document], previous: List[Document]) -> List[TopicTrend]:
        return topic_discovery.analyze_topic_trends(
            current, previous, self.config.topics, self.config.keywords
        )

    def emerging_topics(self, documents: List[Document]) -> List[Topic]:
        return topic_discovery.get_emerging_topics(documents, self.config.topics, self.config.keywords)

    def topics_by_category(self, documents: List[Document]) -> Dict[str, List[Topic]]:
        return topic_discovery.get_topics_by_category(documents, self.config.topics, self.config.keywords)

    def related_topics(self, topic: Topic, all_topics: List[Topic]) -> List[Topic]:
        return topic_discovery.find_related_topics(topic, all_topics, self.config.topics.max_related_topics)

    # ---- Query Interpreter ----

    def parse_query(self, query: str, now: Optional[datetime] = None) -> ParsedQuery:
        cfg = self.config.query
        return parser.parse_query(query, now or self.clock(), cfg.timezone, cfg.recent_days)

    def apply_filters(self, documents: List[Document], filters: QueryFilters) -> List[Document]:
        return parser.apply_filters(documents, filters)

    def detect_ambiguity(self, query: str, documents: Optional[List[Document]] = None) -> AmbiguityResult:
        cfg = self.config.query
        return ambiguity.detect_ambiguity(query, documents, cfg.ambiguity_threshold, cfg.max_suggestions)

    def interpret(self, query: str, documents: List[Document]) -> QueryResult:
        """
        解析 → 過濾 → 回覆 → 模糊度，一次完成

        整個流程只讀一次 clock，確保日期區間與回覆文字一致。
        """
        now = self.clock()
        tz_name = self.config.query.timezone

        parsed = self.parse_query(query, now)
        results = self.apply_filters(documents, parsed.filters)
        ambiguity_result = self.detect_ambiguity(query, documents)
        enhanced = ambiguity.generate_enhanced_response(parsed, results, ambiguity_result, now, tz_name)

        logger.info(f"Query {query!r}: intent={parsed.intent.value}, " +
                    f"{len(results)}/{len(documents)} documents, clarity={ambiguity_result.clarity_score}")

        return QueryResult(
            parsed=parsed,
            documents=results,
            response=enhanced.text,
            ambiguity=ambiguity_result
        )

    # ---- Brief Scoring ----

    def brief_score(self, documents: List[Document]) -> BriefScore:
        return scoring.calculate_brief_score(documents, self.clock())

    # ---- Corpus Insights ----

    def generate_insights(self, documents: List[Document]) -> List[Insight]:
        """分類主導、情緒、來源多樣性、即時新聞與重大事件 (重大事件依本次分群結果)"""
        return insights.generate_insights(documents, self.cluster(documents), self.config.insights)

    def frequent_terms(self, documents: List[Document]) -> List[Topic]:
        return insights.detect_frequent_terms(documents, self.config.insights)
