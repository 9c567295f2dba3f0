"""
Core data models for the content analytics engine

Document 是外部輸入 (唯讀)；其餘皆為每次呼叫重新計算的衍生結果。
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from story_miner.utils.time import to_utc


class TrendDirection(str, Enum):
    RISING = "rising"
    STABLE = "stable"
    FALLING = "falling"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class InsightType(str, Enum):
    TREND = "trend"
    ANOMALY = "anomaly"
    COMPARISON = "comparison"
    SUMMARY = "summary"
    SENTIMENT = "sentiment"


class QueryIntent(str, Enum):
    SEARCH = "search"
    FILTER = "filter"
    ANALYZE = "analyze"
    COMPARE = "compare"
    SUMMARIZE = "summarize"


class Document(BaseModel):
    """
    單篇新聞 (每篇文章一筆)

    由外部 ingestion 層建立並驗證，引擎只讀不寫。
    """
    id: int = Field(..., description="唯一 ID")
    content: str = Field(..., description="文章內文")
    category: str = Field(..., description="分類 (每篇恰好一個)")
    published_at: Optional[datetime] = Field(None, description="發布時間 (UTC tz-aware)")
    publisher: Optional[str] = Field(None, description="來源名稱")
    sentiment_compound: float = Field(default=0.0, description="外部情緒分析 compound score (-1 ~ 1)")
    title: Optional[str] = Field(None, description="標題")
    url: Optional[str] = Field(None, description="原文連結")
    is_breaking: bool = Field(default=False, description="來源標記的即時新聞")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "content": "The new artificial intelligence chip ships next month...",
                "category": "Technology",
                "published_at": "2026-02-13T10:00:00Z",
                "publisher": "Reuters",
                "sentiment_compound": 0.42
            }
        }
    }

    @field_validator("published_at")
    @classmethod
    def _normalize_published_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return to_utc(value)


class WeightedTerm(BaseModel):
    """關鍵字與其在文集中的權重"""
    term: str
    score: float


class Cluster(BaseModel):
    """
    報導同一事件的文章群組

    clusters 對輸入做 partition：每篇文章恰好屬於一個 cluster。
    """
    cluster_id: str = Field(..., description="cluster-<種子文章 id>")
    representative: Document = Field(..., description="最新發布的成員")
    size: int = Field(..., description="成員數")
    members: List[Document] = Field(default_factory=list, description="全部成員 (種子在前)")

    @property
    def member_ids(self) -> List[int]:
        return [doc.id for doc in self.members]


class Topic(BaseModel):
    """以關鍵字為鍵的主題聚合"""
    name: str = Field(..., description="定義主題的關鍵字 (小寫)")
    count: int = Field(..., description="支持文章數")
    documents: List[Document] = Field(default_factory=list, description="支持文章")
    keywords: List[str] = Field(default_factory=list, description="共現關鍵字 (最多 5 個)")
    trend: TrendDirection = Field(default=TrendDirection.STABLE)
    velocity: float = Field(default=0.0, description="變化率 (%)")

    @property
    def document_ids(self) -> List[int]:
        return [doc.id for doc in self.documents]


class TopicTrend(BaseModel):
    """兩個時間窗之間的主題變化"""
    topic: str
    current_count: int
    previous_count: int
    percentage_change: float
    trend: TrendDirection


class DateRange(BaseModel):
    """閉區間 [start, end] (UTC tz-aware)"""
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize_bounds(cls, value: datetime) -> datetime:
        return to_utc(value)

    def contains(self, moment: datetime) -> bool:
        return self.start <= to_utc(moment) <= self.end


class QueryFilters(BaseModel):
    sentiment: Optional[Sentiment] = None
    categories: List[str] = Field(default_factory=list)
    date_range: Optional[DateRange] = None
    keywords: List[str] = Field(default_factory=list)


class ParsedQuery(BaseModel):
    """自然語言查詢解析結果"""
    intent: QueryIntent = QueryIntent.SEARCH
    filters: QueryFilters = Field(default_factory=QueryFilters)
    original_query: str = Field(..., description="原始查詢字串 (不修改)")


class AmbiguityOption(BaseModel):
    label: str
    value: str
    description: Optional[str] = None
    confidence: float


class AmbiguityResult(BaseModel):
    """查詢模糊度評估"""
    is_ambiguous: bool
    confidence: float = Field(..., ge=0.1, le=1.0, description="0.1-1, 越低越模糊")
    clarity_score: int = Field(..., ge=1, le=10, description="1-10 顯示用")
    options: List[AmbiguityOption] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    ambiguous_terms: List[str] = Field(default_factory=list)


class EnhancedResponse(BaseModel):
    text: str
    confidence: float
    clarity_score: int


class QueryResult(BaseModel):
    """一次查詢的完整輸出"""
    parsed: ParsedQuery
    documents: List[Document] = Field(default_factory=list)
    response: str
    ambiguity: AmbiguityResult


class BriefScore(BaseModel):
    """文章集合的新穎度 / 多樣性評分 (0-100)"""
    novelty_score: int
    diversity_score: int
    overall_score: int


class Insight(BaseModel):
    """從整個文集觀察到的現象 (分類主導、情緒偏斜、來源多樣性、重大事件)"""
    type: InsightType
    title: str
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    related_ids: List[int] = Field(default_factory=list, description="相關文章 id")
