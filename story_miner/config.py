"""
Configuration schemas using Pydantic

定義分析引擎的完整設定：關鍵字抽取、相似度分群、主題探索、查詢解析、文集洞察。
"""

from typing import Optional
from pydantic import BaseModel, Field


class KeywordConfig(BaseModel):
    """關鍵字抽取設定"""
    min_term_length: int = Field(default=4, ge=1, description="最短詞長")
    top_k: int = Field(default=10, ge=0, description="每篇文章輸出的關鍵字數")


class ClusteringConfig(BaseModel):
    """相似度分群設定"""
    min_token_length: int = Field(default=5, ge=1, description="分群用詞的最短長度 (> 4 字元)")
    max_terms: int = Field(default=20, ge=1, description="每篇文章最多取的詞數")
    similarity_threshold: float = Field(default=0.30, ge=0.0, le=1.0, description="跨分類合併門檻")
    same_category_threshold: float = Field(default=0.15, ge=0.0, le=1.0, description="同分類合併門檻")


class TopicConfig(BaseModel):
    """主題探索與趨勢設定"""
    min_articles: int = Field(default=3, ge=1, description="主題最少文章數")
    category_min_articles: int = Field(default=2, ge=1, description="分類內主題最少文章數")
    max_topics: int = Field(default=20, ge=1, description="輸出 Top N topics")
    max_related_keywords: int = Field(default=5, ge=0, description="相關關鍵字數")
    keywords_per_document: int = Field(default=10, ge=1, description="每篇文章抽取的關鍵字數")
    max_related_topics: int = Field(default=5, ge=0, description="相關主題數")
    rising_threshold: float = Field(default=20.0, description="變化率 > 此值為 rising")
    falling_threshold: float = Field(default=-20.0, description="變化率 < 此值為 falling")


class QueryConfig(BaseModel):
    """查詢解析設定"""
    timezone: str = Field(default="UTC", description="日期區間 (today/this week...) 的時區")
    recent_days: int = Field(default=7, ge=1, description="recent/latest 回溯天數")
    ambiguity_threshold: float = Field(default=0.7, ge=0.0, le=1.0, description="confidence 低於此值視為模糊")
    max_suggestions: int = Field(default=3, ge=0, description="改寫建議數上限")


class InsightConfig(BaseModel):
    """文集洞察設定 (百分比門檻以 0-100 表示)"""
    dominance_percent: int = Field(default=25, ge=0, le=100, description="單一分類佔比 > 此值視為主導")
    sentiment_skew_percent: int = Field(default=60, ge=0, le=100, description="正/負面佔比 > 此值視為偏斜")
    high_diversity_publishers: int = Field(default=10, ge=0, description="來源數 > 此值為高多樣性")
    low_diversity_publishers: int = Field(default=3, ge=0, description="來源數 < 此值為低多樣性")
    major_story_size: int = Field(default=3, ge=1, description="cluster 成員數 > 此值視為重大事件")
    max_related: int = Field(default=5, ge=1, description="每則洞察列出的文章數")
    frequent_term_min_count: int = Field(default=3, ge=1, description="高頻詞出現次數 > 此值")
    max_frequent_terms: int = Field(default=10, ge=1, description="高頻詞輸出數")


class StoryMinerConfig(BaseModel):
    """完整設定 schema"""
    output_dir: str = Field(default="out", description="報表輸出目錄")

    keywords: KeywordConfig = Field(default_factory=KeywordConfig, description="關鍵字抽取")
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig, description="相似度分群")
    topics: TopicConfig = Field(default_factory=TopicConfig, description="主題探索")
    query: QueryConfig = Field(default_factory=QueryConfig, description="查詢解析")
    insights: InsightConfig = Field(default_factory=InsightConfig, description="文集洞察")

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "StoryMinerConfig":
        """從 YAML 檔案載入設定"""
        import yaml
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    @classmethod
    def load(cls, yaml_path: Optional[str] = None) -> "StoryMinerConfig":
        """有指定路徑就讀檔，否則使用預設值"""
        if yaml_path:
            return cls.from_yaml(yaml_path)
        return cls()
