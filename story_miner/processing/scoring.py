"""
Brief Scoring

文章集合的新穎度 (近 24 小時比例) 與多樣性 (來源 + 分類) 評分。
"""

from typing import List
from datetime import datetime, timedelta
import logging

from story_miner.models import BriefScore, Document
from story_miner.utils.time import to_utc

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """非負數四捨五入 (0.5 進位)"""
    return int(value + 0.5)


def calculate_novelty_score(documents: List[Document], now: datetime) -> int:
    """
    Novelty score

    過去 24 小時內發布的文章比例，沒有發布時間的文章不計入。

    Args:
        documents: 文章
        now: 當前時間

    Returns:
        Score 0-100
    """
    if not documents:
        return 0

    one_day_ago = to_utc(now) - timedelta(hours=24)
    recent = sum(
        1 for doc in documents
        if doc.published_at is not None and doc.published_at >= one_day_ago
    )

    return round_half_up(recent / len(documents) * 100)


def calculate_diversity_score(documents: List[Document]) -> int:
    """
    Diversity score (來源 70% + 分類 30%)

    15 個來源 = 100，10 個分類 = 100。

    Returns:
        Score 0-100
    """
    if not documents:
        return 0

    publishers = {doc.publisher for doc in documents if doc.publisher}
    publisher_score = min(100.0, len(publishers) * 6.67)

    categories = {doc.category for doc in documents}
    category_score = min(100.0, len(categories) * 10)

    return round_half_up(publisher_score * 0.7 + category_score * 0.3)


def calculate_brief_score(documents: List[Document], now: datetime) -> BriefScore:
    """綜合評分 (novelty 與 diversity 等權)"""
    novelty_score = calculate_novelty_score(documents, now)
    diversity_score = calculate_diversity_score(documents)
    overall_score = round_half_up((novelty_score + diversity_score) / 2)

    logger.debug(f"Brief score: novelty={novelty_score}, diversity={diversity_score}, " +
                 f"overall={overall_score}")

    return BriefScore(
        novelty_score=novelty_score,
        diversity_score=diversity_score,
        overall_score=overall_score
    )
