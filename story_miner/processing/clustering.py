"""
Similarity Clustering

單趟貪婪分群：以詞集重疊率把報導同一事件的文章合併成 cluster。

策略:
1. 重疊率 >= similarity_threshold → 合併
2. 同分類且重疊率 >= same_category_threshold → 合併
合併不具遞移性 (只比對種子文章)。
"""

from typing import List, Optional, Sequence, Set
import re
import logging

from story_miner.config import ClusteringConfig
from story_miner.models import Cluster, Document
from story_miner.utils.stopwords import CLUSTER_STOP
from story_miner.utils.time import EARLIEST

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"\W+")


def cluster_terms(document: Document, config: Optional[ClusteringConfig] = None) -> List[str]:
    """
    取得分群用的詞集

    Args:
        document: 文章
        config: 分群設定

    Returns:
        去重後的詞 (依首次出現順序，最多 max_terms 個)
    """
    config = config or ClusteringConfig()
    text = f"{document.category} {document.content}".lower()

    terms: List[str] = []
    seen: Set[str] = set()
    for word in _SPLIT_RE.split(text):
        if len(word) < config.min_token_length or word in CLUSTER_STOP or word in seen:
            continue
        seen.add(word)
        terms.append(word)
        if len(terms) >= config.max_terms:
            break

    return terms


def overlap_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """交集大小 / 較大集合的大小 (分母至少為 1)"""
    set_a = set(a)
    intersection = sum(1 for term in set(b) if term in set_a)
    return intersection / max(len(set_a), len(set(b)), 1)


def select_representative(members: List[Document]) -> Document:
    """
    選取代表文章：發布時間最新者，無時間視為最早；同時間保留先出現者
    """
    # sorted 為 stable，reverse 不改變相等元素的原始順序
    ordered = sorted(
        members,
        key=lambda doc: doc.published_at or EARLIEST,
        reverse=True
    )
    return ordered[0]


def cluster_documents(
    documents: List[Document],
    config: Optional[ClusteringConfig] = None
) -> List[Cluster]:
    """
    將文章分群

    Args:
        documents: 文章 (依輸入順序處理)
        config: 分群設定

    Returns:
        List of Cluster (依種子文章順序)，對輸入形成 partition
    """
    config = config or ClusteringConfig()

    if not documents:
        return []

    terms = [cluster_terms(doc, config) for doc in documents]
    processed = [False] * len(documents)
    clusters: List[Cluster] = []

    for index, seed in enumerate(documents):
        if processed[index]:
            continue

        members = [seed]

        for other_index, other in enumerate(documents):
            if other_index == index or processed[other_index]:
                continue

            same_category = seed.category == other.category
            similarity = overlap_similarity(terms[index], terms[other_index])

            if (similarity >= config.similarity_threshold or
                    (same_category and similarity >= config.same_category_threshold)):
                members.append(other)
                processed[other_index] = True

        processed[index] = True

        clusters.append(Cluster(
            cluster_id=f"cluster-{seed.id}",
            representative=select_representative(members),
            size=len(members),
            members=members
        ))

    multi_source = sum(1 for c in clusters if c.size > 1)
    logger.info(f"Clustered {len(documents)} documents into {len(clusters)} groups " +
                f"({multi_source} with multiple sources)")

    return clusters


def get_cluster_by_id(clusters: List[Cluster], cluster_id: str) -> List[Document]:
    """取得指定 cluster 的成員，不存在則回傳空 list"""
    for cluster in clusters:
        if cluster.cluster_id == cluster_id:
            return cluster.members
    return []
