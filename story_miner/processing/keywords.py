"""
Keyword Extraction (TF-IDF)

單篇文章的詞頻 × 文集的逆文件頻率，輸出排序後的關鍵字。
權重由 scikit-learn TfidfVectorizer 計算 (smooth_idf, 不正規化)。
"""

from typing import Dict, List, Optional, Sequence
from functools import partial
import re
import logging

from sklearn.feature_extraction.text import TfidfVectorizer

from story_miner.models import WeightedTerm
from story_miner.utils.stopwords import KEYWORD_STOP

logger = logging.getLogger(__name__)

# Unicode 字母與數字 (不含底線)
_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str, min_length: int = 4) -> List[str]:
    """
    斷詞並過濾

    小寫化後取連續的字母數字，排除停用詞、純數字以及長度 < min_length 的詞。

    Args:
        text: 原始文字
        min_length: 最短詞長

    Returns:
        依出現順序的 token list (保留重複)
    """
    if not text:
        return []

    return [
        token for token in _TOKEN_RE.findall(text.lower())
        if len(token) >= min_length
        and not token.isdigit()
        and token not in KEYWORD_STOP
    ]


def build_vectorizer(min_length: int = 4, vocabulary: Optional[List[str]] = None) -> TfidfVectorizer:
    """
    建立 TF-IDF vectorizer

    idf = ln((N + 1) / (df + 1)) + 1，常見於多篇文件的詞權重較低但不會歸零。
    斷詞與停用詞交給 tokenize，與其他模組一致。

    Args:
        min_length: 最短詞長
        vocabulary: 固定詞表 (None = 由 fit 的文集學習)
    """
    return TfidfVectorizer(
        tokenizer=partial(tokenize, min_length=min_length),
        token_pattern=None,
        lowercase=False,
        vocabulary=vocabulary,
        norm=None,
        use_idf=True,
        smooth_idf=True,
        sublinear_tf=False,
    )


def fit_corpus(corpus: Sequence[str], min_length: int = 4) -> Optional[TfidfVectorizer]:
    """
    對整個文集 fit 一次，供多篇文章共用 (例如 topic discovery)

    Returns:
        fit 完成的 vectorizer；文集沒有任何合格詞時回傳 None
    """
    if not any(tokenize(text, min_length) for text in corpus):
        return None

    vectorizer = build_vectorizer(min_length)
    vectorizer.fit(list(corpus))
    logger.debug(f"Fitted TF-IDF vocabulary: {len(vectorizer.vocabulary_)} terms, {len(corpus)} documents")
    return vectorizer


def extract_weighted_terms(
    text: str,
    corpus: Sequence[str],
    k: int = 10,
    min_length: int = 4,
    vectorizer: Optional[TfidfVectorizer] = None
) -> List[WeightedTerm]:
    """
    抽取帶權重的關鍵字

    score = (詞數 / 合格 token 總數) * idf。同分時以在文章中先出現者為先。

    Args:
        text: 目標文章
        corpus: 文集 (通常包含目標文章)
        k: 最多輸出幾個詞
        min_length: 最短詞長
        vectorizer: fit_corpus 的結果 (其文集需包含 text；省略時以 text 的詞表對 corpus fit)

    Returns:
        最多 k 個 WeightedTerm，依 score 降序
    """
    if k < 0:
        raise ValueError(f"Unsupported keyword count: {k}")

    tokens = tokenize(text, min_length)
    if not tokens or k == 0:
        return []

    # term -> 首次出現位置
    first_seen: Dict[str, int] = {}
    for index, token in enumerate(tokens):
        first_seen.setdefault(token, index)

    if vectorizer is None:
        # 固定詞表：不在文集中的詞 df = 0，仍可計分
        vectorizer = build_vectorizer(min_length, vocabulary=list(first_seen))
        vectorizer.fit(list(corpus) or [text])

    weights = vectorizer.transform([text]).toarray().ravel()
    vocabulary = vectorizer.vocabulary_
    total = len(tokens)

    weighted = [
        WeightedTerm(term=term, score=float(weights[vocabulary[term]]) / total)
        for term in first_seen
        if term in vocabulary
    ]

    weighted.sort(key=lambda w: (-w.score, first_seen[w.term]))
    return weighted[:k]


def extract_keywords(
    text: str,
    corpus: Sequence[str],
    k: int = 10,
    min_length: int = 4,
    vectorizer: Optional[TfidfVectorizer] = None
) -> List[str]:
    """只回傳關鍵字字串"""
    terms = extract_weighted_terms(text, corpus, k, min_length, vectorizer)
    return [w.term for w in terms]
