"""
Fixed vocabulary tables for query interpretation

表格順序即比對優先序 (dict 保留插入順序)。
"""

from typing import Dict, List

from story_miner.models import AmbiguityOption, QueryIntent, Sentiment


INTENT_PATTERNS: Dict[QueryIntent, List[str]] = {
    QueryIntent.COMPARE: ['compare', 'versus', 'vs'],
    QueryIntent.ANALYZE: ['analyze', 'analysis'],
    QueryIntent.SUMMARIZE: ['summarize', 'summary'],
    QueryIntent.FILTER: ['show', 'find', 'get'],
}

SENTIMENT_PATTERNS: Dict[Sentiment, List[str]] = {
    Sentiment.POSITIVE: ['positive', 'good', 'uplifting', 'optimistic', 'favorable', 'encouraging'],
    Sentiment.NEGATIVE: ['negative', 'bad', 'concerning', 'pessimistic', 'unfavorable', 'worrying'],
    Sentiment.NEUTRAL: ['neutral', 'balanced', 'objective', 'unbiased'],
}

# "show" 不列入 Entertainment：它是 filter intent 的觸發詞
CATEGORY_PATTERNS: Dict[str, List[str]] = {
    'Technology': ['tech', 'technology', 'software', 'ai', 'artificial intelligence', 'computer', 'digital'],
    'Politics': ['politics', 'political', 'election', 'government', 'policy', 'congress', 'president'],
    'Business': ['business', 'market', 'stock', 'economy', 'company', 'trade', 'finance', 'economic'],
    'Science': ['science', 'scientific', 'research', 'study', 'discovery'],
    'Health': ['health', 'medical', 'medicine', 'healthcare', 'disease', 'wellness'],
    'Sports': ['sports', 'game', 'team', 'player', 'championship', 'league'],
    'Entertainment': ['entertainment', 'movie', 'film', 'music', 'celebrity', 'television'],
    'World News': ['world', 'international', 'global', 'foreign'],
    'Environment': ['environment', 'climate', 'green', 'sustainability', 'pollution'],
}

# 命名時間窗，解析邏輯在 parser.resolve_time_window
TIME_PATTERNS: List[str] = ['today', 'yesterday', 'this week', 'last week', 'this month', 'last month']

RECENT_PATTERNS: List[str] = ['recent', 'latest']

AMBIGUOUS_ENTITIES: Dict[str, List[AmbiguityOption]] = {
    'apple': [
        AmbiguityOption(label='Apple Inc. (Technology)', value='apple_tech',
                        description='Tech company, iPhone, Mac', confidence=0.8),
        AmbiguityOption(label='Apple (Fruit)', value='apple_fruit',
                        description='The fruit', confidence=0.2),
    ],
    'bank': [
        AmbiguityOption(label='Banking & Finance', value='bank_finance',
                        description='Financial institutions', confidence=0.85),
        AmbiguityOption(label='River Bank', value='bank_nature',
                        description='Geographic feature', confidence=0.15),
    ],
    'amazon': [
        AmbiguityOption(label='Amazon.com', value='amazon_company',
                        description='E-commerce company', confidence=0.9),
        AmbiguityOption(label='Amazon Rainforest', value='amazon_nature',
                        description='South American forest', confidence=0.1),
    ],
    'python': [
        AmbiguityOption(label='Python (Programming)', value='python_tech',
                        description='Programming language', confidence=0.7),
        AmbiguityOption(label='Python (Snake)', value='python_animal',
                        description='The reptile', confidence=0.3),
    ],
    'tesla': [
        AmbiguityOption(label='Tesla Inc.', value='tesla_company',
                        description='Electric car company', confidence=0.85),
        AmbiguityOption(label='Nikola Tesla', value='tesla_person',
                        description='Historical inventor', confidence=0.15),
    ],
    'china': [
        AmbiguityOption(label='China (Country)', value='china_country',
                        description="People's Republic of China", confidence=0.8),
        AmbiguityOption(label='China (Economy)', value='china_economy',
                        description='Chinese business/trade', confidence=0.2),
    ],
    'virus': [
        AmbiguityOption(label='Computer Virus', value='virus_tech',
                        description='Malware, cybersecurity', confidence=0.4),
        AmbiguityOption(label='Biological Virus', value='virus_health',
                        description='Disease, pandemic', confidence=0.6),
    ],
}

VAGUE_TERMS: List[str] = ['stuff', 'things', 'news', 'latest', 'recent', 'something', 'anything', 'everything']


def pattern_words() -> set:
    """intent / sentiment / category / time 表格中出現過的所有單字"""
    phrases = (
        [p for words in INTENT_PATTERNS.values() for p in words] +
        [p for words in SENTIMENT_PATTERNS.values() for p in words] +
        [p for words in CATEGORY_PATTERNS.values() for p in words] +
        TIME_PATTERNS +
        RECENT_PATTERNS
    )
    return {word for phrase in phrases for word in phrase.split()}
