"""
Stop word sets shared by keyword extraction, clustering and query parsing.
"""

# General English function words and newsroom filler ignored by keyword extraction.
KEYWORD_STOP = frozenset({
    "the", "and", "for", "its", "new", "all", "has", "was", "are", "not",
    "but", "from", "with", "will", "been", "have", "this", "that", "said",
    "over", "more", "than", "also", "into", "amid", "who", "how", "why",
    "may", "can", "now", "per", "via", "they", "them", "their", "there",
    "these", "those", "which", "while", "what", "when", "where", "were",
    "would", "could", "should", "about", "after", "before", "being", "other",
    "some", "such", "only", "just", "very", "most", "many", "much", "each",
    "both", "then", "here", "your", "yours", "ours", "because",
    "under", "again", "further", "once", "during", "against", "between",
    "through", "above", "below", "down", "does", "doing", "having", "itself",
    "says", "year", "years", "week", "weeks", "told", "like", "make", "made",
    "according", "including", "still", "even", "since", "until", "within",
    "without", "across", "around", "first", "last", "time", "times",
})

# Clustering stop words, applied to tokens already longer than 4 characters.
CLUSTER_STOP = frozenset({
    "about", "after", "before", "being", "could", "would", "should", "their",
    "there", "these", "those", "which", "while", "other",
})

# Query filler removed before keyword filtering.
QUERY_STOP = frozenset({
    "show", "me", "find", "get", "the", "a", "an", "from", "in", "on", "at",
    "to", "for", "of", "with", "about", "and", "or", "any", "all", "what",
    "news", "article", "articles", "story", "stories", "give", "tell",
    "are", "is", "was", "were", "there", "that", "this", "some",
})
