"""Scoring constants for the hybrid search engine.

This module contains the constants shared by the keyword scorer, the
vectorizer and the result merge:
- Keyword scoring weights and normalization
- Stop words for vectorization and keyword suggestions
- Limits for suggestions
"""

# ---------------------------------------------------------------------------
# Keyword scoring
# ---------------------------------------------------------------------------
# Query terms must be longer than this to be scored or reported as matches.
MIN_TERM_LENGTH = 3

TITLE_MATCH_WEIGHT = 3.0
BODY_MATCH_WEIGHT = 1.0

# Raw keyword score is divided by (term_count * KEYWORD_NORMALIZER), then
# clamped to 1.0. Five is "every term once in the title and twice in the body".
KEYWORD_NORMALIZER = 5.0

# ---------------------------------------------------------------------------
# Vectorizer
# ---------------------------------------------------------------------------
# Stemmed variants are hashed as an extra feature at reduced weight so that
# "fonts" and "font" share coordinates without outweighing exact tokens.
STEM_FEATURE_WEIGHT = 0.5

# Personalization for the token hash; changing it changes every vector.
HASH_PERSON = b"docsearch-v1"

# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------
DEFAULT_SUGGESTION_LIMIT = 5
MAX_KEYWORD_SUGGESTIONS = 3
MIN_COMPLETION_PREFIX = 2

# ---------------------------------------------------------------------------
# Stop words: dropped from vectors and from keyword suggestions. Without this
# every section shares the coordinates of "the", "and", "for", ... and vector
# similarity drifts towards 1 for unrelated text.
# ---------------------------------------------------------------------------
STOP_WORDS = frozenset(
    {
        # Articles, auxiliaries, modals
        "a",
        "an",
        "the",
        "is",
        "are",
        "was",
        "were",
        "be",
        "been",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "would",
        "could",
        "should",
        "may",
        "might",
        "must",
        "shall",
        "can",
        # Prepositions
        "to",
        "of",
        "in",
        "for",
        "on",
        "with",
        "at",
        "by",
        "from",
        "as",
        "into",
        "about",
        "up",
        "out",
        # Conjunctions
        "and",
        "or",
        "but",
        "if",
        "so",
        "not",
        # Pronouns and determiners
        "i",
        "me",
        "my",
        "we",
        "you",
        "he",
        "she",
        "his",
        "her",
        "it",
        "its",
        "they",
        "their",
        "this",
        "that",
        "there",
        "what",
        "which",
        "who",
        "one",
        "all",
        # Common verbs
        "say",
        "get",
        "go",
    }
)
