"""Scoring engine for hybrid section search.

This package provides the scoring algorithms for keyword and vector search:
- Literal keyword scoring with title weighting
- Deterministic hashed-feature vectors and cosine similarity
- Weighted fusion of the two candidate sets

Usage:
    from docsearch.engine.scoring import (
        HashingVectorizer,
        extract_terms,
        keyword_scores,
        merge_scores,
        rank_scores,
    )
"""

from .constants import (
    KEYWORD_NORMALIZER,
    MIN_TERM_LENGTH,
    STOP_WORDS,
)
from .fusion import merge_scores, rank_scores
from .keyword_scorer import (
    calculate_keyword_score,
    extract_terms,
    find_matches,
    keyword_scores,
)
from .stemmer import stem_token
from .vectorizer import (
    HashingVectorizer,
    cosine_similarities,
    cosine_similarity,
    tokenize,
)

__all__ = [
    # Constants
    "KEYWORD_NORMALIZER",
    "MIN_TERM_LENGTH",
    "STOP_WORDS",
    # Stemmer
    "stem_token",
    # Keyword scorer
    "calculate_keyword_score",
    "extract_terms",
    "find_matches",
    "keyword_scores",
    # Vectorizer
    "HashingVectorizer",
    "cosine_similarities",
    "cosine_similarity",
    "tokenize",
    # Fusion
    "merge_scores",
    "rank_scores",
]
