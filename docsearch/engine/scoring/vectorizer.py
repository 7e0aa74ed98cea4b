"""Deterministic hashed-feature vectorizer.

Texts are mapped to fixed-dimension vectors without a trained model:

1. Lower-case and tokenize on word boundaries, dropping stop words
2. Hash every token (and, at reduced weight, its stem) onto
   ``num_hashes`` coordinates with a keyed BLAKE2b digest
3. L2-normalize the accumulated term frequencies

Texts with high token overlap end up close under cosine similarity. The
digest is independent of the process, so the same text always yields the
same vector (unlike the salted built-in ``hash``).
"""

from __future__ import annotations

import hashlib
import logging
import re
import threading
from collections import Counter
from collections.abc import Sequence
from functools import lru_cache

import numpy as np

from ...config import Settings, settings as default_settings
from ...errors import DimensionMismatchError, VectorizerNotReadyError
from .constants import HASH_PERSON, STEM_FEATURE_WEIGHT, STOP_WORDS
from .stemmer import stem_token

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\w+")


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens of ``text`` with stop words removed."""
    return [t for t in _TOKEN_PATTERN.findall(text.lower()) if t not in STOP_WORDS]


@lru_cache(maxsize=65536)
def _token_slots(token: str, dimension: int, num_hashes: int) -> tuple[int, ...]:
    digest = hashlib.blake2b(
        token.encode("utf-8"), digest_size=4 * num_hashes, person=HASH_PERSON
    ).digest()
    return tuple(
        int.from_bytes(digest[4 * i : 4 * i + 4], "little") % dimension
        for i in range(num_hashes)
    )


def _freeze(vector: np.ndarray) -> np.ndarray:
    vector.setflags(write=False)
    return vector


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two vectors.

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    if a.shape != b.shape:
        raise DimensionMismatchError(a.shape[0], b.shape[0])
    magnitude = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if magnitude == 0:
        return 0.0
    return float(np.dot(a, b)) / magnitude


def cosine_similarities(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of ``query`` against every row of ``matrix``.

    Rows with zero magnitude score 0.0.

    Raises:
        DimensionMismatchError: If the row width differs from the query length.
    """
    if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
        width = matrix.shape[1] if matrix.ndim == 2 else matrix.shape[0]
        raise DimensionMismatchError(query.shape[0], width)
    query_norm = float(np.linalg.norm(query))
    row_norms = np.linalg.norm(matrix, axis=1)
    denominators = row_norms * query_norm
    dots = matrix @ query
    return np.divide(dots, denominators, out=np.zeros_like(dots), where=denominators > 0)


class HashingVectorizer:
    """Maps text to L2-normalized hashed term-frequency vectors.

    ``embed`` is pure once the vectorizer is initialized. Until
    ``initialize()`` has run, ``is_ready()`` is False and ``embed`` raises
    ``VectorizerNotReadyError`` so callers can skip vector scoring.
    """

    def __init__(
        self,
        dimension: int | None = None,
        num_hashes: int | None = None,
        stem_weight: float = STEM_FEATURE_WEIGHT,
        settings: Settings | None = None,
    ):
        """Initialize the vectorizer.

        Args:
            dimension: Vector length (default from settings).
            num_hashes: Coordinates per token (default from settings).
            stem_weight: Weight of the stem feature relative to the token.
            settings: Settings to read defaults from.
        """
        settings = settings or default_settings
        self.dimension = dimension if dimension is not None else settings.vector_dimension
        self.num_hashes = num_hashes if num_hashes is not None else settings.vector_num_hashes
        self.stem_weight = stem_weight
        self._ready = False
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Validate parameters and mark the vectorizer ready. Idempotent."""
        with self._lock:
            if self._ready:
                return
            if self.dimension < 1:
                raise ValueError(f"dimension must be positive, got {self.dimension}")
            if not 1 <= self.num_hashes <= self.dimension:
                raise ValueError(
                    f"num_hashes must be in [1, {self.dimension}], got {self.num_hashes}"
                )
            if self.stem_weight < 0:
                raise ValueError("stem_weight must be >= 0")
            self._ready = True
        logger.info(
            f"Hashing vectorizer ready: dimension={self.dimension}, "
            f"num_hashes={self.num_hashes}"
        )

    def is_ready(self) -> bool:
        return self._ready

    def embed(self, text: str) -> np.ndarray:
        """Embed one text.

        Returns:
            A read-only float64 vector of length ``dimension``; the zero
            vector when the text has no indexable tokens.

        Raises:
            VectorizerNotReadyError: If ``initialize()`` has not completed.
        """
        if not self._ready:
            raise VectorizerNotReadyError("Vectorizer used before initialize()")

        vector = np.zeros(self.dimension, dtype=np.float64)
        counts = Counter(tokenize(text))
        for token, count in counts.items():
            for slot in _token_slots(token, self.dimension, self.num_hashes):
                vector[slot] += count
            stem = stem_token(token)
            if stem != token and self.stem_weight > 0:
                for slot in _token_slots(stem, self.dimension, self.num_hashes):
                    vector[slot] += count * self.stem_weight

        norm = float(np.linalg.norm(vector))
        if norm > 0:
            vector /= norm
        return _freeze(vector)

    def embed_many(self, texts: Sequence[str]) -> list[np.ndarray]:
        return [self.embed(text) for text in texts]
