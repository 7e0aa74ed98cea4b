"""Hybrid search engine.

Runs two independent strategies against the live index snapshot and merges
them into one ranked list:

1. Vector strategy: cosine similarity between the hashed query vector and
   every section vector, thresholded by ``min_score``
2. Keyword strategy: literal title/body term counts, normalized to [0, 1]

The engine owns its ``SearchConfig``. Updates replace the config object
wholesale, and every query reads the config and the snapshot once at the
start, so a concurrent update or reindex never mixes states within a query.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from time import monotonic
from typing import Any

from pydantic import ValidationError

from ..config import MAX_RESULT_LIMIT, MIN_RESULT_LIMIT, Settings, settings as default_settings
from ..errors import InvalidConfigError, InvalidQueryError, VectorizerNotReadyError
from ..models import (
    SearchConfig,
    SearchResponse,
    SearchResult,
    SectionInfo,
    Suggestion,
    SuggestionType,
)
from .core.document import Section
from .index import IndexSnapshot, IndexStore
from .scoring.constants import (
    DEFAULT_SUGGESTION_LIMIT,
    MAX_KEYWORD_SUGGESTIONS,
    MIN_COMPLETION_PREFIX,
    STOP_WORDS,
)
from .scoring.fusion import merge_scores, rank_scores
from .scoring.keyword_scorer import extract_terms, find_matches, keyword_scores
from .scoring.vectorizer import HashingVectorizer, cosine_similarities

logger = logging.getLogger(__name__)

_VOCABULARY_PATTERN = re.compile(r"\b[a-z]{3,}\b")


def to_section_info(section: Section) -> SectionInfo:
    return SectionInfo(
        id=section.id,
        slug=section.slug,
        title=section.title,
        content=section.content,
        level=section.level,
    )


class HybridSearchEngine:
    """Answers free-text queries against an ``IndexStore``.

    Queries never take a lock: each one reads the live snapshot reference and
    the config reference once and works on those immutable objects.
    """

    def __init__(
        self,
        store: IndexStore,
        config: SearchConfig | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the search engine.

        Args:
            store: Index store to read snapshots from.
            config: Initial search config (default derived from settings).
            settings: Settings for defaults and input limits.
        """
        settings = settings or default_settings
        self.store = store
        self.max_query_length = settings.max_query_length
        self._config = config or SearchConfig.from_settings(settings)
        self._config_lock = threading.Lock()

    @property
    def vectorizer(self) -> HashingVectorizer:
        return self.store.vectorizer

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_config(self) -> SearchConfig:
        """Return the current config (immutable)."""
        return self._config

    def update_config(self, **changes: Any) -> SearchConfig:
        """Apply a partial config update.

        Args:
            **changes: ``SearchConfig`` fields to change.

        Returns:
            The new config.

        Raises:
            InvalidConfigError: On unknown fields or invalid values; the
                previous config stays live.
        """
        with self._config_lock:
            merged = {**self._config.model_dump(), **changes}
            try:
                new_config = SearchConfig.model_validate(merged)
            except ValidationError as e:
                raise InvalidConfigError(f"Invalid search config update: {e}") from e
            self._config = new_config
        logger.info(f"Search configuration updated: {changes}")
        return new_config

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _validate(self, query: str, limit: int | None) -> None:
        if not isinstance(query, str):
            raise InvalidQueryError("Query must be a string")
        if len(query) > self.max_query_length:
            raise InvalidQueryError(
                f"Query too long (max {self.max_query_length} characters)"
            )
        if limit is None:
            return
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidQueryError(
                f"Limit must be a number between {MIN_RESULT_LIMIT} and {MAX_RESULT_LIMIT}"
            )
        if not MIN_RESULT_LIMIT <= limit <= MAX_RESULT_LIMIT:
            raise InvalidQueryError(
                f"Limit must be a number between {MIN_RESULT_LIMIT} and {MAX_RESULT_LIMIT}"
            )

    def _vector_scores(
        self,
        query: str,
        snapshot: IndexSnapshot,
        min_score: float,
    ) -> dict[str, float]:
        """Cosine similarity of the query against every section vector.

        Raises:
            VectorizerNotReadyError: If the vectorizer is not initialized.
            DimensionMismatchError: If query and snapshot dimensions differ.
        """
        if snapshot.matrix is None or not snapshot.vector_ids:
            return {}

        query_vector = self.vectorizer.embed(query)
        similarities = cosine_similarities(query_vector, snapshot.matrix)

        scores: dict[str, float] = {}
        for sid, similarity in zip(snapshot.vector_ids, similarities.tolist()):
            if similarity >= min_score:
                scores[sid] = min(similarity, 1.0)
        return scores

    async def _vector_scores_bounded(
        self,
        query: str,
        snapshot: IndexSnapshot,
        config: SearchConfig,
        timeout: float | None,
    ) -> dict[str, float]:
        if not self.vectorizer.is_ready():
            logger.warning("Vectorizer not ready, skipping vector search")
            return {}

        try:
            if timeout is None:
                return self._vector_scores(query, snapshot, config.min_score)
            return await asyncio.wait_for(
                asyncio.to_thread(self._vector_scores, query, snapshot, config.min_score),
                timeout=timeout,
            )
        except VectorizerNotReadyError:
            logger.warning("Vectorizer not ready, skipping vector search")
            return {}
        except TimeoutError:
            logger.warning(
                f"Vector search exceeded {timeout}s for query '{query}', "
                "returning keyword results only"
            )
            return {}

    async def search(
        self,
        query: str,
        limit: int | None = None,
        timeout: float | None = None,
    ) -> SearchResponse:
        """Search the live snapshot.

        Args:
            query: Free-text query; empty or whitespace-only returns no results.
            limit: Maximum results, in [1, 100] (default ``max_results``).
            timeout: Seconds allowed for vector scoring; on expiry the vector
                strategy is abandoned and keyword results are returned.

        Returns:
            SearchResponse with ranked results and elapsed milliseconds.

        Raises:
            InvalidQueryError: If the query is too long or the limit invalid.
            DimensionMismatchError: If the snapshot is corrupted.
        """
        start = monotonic()
        self._validate(query, limit)

        query = query.strip()
        config = self._config
        snapshot = self.store.current()
        limit = limit if limit is not None else config.max_results

        if not query:
            return SearchResponse(query=query, search_time=1000 * (monotonic() - start))

        terms = extract_terms(query)

        kw_scores: dict[str, float] = {}
        if config.enable_keyword_search:
            kw_scores = keyword_scores(snapshot.sections, terms)

        vec_scores: dict[str, float] = {}
        if config.enable_semantic_search:
            vec_scores = await self._vector_scores_bounded(query, snapshot, config, timeout)

        merged = merge_scores(
            vec_scores,
            kw_scores,
            vector_weight=config.vector_weight,
            keyword_weight=config.keyword_weight,
        )
        ranked = rank_scores(merged, snapshot.order, limit=limit)

        results: list[SearchResult] = []
        for sid, score in ranked:
            section = snapshot.get(sid)
            results.append(
                SearchResult(
                    section=to_section_info(section),
                    score=score,
                    matches=find_matches(terms, section.content),
                )
            )

        elapsed_ms = 1000 * (monotonic() - start)
        logger.debug(
            f"Search '{query}' on snapshot v{snapshot.version}: "
            f"{len(vec_scores)} vector hits, {len(kw_scores)} keyword hits, "
            f"{len(results)} results in {elapsed_ms:.1f}ms"
        )
        return SearchResponse(
            query=query,
            results=results,
            total_results=len(results),
            search_time=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggest(self, query: str, limit: int = DEFAULT_SUGGESTION_LIMIT) -> list[Suggestion]:
        """Suggest sections and completions for a partial query.

        Section suggestions come first: sections whose title or body contains
        the query. Then up to three completions of the last query word from
        the document vocabulary.

        Raises:
            InvalidQueryError: If the query is empty or the limit invalid.
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidQueryError("Query is required")
        self._validate(query, limit)

        snapshot = self.store.current()
        query_lower = query.lower()

        suggestions = [
            Suggestion(text=s.title, type=SuggestionType.SECTION, slug=s.slug)
            for s in snapshot.sections
            if query_lower in s.title.lower() or query_lower in s.content.lower()
        ][:limit]

        words = query_lower.split()
        last_word = words[-1]
        if len(last_word) >= MIN_COMPLETION_PREFIX:
            completions = [
                word
                for word in self.vocabulary(snapshot)
                if word.startswith(last_word)
            ][:MAX_KEYWORD_SUGGESTIONS]
            suggestions.extend(
                Suggestion(text=" ".join(words[:-1] + [word]), type=SuggestionType.KEYWORD)
                for word in completions
            )

        return suggestions[:limit]

    @staticmethod
    def vocabulary(snapshot: IndexSnapshot) -> list[str]:
        """Sorted distinct words (3+ letters, no stop words) of a snapshot."""
        words: set[str] = set()
        for section in snapshot.sections:
            text = f"{section.title} {section.content}".lower()
            words.update(_VOCABULARY_PATTERN.findall(text))
        return sorted(words - STOP_WORDS)
