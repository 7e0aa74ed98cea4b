import logging

import numpy as np
import pytest
from pydantic import ValidationError

from docsearch.config import Settings
from docsearch.engine.core.document import Section
from docsearch.engine.index import IndexSnapshot, IndexStore
from docsearch.engine.scoring.vectorizer import HashingVectorizer
from docsearch.engine.search import HybridSearchEngine
from docsearch.errors import DimensionMismatchError, InvalidConfigError, InvalidQueryError
from docsearch.models import SuggestionType


def _comparable(response) -> list[tuple[str, float, list[str]]]:
    return [(r.section.id, r.score, r.matches) for r in response.results]


class TestSearch:
    @pytest.mark.asyncio
    async def test_brand_colors_ranked_first(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("brand colors")

        assert response.results
        top = response.results[0]
        assert top.section.slug == "brand-colors"
        assert top.score > 0
        assert all(top.score > r.score for r in response.results[1:])

    @pytest.mark.asyncio
    async def test_response_shape(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("  brand  ")

        assert response.query == "brand"
        assert response.total_results == len(response.results)
        assert response.search_time >= 0
        payload = response.model_dump(by_alias=True)
        assert set(payload) == {"query", "results", "totalResults", "searchTime"}
        assert set(payload["results"][0]["section"]) == {"id", "slug", "title", "content", "level"}

    @pytest.mark.asyncio
    async def test_scores_within_unit_interval(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("brand brand brand colors typography fonts")

        assert all(0.0 <= r.score <= 1.0 for r in response.results)

    @pytest.mark.asyncio
    async def test_case_insensitive(self, engine: HybridSearchEngine) -> None:
        lower = await engine.search("brand")
        upper = await engine.search("BRAND")

        assert _comparable(lower) == _comparable(upper)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    async def test_empty_query_returns_nothing(
        self, engine: HybridSearchEngine, query: str
    ) -> None:
        response = await engine.search(query)

        assert response.results == []
        assert response.total_results == 0

    @pytest.mark.asyncio
    async def test_repeated_search_is_identical(self, engine: HybridSearchEngine) -> None:
        first = await engine.search("modern brand fonts")
        second = await engine.search("modern brand fonts")

        assert _comparable(first) == _comparable(second)

    @pytest.mark.asyncio
    async def test_limit_one(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("brand", limit=1)

        assert len(response.results) == 1
        assert response.total_results == 1

    @pytest.mark.asyncio
    async def test_match_information(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("blue")

        assert response.results[0].section.slug == "brand-colors"
        assert "blue" in response.results[0].matches

    @pytest.mark.asyncio
    async def test_multi_word_query(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("font typography")

        assert response.results[0].section.slug == "typography"

    @pytest.mark.asyncio
    async def test_related_word_forms(self, engine: HybridSearchEngine) -> None:
        response = await engine.search("fonts")

        assert any(r.section.slug == "typography" for r in response.results)

    @pytest.mark.asyncio
    async def test_long_query(self, engine: HybridSearchEngine) -> None:
        query = "this is a very long query that contains many words and should still work properly"

        response = await engine.search(query)

        assert response.query == query


class TestSearchValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, 101, 2.5, "5", True])
    async def test_invalid_limit_rejected(self, engine: HybridSearchEngine, limit) -> None:
        with pytest.raises(InvalidQueryError):
            await engine.search("brand", limit=limit)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [1, 100])
    async def test_limit_bounds_accepted(self, engine: HybridSearchEngine, limit: int) -> None:
        response = await engine.search("brand", limit=limit)

        assert len(response.results) <= limit

    @pytest.mark.asyncio
    async def test_query_too_long(self, engine: HybridSearchEngine) -> None:
        with pytest.raises(InvalidQueryError, match="too long"):
            await engine.search("x" * 501)

    @pytest.mark.asyncio
    async def test_limit_checked_even_for_empty_query(self, engine: HybridSearchEngine) -> None:
        with pytest.raises(InvalidQueryError):
            await engine.search("", limit=0)


class TestStrategies:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["brand", "colors blue", "typography", "zzz"])
    async def test_both_strategies_disabled(self, engine: HybridSearchEngine, query: str) -> None:
        engine.update_config(enable_semantic_search=False, enable_keyword_search=False)

        response = await engine.search(query)

        assert response.results == []

    @pytest.mark.asyncio
    async def test_keyword_only_scores(self, engine: HybridSearchEngine) -> None:
        engine.update_config(enable_semantic_search=False)

        response = await engine.search("brand colors")

        scores = {r.section.slug: r.score for r in response.results}
        assert scores == pytest.approx(
            {"brand-colors": 0.8, "introduction": 0.1, "typography": 0.1}
        )
        # Ties are broken by document order
        assert [r.section.slug for r in response.results] == [
            "brand-colors",
            "introduction",
            "typography",
        ]

    @pytest.mark.asyncio
    async def test_keyword_only_no_match(self, engine: HybridSearchEngine) -> None:
        engine.update_config(enable_semantic_search=False)

        response = await engine.search("nonexistent")

        assert response.results == []
        assert response.total_results == 0

    @pytest.mark.asyncio
    async def test_vector_only_respects_min_score(self, engine: HybridSearchEngine) -> None:
        engine.update_config(enable_keyword_search=False, min_score=0.2)

        response = await engine.search("brand colors")

        assert response.results
        assert response.results[0].section.slug == "brand-colors"
        assert all(r.score >= 0.2 for r in response.results)

    @pytest.mark.asyncio
    async def test_vectorizer_not_ready_degrades_to_keyword(
        self,
        sample_sections: list[Section],
        test_settings: Settings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        store = IndexStore(HashingVectorizer(dimension=64, num_hashes=2))
        store.swap(store.build(sample_sections))
        engine = HybridSearchEngine(store, settings=test_settings)

        with caplog.at_level(logging.WARNING, logger="docsearch"):
            response = await engine.search("brand colors")

        assert response.results[0].section.slug == "brand-colors"
        assert response.results[0].score == pytest.approx(0.8)
        assert "Vectorizer not ready" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_falls_back_to_keyword_results(
        self, engine: HybridSearchEngine
    ) -> None:
        response = await engine.search("brand colors", timeout=0)

        scores = {r.section.slug: r.score for r in response.results}
        assert scores["brand-colors"] == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_generous_timeout_matches_untimed_search(
        self, engine: HybridSearchEngine
    ) -> None:
        timed = await engine.search("brand colors", timeout=5.0)
        untimed = await engine.search("brand colors")

        assert _comparable(timed) == _comparable(untimed)

    @pytest.mark.asyncio
    async def test_dimension_mismatch_fails_loudly(
        self, store: IndexStore, test_settings: Settings, sample_sections: list[Section]
    ) -> None:
        vector = np.ones(16) / 4.0
        vector.setflags(write=False)
        corrupted = IndexSnapshot(
            sections=(Section(**{**_fields(sample_sections[0]), "vector": vector}),),
            version=store.current().version + 1,
            dimension=16,
            matrix=np.vstack([vector]),
            vector_ids=(sample_sections[0].id,),
        )
        store.swap(corrupted)
        engine = HybridSearchEngine(store, settings=test_settings)

        with pytest.raises(DimensionMismatchError):
            await engine.search("introduction")


def _fields(section: Section) -> dict:
    return {
        "id": section.id,
        "slug": section.slug,
        "title": section.title,
        "level": section.level,
        "content": section.content,
        "start_line": section.start_line,
        "end_line": section.end_line,
    }


class TestConfig:
    def test_defaults(self, engine: HybridSearchEngine) -> None:
        config = engine.get_config()

        assert config.max_results == 10
        assert config.min_score == 0.1
        assert config.enable_semantic_search is True
        assert config.enable_keyword_search is True
        assert (config.vector_weight, config.keyword_weight) == (0.6, 0.4)

    @pytest.mark.asyncio
    async def test_update_max_results(self, engine: HybridSearchEngine) -> None:
        engine.update_config(max_results=1)

        assert engine.get_config().max_results == 1
        assert len((await engine.search("brand")).results) == 1

    def test_update_returns_new_immutable_config(self, engine: HybridSearchEngine) -> None:
        before = engine.get_config()

        after = engine.update_config(min_score=0.5)

        assert before.min_score == 0.1
        assert after.min_score == 0.5
        with pytest.raises(ValidationError):
            after.min_score = 0.9

    @pytest.mark.parametrize(
        "changes",
        [
            {"bogus": 1},
            {"min_score": 2.0},
            {"max_results": 0},
            {"vector_weight": 0.0, "keyword_weight": 0.0},
        ],
    )
    def test_invalid_update_rejected(self, engine: HybridSearchEngine, changes: dict) -> None:
        before = engine.get_config()

        with pytest.raises(InvalidConfigError):
            engine.update_config(**changes)

        assert engine.get_config() is before

    @pytest.mark.asyncio
    async def test_weights_are_configurable(self, engine: HybridSearchEngine) -> None:
        engine.update_config(vector_weight=0.0, keyword_weight=1.0)

        response = await engine.search("brand colors")

        scores = {r.section.slug: r.score for r in response.results}
        assert scores["brand-colors"] == pytest.approx(0.8)


class TestSuggest:
    def test_section_and_keyword_suggestions(self, engine: HybridSearchEngine) -> None:
        suggestions = engine.suggest("typo")

        assert [(s.text, s.type) for s in suggestions] == [
            ("Typography", SuggestionType.SECTION),
            ("typography", SuggestionType.KEYWORD),
        ]
        assert suggestions[0].slug == "typography"

    def test_completion_keeps_leading_words(self, engine: HybridSearchEngine) -> None:
        suggestions = engine.suggest("modern fon")

        assert [s.text for s in suggestions if s.type is SuggestionType.KEYWORD] == [
            "modern fonts"
        ]

    def test_limit(self, engine: HybridSearchEngine) -> None:
        assert len(engine.suggest("brand", limit=1)) == 1

    def test_empty_query_rejected(self, engine: HybridSearchEngine) -> None:
        with pytest.raises(InvalidQueryError):
            engine.suggest("  ")

    def test_vocabulary_excludes_stop_words(self, store: IndexStore) -> None:
        vocabulary = HybridSearchEngine.vocabulary(store.current())

        assert "brand" in vocabulary
        assert "the" not in vocabulary
        assert vocabulary == sorted(vocabulary)
