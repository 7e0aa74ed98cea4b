import pytest

from docsearch.engine.core.document import Section
from docsearch.engine.scoring.keyword_scorer import (
    calculate_keyword_score,
    extract_terms,
    find_matches,
    keyword_scores,
)


def _section(title: str, content: str, sid: str = "s") -> Section:
    return Section(
        id=sid,
        slug=sid,
        title=title,
        level=2,
        content=content,
        start_line=0,
        end_line=1,
    )


class TestExtractTerms:
    def test_lowercases_and_drops_short_terms(self) -> None:
        assert extract_terms("  The Brand of COLORS is ok ") == ["the", "brand", "colors"]

    def test_empty(self) -> None:
        assert extract_terms("a an of") == []


class TestCalculateKeywordScore:
    def test_title_weighted_three_times_body(self) -> None:
        """raw = 3 * title + body, divided by term_count * 5."""
        section = _section("Brand Colors", "Our brand uses specific colors.")

        # brand: 3 + 1, colors: 3 + 1 -> 8 / (2 * 5)
        assert calculate_keyword_score(section, ["brand", "colors"]) == pytest.approx(0.8)

    def test_body_only(self) -> None:
        section = _section("Typography", "for all brand communications")

        assert calculate_keyword_score(section, ["brand"]) == pytest.approx(0.2)

    def test_substring_occurrences_count(self) -> None:
        section = _section("Logos", "Logo guidelines for branding")

        # "logo" in "logos" (title) and "logo" (body); "brand" inside "branding"
        assert calculate_keyword_score(section, ["logo"]) == pytest.approx(0.8)
        assert calculate_keyword_score(section, ["brand"]) == pytest.approx(0.2)

    def test_clamped_to_one(self) -> None:
        section = _section("Brand Brand", "brand brand brand")

        assert calculate_keyword_score(section, ["brand"]) == 1.0

    def test_no_terms_or_no_match_scores_zero(self) -> None:
        section = _section("Brand Colors", "blue")

        assert calculate_keyword_score(section, []) == 0.0
        assert calculate_keyword_score(section, ["typography"]) == 0.0

    def test_regex_characters_are_literal(self) -> None:
        section = _section("Pricing", "costs $5.00 (USD)")

        assert calculate_keyword_score(section, ["$5.00"]) > 0
        assert calculate_keyword_score(section, ["(usd)"]) > 0
        assert calculate_keyword_score(section, ["$5x00"]) == 0.0


class TestKeywordScores:
    def test_only_matching_sections_are_kept(self, sample_sections: list[Section]) -> None:
        scores = keyword_scores(sample_sections, ["colors"])

        assert set(scores) == {"section-2"}

    def test_no_terms(self, sample_sections: list[Section]) -> None:
        assert keyword_scores(sample_sections, []) == {}


class TestFindMatches:
    def test_whole_word_case_insensitive(self) -> None:
        content = "Blue is our colour. blue again, but not bluebird."

        assert find_matches(["blue"], content) == ["Blue", "blue"]

    def test_short_terms_ignored(self) -> None:
        assert find_matches(["is", "our"], "Blue is our colour") == ["our"]

    def test_no_match(self) -> None:
        assert find_matches(["red"], "blue and green") == []
