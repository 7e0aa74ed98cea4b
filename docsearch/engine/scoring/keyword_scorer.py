"""Keyword scoring for the hybrid search engine.

Keyword scoring is literal: query terms are counted as case-insensitive
substrings of the section title and body, with title hits weighted higher.
Match reporting is separate and stricter, it looks for whole-word
occurrences in the body only.
"""

import logging
import re
from collections.abc import Sequence
from typing import Protocol

from .constants import (
    BODY_MATCH_WEIGHT,
    KEYWORD_NORMALIZER,
    MIN_TERM_LENGTH,
    TITLE_MATCH_WEIGHT,
)

logger = logging.getLogger(__name__)


class SectionProtocol(Protocol):
    """Protocol for Section-like objects."""

    id: str
    title: str
    content: str


def extract_terms(query: str) -> list[str]:
    """Split a query into lower-case terms, dropping short ones.

    Args:
        query: The search query string.

    Returns:
        Whitespace-delimited terms of at least ``MIN_TERM_LENGTH`` characters,
        in query order (duplicates kept, they count twice).
    """
    return [term for term in query.lower().split() if len(term) >= MIN_TERM_LENGTH]


def raw_keyword_score(section: SectionProtocol, terms: Sequence[str]) -> float:
    """Sum weighted title and body occurrences of every term."""
    title_lower = section.title.lower()
    content_lower = section.content.lower()

    score = 0.0
    for term in terms:
        score += title_lower.count(term) * TITLE_MATCH_WEIGHT
        score += content_lower.count(term) * BODY_MATCH_WEIGHT
    return score


def calculate_keyword_score(section: SectionProtocol, terms: Sequence[str]) -> float:
    """Calculate the normalized keyword score of a section.

    Args:
        section: The section to score.
        terms: Terms from ``extract_terms``.

    Returns:
        ``raw / (len(terms) * 5)`` clamped to [0, 1]; 0.0 when there are no
        terms or nothing matched.
    """
    if not terms:
        return 0.0
    raw = raw_keyword_score(section, terms)
    if raw <= 0:
        return 0.0
    return min(raw / (len(terms) * KEYWORD_NORMALIZER), 1.0)


def keyword_scores(
    sections: Sequence[SectionProtocol],
    terms: Sequence[str],
) -> dict[str, float]:
    """Score every section, keeping only those with a non-zero score.

    Returns:
        Dictionary mapping section IDs to keyword scores in (0, 1].
    """
    if not terms:
        return {}

    scores: dict[str, float] = {}
    for section in sections:
        score = calculate_keyword_score(section, terms)
        if score > 0:
            scores[section.id] = score

    logger.debug(f"Keyword scoring: {len(terms)} terms, {len(scores)} sections matched")
    return scores


def find_matches(terms: Sequence[str], content: str) -> list[str]:
    """Report whole-word, case-insensitive occurrences of terms in a body.

    Matches are returned as they appear in the content, de-duplicated in
    first-seen order, so ``"Blue"`` and ``"blue"`` are both reported.

    Args:
        terms: Terms from ``extract_terms``.
        content: Section body text.

    Returns:
        The literal matched strings.
    """
    seen: dict[str, None] = {}
    for term in terms:
        if len(term) < MIN_TERM_LENGTH:
            continue
        pattern = re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
        for match in pattern.finditer(content):
            seen.setdefault(match.group(0), None)
    return list(seen)
