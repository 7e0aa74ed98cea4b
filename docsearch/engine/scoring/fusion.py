"""Weighted score fusion for hybrid search.

Vector and keyword candidates are merged by section identity:

    score(d) = w_vec * vector(d) + w_kw * keyword(d)    if d is in both sets
    score(d) = vector(d) or keyword(d)                  if d is in one set

A section found by only one strategy keeps that strategy's score unchanged;
it is not penalized for being absent from the other one. Both weights come
from the search config.
"""

from collections.abc import Mapping


def merge_scores(
    vector_scores: Mapping[str, float],
    keyword_scores: Mapping[str, float],
    vector_weight: float = 0.6,
    keyword_weight: float = 0.4,
) -> dict[str, float]:
    """Union two candidate sets into one hybrid score per section.

    Args:
        vector_scores: Section ID → cosine similarity (already thresholded).
        keyword_scores: Section ID → normalized keyword score.
        vector_weight: Weight of the vector score for sections in both sets.
        keyword_weight: Weight of the keyword score for sections in both sets.

    Returns:
        Section ID → hybrid score clamped to [0, 1].
    """
    merged: dict[str, float] = {}
    for sid in vector_scores.keys() | keyword_scores.keys():
        if sid in vector_scores and sid in keyword_scores:
            score = vector_weight * vector_scores[sid] + keyword_weight * keyword_scores[sid]
        elif sid in vector_scores:
            score = vector_scores[sid]
        else:
            score = keyword_scores[sid]
        merged[sid] = min(max(score, 0.0), 1.0)
    return merged


def rank_scores(
    scores: Mapping[str, float],
    order: Mapping[str, int],
    limit: int | None = None,
) -> list[tuple[str, float]]:
    """Sort hybrid scores descending, breaking ties by document order.

    Args:
        scores: Section ID → hybrid score.
        order: Section ID → position of the section in the document.
        limit: Maximum number of entries to return (all when None).

    Returns:
        List of (section_id, score) tuples.
    """
    ranked = sorted(scores.items(), key=lambda item: (-item[1], order[item[0]]))
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
