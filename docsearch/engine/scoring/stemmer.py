"""Light suffix stemmer used to group morphological variants.

No linguistic resources are needed; the rules only strip common English
suffixes, with minimum-length guards so short words keep enough characters to
stay distinctive.
"""

# (suffix, minimum word length, excluded ending) in the order they are tried.
# Longer suffixes first, so "ness" wins over "s".
_SUFFIX_RULES: tuple[tuple[str, int, str | None], ...] = (
    ("tion", 8, None),
    ("ment", 8, None),
    ("ness", 8, None),
    ("able", 8, None),
    ("ible", 8, None),
    ("ing", 7, None),
    ("ies", 7, None),
    ("ed", 6, "eed"),
    ("er", 6, None),
    ("ly", 6, None),
    ("es", 6, None),
    ("s", 5, "ss"),
)


def stem_token(word: str) -> str:
    """Strip one common English suffix from a lower-cased word.

    ``stem_token("fonts")`` → ``"font"``, ``stem_token("colors")`` →
    ``"color"``, while ``stem_token("class")`` stays ``"class"``.

    Args:
        word: The word to stem.

    Returns:
        The stemmed word (lowercased); unchanged when no rule applies.
    """
    word = word.lower()
    for suffix, min_length, excluded in _SUFFIX_RULES:
        if len(word) < min_length or not word.endswith(suffix):
            continue
        if excluded is not None and word.endswith(excluded):
            continue
        return word[: -len(suffix)]
    return word
