"""Section extraction, slug derivation and table-of-contents building.

A heading line is one to six ``#`` markers, whitespace and the title text.
Each heading closes the previous section and opens a new one; every other
line belongs to the body of the current section. Text before the first
heading belongs to no section, so a document without headings yields no
sections at all.
"""

import logging
import re

from ...models import TocEntry
from .document import Section

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")

_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_COLLAPSE = re.compile(r"[\s-]+")

# Slug used when a title has no word characters at all
FALLBACK_SLUG = "section"


def slugify(title: str) -> str:
    """Derive a URL-safe slug from a heading title.

    Lower-cases the title, strips characters other than word characters,
    whitespace and hyphens, then collapses runs of whitespace and hyphens
    into a single hyphen.

    Args:
        title: Heading text.

    Returns:
        The slug, e.g. ``"Brand Colors!"`` → ``"brand-colors"``.
    """
    slug = _SLUG_STRIP.sub("", title.lower())
    slug = _SLUG_COLLAPSE.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


def _unique_slug(base: str, taken: set[str]) -> str:
    """Return ``base`` or the first free ``base-N`` suffix (N >= 2)."""
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def extract_sections(text: str) -> list[Section]:
    """Split raw document text into ordered sections.

    Args:
        text: Full document text.

    Returns:
        Sections in document order. Slugs are unique: when two titles
        produce the same slug, later sections get ``-2``, ``-3``, ...
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    sections: list[Section] = []
    taken_slugs: set[str] = set()

    current: dict | None = None
    body: list[str] = []

    def close(end_line: int) -> None:
        sections.append(
            Section(
                content="\n".join(body).strip(),
                end_line=end_line,
                **current,
            )
        )

    for i, line in enumerate(lines):
        match = HEADING_PATTERN.match(line)
        if match is None:
            if current is not None:
                body.append(line)
            continue

        if current is not None:
            close(i - 1)

        title = match.group(2).strip()
        slug = _unique_slug(slugify(title), taken_slugs)
        taken_slugs.add(slug)
        current = {
            "id": f"section-{len(sections)}",
            "slug": slug,
            "title": title,
            "level": len(match.group(1)),
            "start_line": i,
        }
        body = []

    if current is not None:
        close(len(lines) - 1)

    logger.debug(f"Extracted {len(sections)} sections from {len(lines)} lines")
    return sections


def build_table_of_contents(sections: list[Section]) -> list[TocEntry]:
    """Arrange sections into a heading tree.

    A section's parent is the nearest preceding section with a lower level.
    Sections with no such ancestor become roots.

    Args:
        sections: Sections in document order.

    Returns:
        Root entries of the tree; descendants are nested in ``children``.
    """
    roots: list[TocEntry] = []
    stack: list[TocEntry] = []

    for section in sections:
        entry = TocEntry(
            id=section.id,
            slug=section.slug,
            title=section.title,
            level=section.level,
        )

        while stack and stack[-1].level >= section.level:
            stack.pop()

        if stack:
            stack[-1].children.append(entry)
        else:
            roots.append(entry)

        stack.append(entry)

    return roots
