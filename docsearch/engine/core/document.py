"""Document data structures for the search engine.

Sections are created in bulk when a document is parsed and never mutated
afterwards; a reindex discards the whole set and builds a new one.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Section:
    """A heading-delimited span of the document.

    Attributes:
        id: Identifier, stable within one document version (``section-<n>``)
        slug: URL-safe identifier derived from the title, unique per snapshot
        title: Heading text
        level: Heading level (1-6)
        content: Body text below the heading, trimmed at the edges
        start_line: Line of the heading (0-indexed)
        end_line: Last line of the section (0-indexed, inclusive)
        vector: Read-only embedding of title and body, set when indexed
    """

    id: str
    slug: str
    title: str
    level: int  # Header level (1-6)
    content: str
    start_line: int
    end_line: int
    vector: np.ndarray | None = field(default=None, compare=False, repr=False)

    @property
    def heading(self) -> str:
        """The Markdown heading line for this section."""
        return f"{'#' * self.level} {self.title}"
