"""Index store: immutable snapshots and the live snapshot pointer.

A snapshot holds every section of one document version together with its
vector. Snapshots are never patched. A rebuild produces a new one and
``swap`` replaces the live reference in a single assignment, so a reader
that grabbed ``current()`` keeps a consistent view for the whole query.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from time import monotonic

import numpy as np

from ..errors import IndexIntegrityError
from .core.document import Section
from .scoring.vectorizer import HashingVectorizer

logger = logging.getLogger(__name__)


def section_text(section: Section) -> str:
    """Text embedded for a section: title followed by body."""
    return f"{section.title} {section.content}"


@dataclass(frozen=True)
class IndexSnapshot:
    """One immutable, fully built version of the search index.

    Attributes:
        sections: Indexed sections in document order
        version: Monotonic build number (0 for the empty startup snapshot)
        dimension: Vector length shared by all sections, None if unvectorized
        matrix: Read-only stack of section vectors, one row per entry in
            ``vector_ids``
        vector_ids: Section IDs of the matrix rows
        text: Source text the sections were extracted from, if known
        built_at: When the snapshot was built
    """

    sections: tuple[Section, ...]
    version: int
    dimension: int | None = None
    matrix: np.ndarray | None = field(default=None, repr=False, compare=False)
    vector_ids: tuple[str, ...] = ()
    text: str | None = field(default=None, repr=False)
    built_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    _by_id: dict[str, Section] = field(init=False, repr=False, compare=False)
    _by_slug: dict[str, Section] = field(init=False, repr=False, compare=False)
    _order: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {s.id: s for s in self.sections})
        object.__setattr__(self, "_by_slug", {s.slug: s for s in self.sections})
        object.__setattr__(self, "_order", {s.id: i for i, s in enumerate(self.sections)})

    @classmethod
    def empty(cls) -> IndexSnapshot:
        return cls(sections=(), version=0)

    def __len__(self) -> int:
        return len(self.sections)

    @property
    def order(self) -> dict[str, int]:
        """Section ID → position in the document."""
        return self._order

    def get(self, section_id: str) -> Section | None:
        return self._by_id.get(section_id)

    def get_by_slug(self, slug: str) -> Section | None:
        return self._by_slug.get(slug)

    def validate(self) -> None:
        """Check the snapshot invariants.

        Raises:
            IndexIntegrityError: On duplicate IDs or slugs, invalid heading
                levels, or vectors that disagree with ``dimension``.
        """
        if len(self._by_id) != len(self.sections):
            raise IndexIntegrityError("Duplicate section IDs in snapshot")
        if len(self._by_slug) != len(self.sections):
            raise IndexIntegrityError("Duplicate section slugs in snapshot")
        for section in self.sections:
            if not 1 <= section.level <= 6:
                raise IndexIntegrityError(
                    f"Section {section.id} has invalid level {section.level}"
                )
            if section.vector is None:
                continue
            if self.dimension is None or section.vector.shape != (self.dimension,):
                raise IndexIntegrityError(
                    f"Section {section.id} vector shape {section.vector.shape} "
                    f"does not match snapshot dimension {self.dimension}"
                )
        if self.matrix is not None:
            if self.matrix.shape != (len(self.vector_ids), self.dimension):
                raise IndexIntegrityError(
                    f"Vector matrix shape {self.matrix.shape} does not match "
                    f"{len(self.vector_ids)} sections of dimension {self.dimension}"
                )
            unknown = [sid for sid in self.vector_ids if sid not in self._by_id]
            if unknown:
                raise IndexIntegrityError(f"Vector rows for unknown sections: {unknown}")


class IndexStore:
    """Builds snapshots and publishes exactly one live snapshot at a time."""

    def __init__(self, vectorizer: HashingVectorizer):
        self.vectorizer = vectorizer
        self._snapshot = IndexSnapshot.empty()
        self._lock = threading.Lock()
        self._last_version = 0

    def _next_version(self) -> int:
        with self._lock:
            self._last_version += 1
            return self._last_version

    def build(self, sections: Sequence[Section], text: str | None = None) -> IndexSnapshot:
        """Vectorize sections into a new, validated snapshot.

        The live snapshot is not touched; call ``swap`` to publish. When the
        vectorizer is not ready the sections are indexed without vectors and
        only keyword search can find them.

        Args:
            sections: Freshly extracted sections in document order.
            text: Source text, kept for document metadata.

        Returns:
            The new snapshot.

        Raises:
            IndexIntegrityError: If the sections violate snapshot invariants.
        """
        start = monotonic()
        vectorized = self.vectorizer.is_ready()

        if vectorized:
            indexed = tuple(
                dataclasses.replace(s, vector=self.vectorizer.embed(section_text(s)))
                for s in sections
            )
            matrix = (
                np.vstack([s.vector for s in indexed])
                if indexed
                else np.zeros((0, self.vectorizer.dimension))
            )
            matrix.setflags(write=False)
            dimension: int | None = self.vectorizer.dimension
            vector_ids = tuple(s.id for s in indexed)
        else:
            logger.warning("Vectorizer not ready, building keyword-only snapshot")
            indexed = tuple(dataclasses.replace(s, vector=None) for s in sections)
            matrix = None
            dimension = None
            vector_ids = ()

        snapshot = IndexSnapshot(
            sections=indexed,
            version=self._next_version(),
            dimension=dimension,
            matrix=matrix,
            vector_ids=vector_ids,
            text=text,
        )
        snapshot.validate()

        elapsed_ms = 1000 * (monotonic() - start)
        logger.info(
            f"Built index snapshot v{snapshot.version}: {len(indexed)} sections "
            f"in {elapsed_ms:.1f}ms (vectors={'yes' if vectorized else 'no'})"
        )
        return snapshot

    def current(self) -> IndexSnapshot:
        """Return the live snapshot."""
        return self._snapshot

    def swap(self, snapshot: IndexSnapshot) -> IndexSnapshot:
        """Publish ``snapshot`` as the live snapshot.

        Returns:
            The snapshot that was live before.

        Raises:
            IndexIntegrityError: If ``snapshot`` is older than the live one.
        """
        with self._lock:
            previous = self._snapshot
            if snapshot.version <= previous.version:
                raise IndexIntegrityError(
                    f"Refusing to swap in snapshot v{snapshot.version} over "
                    f"live v{previous.version}"
                )
            self._snapshot = snapshot
        logger.info(f"Swapped index snapshot v{previous.version} → v{snapshot.version}")
        return previous
