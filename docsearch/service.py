"""Caller-facing facade over the search engine.

Wires a document source, the index store, the hybrid search engine and the
reindex coordinator together. A routing layer only needs this class:

    service = DocumentSearchService(source)
    await service.start()
    response = await service.search("brand colors", limit=5)
    payload = response.model_dump(by_alias=True)
"""

import logging
from collections.abc import Sequence
from typing import Any

from .config import Settings, settings as default_settings
from .engine.core.document import Section
from .engine.core.markdown import DEFAULT_DOCUMENT_TITLE, build_metadata, generate_markdown
from .engine.core.sections import build_table_of_contents
from .engine.index import IndexStore
from .engine.reindex import DocumentSource, RebuildListener, ReindexCoordinator
from .engine.scoring.constants import DEFAULT_SUGGESTION_LIMIT
from .engine.scoring.vectorizer import HashingVectorizer
from .engine.search import HybridSearchEngine, to_section_info
from .models import (
    DocumentMetadata,
    RebuildReport,
    RebuildTrigger,
    SearchConfig,
    SearchResponse,
    SectionInfo,
    Suggestion,
    TocEntry,
)

logger = logging.getLogger(__name__)


class DocumentSearchService:
    """Search, configuration and document lookups for one document."""

    def __init__(
        self,
        source: DocumentSource,
        settings: Settings | None = None,
        config: SearchConfig | None = None,
        vectorizer: HashingVectorizer | None = None,
        fallback_title: str = DEFAULT_DOCUMENT_TITLE,
    ):
        settings = settings or default_settings
        self.source = source
        self.fallback_title = fallback_title
        self.vectorizer = vectorizer or HashingVectorizer(settings=settings)
        self.store = IndexStore(self.vectorizer)
        self.engine = HybridSearchEngine(self.store, config=config, settings=settings)
        self.coordinator = ReindexCoordinator(source, self.store, settings=settings)

    async def __aenter__(self) -> "DocumentSearchService":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> RebuildReport:
        """Initialize the vectorizer, build the first snapshot and subscribe."""
        self.vectorizer.initialize()
        report = await self.coordinator.start()
        logger.info(
            f"Document search service started: {report.section_count} sections indexed "
            f"in {report.duration_ms:.1f}ms"
        )
        return report

    async def close(self) -> None:
        await self.coordinator.close()
        logger.info("Document search service shutdown complete")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        limit: int | None = None,
        timeout: float | None = None,
    ) -> SearchResponse:
        return await self.engine.search(query, limit=limit, timeout=timeout)

    def suggest(self, query: str, limit: int = DEFAULT_SUGGESTION_LIMIT) -> list[Suggestion]:
        return self.engine.suggest(query, limit=limit)

    def get_config(self) -> SearchConfig:
        return self.engine.get_config()

    def update_config(self, **changes: Any) -> SearchConfig:
        return self.engine.update_config(**changes)

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    async def update_sections(self, sections: Sequence[Section]) -> RebuildReport:
        """Replace the index with already parsed sections.

        Returns once the new snapshot is live.

        Raises:
            RebuildError: If the sections could not be indexed; the previous
                snapshot stays live.
        """
        return await self.coordinator.rebuild(sections, trigger=RebuildTrigger.SECTIONS_UPDATED)

    def notify_changed(self) -> None:
        """Signal a document change that did not come through the source."""
        self.coordinator.notify()

    def on_rebuild(self, listener: RebuildListener) -> None:
        self.coordinator.on_rebuild(listener)

    async def wait_idle(self) -> None:
        await self.coordinator.wait_idle()

    @property
    def last_rebuild(self) -> RebuildReport | None:
        return self.coordinator.last_report

    # ------------------------------------------------------------------
    # Document lookups (live snapshot)
    # ------------------------------------------------------------------

    def sections(self) -> list[SectionInfo]:
        return [to_section_info(s) for s in self.store.current().sections]

    def get_section(self, slug: str) -> SectionInfo | None:
        section = self.store.current().get_by_slug(slug)
        return to_section_info(section) if section is not None else None

    def table_of_contents(self) -> list[TocEntry]:
        return build_table_of_contents(list(self.store.current().sections))

    def metadata(self) -> DocumentMetadata:
        snapshot = self.store.current()
        sections = list(snapshot.sections)
        text = snapshot.text if snapshot.text is not None else generate_markdown(sections)
        return build_metadata(text, sections, self.fallback_title)
