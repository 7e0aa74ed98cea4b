"""Reindex coordination between the document source and the index store.

The coordinator is the only writer of the live snapshot. It moves between
two states:

- IDLE: a change notification (re)starts a short debounce timer so bursts of
  notifications coalesce into one rebuild
- REBUILDING: extraction and vectorization run in a worker thread while
  queries keep reading the old snapshot; a notification in this state marks
  exactly one follow-up rebuild

A rebuild that fails is discarded and the previous snapshot stays live.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from time import monotonic
from typing import Protocol

from ..config import Settings, settings as default_settings
from ..errors import RebuildError
from ..models import RebuildReport, RebuildTrigger, ReindexState
from .core.document import Section
from .core.sections import extract_sections
from .index import IndexSnapshot, IndexStore

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]
RebuildListener = Callable[[RebuildReport], None]


class DocumentSource(Protocol):
    """Supplier of the raw document text and its change notifications.

    ``subscribe`` callbacks must fire only after a write has been applied,
    so ``read_text`` called from the callback returns the new text.
    """

    def read_text(self) -> str: ...

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]: ...


class InMemoryDocumentSource:
    """Document source backed by a string held in memory."""

    def __init__(self, text: str = ""):
        self._text = text
        self._callbacks: list[ChangeCallback] = []

    def read_text(self) -> str:
        return self._text

    def write(self, text: str) -> None:
        """Replace the document text and notify subscribers."""
        self._text = text
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in document change callback: {e}", exc_info=True)

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe


class ReindexCoordinator:
    """Debounced, serialized rebuilds with atomic snapshot publication."""

    def __init__(
        self,
        source: DocumentSource,
        store: IndexStore,
        extractor: Callable[[str], list[Section]] = extract_sections,
        debounce: float | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the coordinator.

        Args:
            source: Document source to read text from and subscribe to.
            store: Index store to build snapshots with and publish into.
            extractor: Function splitting text into sections.
            debounce: Seconds to wait for more notifications before
                rebuilding (default from settings).
            settings: Settings to read defaults from.
        """
        settings = settings or default_settings
        self.source = source
        self.store = store
        self.extractor = extractor
        self.debounce = debounce if debounce is not None else settings.reindex_debounce_seconds
        self.state = ReindexState.IDLE
        self.last_report: RebuildReport | None = None

        self._pending = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._debounce_task: asyncio.Task | None = None
        self._rebuild_lock = asyncio.Lock()
        self._listeners: list[RebuildListener] = []
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> RebuildReport:
        """Build the first snapshot and subscribe to document changes.

        Raises:
            RebuildError: If the initial build fails.
        """
        self._loop = asyncio.get_running_loop()
        report = await self.rebuild(trigger=RebuildTrigger.STARTUP)
        if self._unsubscribe is None:
            self._unsubscribe = self.source.subscribe(self.notify)
        return report

    async def close(self) -> None:
        """Unsubscribe and drop any pending debounced rebuild."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        task = self._debounce_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        self._pending = False

    def on_rebuild(self, listener: RebuildListener) -> None:
        """Register a listener called with every ``RebuildReport``."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def notify(self) -> None:
        """Handle a "document changed" notification.

        Safe to call from the event loop or from another thread.
        """
        if self._loop is None:
            raise RuntimeError("ReindexCoordinator.notify() called before start()")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is not self._loop:
            self._loop.call_soon_threadsafe(self._schedule)
            return
        self._schedule()

    def _schedule(self) -> None:
        if self.state is ReindexState.REBUILDING:
            if not self._pending:
                logger.debug("Document changed during rebuild, follow-up scheduled")
            self._pending = True
            return

        task = self._debounce_task
        if task is not None and not task.done():
            task.cancel()
        self._debounce_task = self._loop.create_task(self._debounced_rebuild())

    async def _debounced_rebuild(self) -> None:
        await asyncio.sleep(self.debounce)
        async with self._rebuild_lock:
            self.state = ReindexState.REBUILDING
            try:
                while True:
                    self._pending = False
                    await self._rebuild_once(None, RebuildTrigger.DOCUMENT_CHANGED)
                    if not self._pending:
                        break
                    logger.info("Document changed during rebuild, rebuilding again")
            finally:
                self.state = ReindexState.IDLE

    # ------------------------------------------------------------------
    # Rebuilds
    # ------------------------------------------------------------------

    async def rebuild(
        self,
        sections: Sequence[Section] | None = None,
        trigger: RebuildTrigger | None = None,
    ) -> RebuildReport:
        """Rebuild now, serialized with notification-driven rebuilds.

        Args:
            sections: Already parsed sections to index. When None, the text
                is read from the document source and extracted.
            trigger: Reported cause of the rebuild.

        Returns:
            The report of the successful rebuild.

        Raises:
            RebuildError: If the rebuild failed; the previous snapshot is
                still live.
        """
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        if trigger is None:
            trigger = (
                RebuildTrigger.DOCUMENT_CHANGED if sections is None
                else RebuildTrigger.SECTIONS_UPDATED
            )

        async with self._rebuild_lock:
            self.state = ReindexState.REBUILDING
            try:
                report, error = await self._rebuild_once(sections, trigger)
            finally:
                self.state = ReindexState.IDLE

        if self._pending:
            self._pending = False
            self._schedule()

        if error is not None:
            raise RebuildError(f"Index rebuild failed: {error}") from error
        return report

    def _build_from_source(self) -> IndexSnapshot:
        text = self.source.read_text()
        return self.store.build(self.extractor(text), text=text)

    async def _rebuild_once(
        self,
        sections: Sequence[Section] | None,
        trigger: RebuildTrigger,
    ) -> tuple[RebuildReport, Exception | None]:
        start = monotonic()
        error: Exception | None = None
        try:
            if sections is None:
                snapshot = await asyncio.to_thread(self._build_from_source)
            else:
                snapshot = await asyncio.to_thread(self.store.build, list(sections))
            self.store.swap(snapshot)
        except Exception as e:
            error = e
            logger.error(
                f"Index rebuild ({trigger}) failed, keeping snapshot "
                f"v{self.store.current().version}: {e}",
                exc_info=True,
            )

        live = self.store.current()
        report = RebuildReport(
            trigger=trigger,
            success=error is None,
            version=live.version,
            section_count=len(live),
            duration_ms=1000 * (monotonic() - start),
            error=str(error) if error is not None else None,
            finished_at=datetime.now(UTC),
        )
        self.last_report = report

        for listener in list(self._listeners):
            try:
                listener(report)
            except Exception as e:
                logger.error(f"Error in rebuild listener: {e}", exc_info=True)

        return report, error

    async def wait_idle(self) -> None:
        """Wait until no debounced or running rebuild is outstanding."""
        while True:
            task = self._debounce_task
            if task is not None and not task.done():
                await asyncio.wait({task})
                continue
            if self._rebuild_lock.locked():
                async with self._rebuild_lock:
                    pass
                continue
            return
