"""Enumeration types for the document search engine."""

from enum import StrEnum


class ReindexState(StrEnum):
    """Lifecycle states of the reindex coordinator."""

    IDLE = "idle"
    REBUILDING = "rebuilding"


class RebuildTrigger(StrEnum):
    """What caused an index rebuild."""

    STARTUP = "startup"
    DOCUMENT_CHANGED = "document_changed"
    SECTIONS_UPDATED = "sections_updated"


class SuggestionType(StrEnum):
    """Kind of search suggestion."""

    SECTION = "section"
    KEYWORD = "keyword"
