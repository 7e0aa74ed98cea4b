"""Pydantic models for search requests, responses and index lifecycle.

    from docsearch.models import SearchConfig, SearchResponse
"""

from .documents import DocumentMetadata, RebuildReport, TocEntry
from .enums import RebuildTrigger, ReindexState, SuggestionType
from .search import (
    SearchConfig,
    SearchResponse,
    SearchResult,
    SectionInfo,
    Suggestion,
)

__all__ = [
    # Enums
    "RebuildTrigger",
    "ReindexState",
    "SuggestionType",
    # Search
    "SearchConfig",
    "SearchResponse",
    "SearchResult",
    "SectionInfo",
    "Suggestion",
    # Documents
    "DocumentMetadata",
    "RebuildReport",
    "TocEntry",
]
