"""Hybrid section search over a single structured document.

The package splits a Markdown-style document into heading-delimited sections,
indexes them with deterministic hashed vectors and answers free-text queries
by merging vector similarity with literal keyword scoring.

Usage:
    from docsearch import DocumentSearchService, InMemoryDocumentSource

    source = InMemoryDocumentSource("# Brand Colors\\nblue #3b82f6")
    service = DocumentSearchService(source)
    await service.start()
    response = await service.search("brand colors")
"""

from .config import Settings, configure_logging, settings
from .engine.reindex import DocumentSource, InMemoryDocumentSource
from .errors import (
    DimensionMismatchError,
    DocSearchError,
    IndexIntegrityError,
    InvalidConfigError,
    InvalidQueryError,
    RebuildError,
    VectorizerNotReadyError,
)
from .service import DocumentSearchService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "settings",
    "configure_logging",
    # Service facade
    "DocumentSearchService",
    "DocumentSource",
    "InMemoryDocumentSource",
    # Errors
    "DocSearchError",
    "InvalidQueryError",
    "InvalidConfigError",
    "VectorizerNotReadyError",
    "IndexIntegrityError",
    "DimensionMismatchError",
    "RebuildError",
]
