"""Search engine: indexing, hybrid search and reindex coordination.

- core: sections, extraction and Markdown helpers
- scoring: keyword scoring, hashed vectors and fusion
- index: immutable snapshots and the live snapshot pointer
- search: the hybrid search engine
- reindex: debounced, serialized rebuilds
"""

from .index import IndexSnapshot, IndexStore
from .reindex import DocumentSource, InMemoryDocumentSource, ReindexCoordinator
from .search import HybridSearchEngine

__all__ = [
    "IndexSnapshot",
    "IndexStore",
    "HybridSearchEngine",
    "DocumentSource",
    "InMemoryDocumentSource",
    "ReindexCoordinator",
]
