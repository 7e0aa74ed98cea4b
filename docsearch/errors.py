"""Exception types for the document search engine.

Errors fall into four groups:
- Input errors (bad query, bad limit, bad config update): raised synchronously
  before any index state is touched
- Dependency-not-ready: the vectorizer has not been initialized yet; callers
  degrade to keyword-only search
- Invariant violations: a corrupted snapshot or mismatched vector dimensions,
  which point at a bug in the rebuild pipeline
- Rebuild failures: the previous snapshot stays live
"""


class DocSearchError(Exception):
    """Base class for all document search errors."""


class InvalidQueryError(DocSearchError, ValueError):
    """Query text or limit is outside the accepted range."""


class InvalidConfigError(DocSearchError, ValueError):
    """A search configuration update was rejected."""


class VectorizerNotReadyError(DocSearchError, RuntimeError):
    """The vectorizer was used before its one-time setup completed."""


class IndexIntegrityError(DocSearchError, RuntimeError):
    """An index snapshot violates one of its invariants."""


class DimensionMismatchError(IndexIntegrityError):
    """Two vectors compared for similarity have different dimensions."""

    def __init__(self, left: int, right: int):
        super().__init__(f"Vector dimensions must match: {left} != {right}")
        self.left = left
        self.right = right


class RebuildError(DocSearchError, RuntimeError):
    """An index rebuild failed and was discarded."""
