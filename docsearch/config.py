"""Configuration for the document search engine.

Settings are read from ``DOCSEARCH_*`` environment variables or a ``.env``
file, with defaults suited to local development:

    DOCSEARCH_MAX_RESULTS=20 DOCSEARCH_LOG_LEVEL=DEBUG python -m app

The module-level ``settings`` instance is the default used by every component
that is not given an explicit configuration.
"""

import logging

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hard bounds on caller-supplied result limits
MIN_RESULT_LIMIT = 1
MAX_RESULT_LIMIT = 100


class Settings(BaseSettings):
    """Environment-driven settings for indexing, search and reindexing."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSEARCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the docsearch logger")

    # Search defaults
    max_results: int = Field(default=10, ge=MIN_RESULT_LIMIT, le=MAX_RESULT_LIMIT)
    min_score: float = Field(default=0.1, ge=0.0, le=1.0)
    enable_semantic_search: bool = True
    enable_keyword_search: bool = True
    vector_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    keyword_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    max_query_length: int = Field(default=500, ge=1)

    # Vectorizer
    vector_dimension: int = Field(default=512, ge=8)
    vector_num_hashes: int = Field(default=2, ge=1, le=8)

    # Reindexing
    reindex_debounce_ms: int = Field(default=100, ge=0)

    @model_validator(mode="after")
    def _check_hash_fanout(self) -> "Settings":
        if self.vector_num_hashes > self.vector_dimension:
            raise ValueError("vector_num_hashes cannot exceed vector_dimension")
        return self

    @property
    def reindex_debounce_seconds(self) -> float:
        return self.reindex_debounce_ms / 1000.0


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger.

    Handlers are left to the host application; if the root logger has none,
    a basic stream handler is installed so messages are not lost.
    """
    level_name = (level or settings.log_level).upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger("docsearch").setLevel(level_name)
