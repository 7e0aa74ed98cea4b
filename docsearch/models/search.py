"""Search configuration, request and response models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..config import MAX_RESULT_LIMIT, MIN_RESULT_LIMIT, Settings
from .enums import SuggestionType


class SearchConfig(BaseModel):
    """Runtime-tunable search configuration.

    Instances are immutable; an update produces a new instance which replaces
    the old one wholesale, so a query always reads one consistent config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_results: int = Field(
        default=10,
        ge=MIN_RESULT_LIMIT,
        le=MAX_RESULT_LIMIT,
        description="Default number of results when the caller gives no limit",
    )
    min_score: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Minimum cosine similarity for vector hits"
    )
    enable_semantic_search: bool = Field(default=True, description="Run the vector strategy")
    enable_keyword_search: bool = Field(default=True, description="Run the keyword strategy")
    vector_weight: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Weight of the vector score for dual hits"
    )
    keyword_weight: float = Field(
        default=0.4, ge=0.0, le=1.0, description="Weight of the keyword score for dual hits"
    )

    @model_validator(mode="after")
    def _check_weights(self) -> "SearchConfig":
        if self.vector_weight + self.keyword_weight <= 0:
            raise ValueError("vector_weight and keyword_weight cannot both be zero")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchConfig":
        return cls(
            max_results=settings.max_results,
            min_score=settings.min_score,
            enable_semantic_search=settings.enable_semantic_search,
            enable_keyword_search=settings.enable_keyword_search,
            vector_weight=settings.vector_weight,
            keyword_weight=settings.keyword_weight,
        )


class SectionInfo(BaseModel):
    """Public view of an indexed section."""

    id: str = Field(..., description="Section identifier, stable within one document version")
    slug: str = Field(..., description="URL-safe identifier derived from the title")
    title: str = Field(..., description="Heading text")
    content: str = Field(..., description="Body text below the heading")
    level: int = Field(..., ge=1, le=6, description="Heading level (1-6)")


class SearchResult(BaseModel):
    """One ranked search hit."""

    section: SectionInfo
    score: float = Field(..., ge=0.0, le=1.0, description="Hybrid relevance score")
    matches: list[str] = Field(
        default_factory=list, description="Literal query terms found in the section body"
    )


class SearchResponse(BaseModel):
    """Result of a search call."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="The query as searched (trimmed)")
    results: list[SearchResult] = Field(default_factory=list)
    total_results: int = Field(
        default=0, ge=0, serialization_alias="totalResults", description="Number of results"
    )
    search_time: float = Field(
        default=0.0, ge=0.0, serialization_alias="searchTime", description="Elapsed milliseconds"
    )


class Suggestion(BaseModel):
    """A query completion or section shortcut."""

    text: str = Field(..., description="Suggested query text or section title")
    type: SuggestionType = Field(..., description="Suggestion kind")
    slug: str | None = Field(default=None, description="Section slug for section suggestions")
