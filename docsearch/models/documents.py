"""Document structure and index lifecycle models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import RebuildTrigger


class TocEntry(BaseModel):
    """Node of the table-of-contents tree."""

    id: str
    slug: str
    title: str
    level: int = Field(..., ge=1, le=6)
    children: list["TocEntry"] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    """Summary statistics of the indexed document."""

    title: str = Field(..., description="First level-1 heading, or the fallback title")
    size: int = Field(default=0, ge=0, description="Document size in UTF-8 bytes")
    word_count: int = Field(default=0, ge=0, description="Whitespace-delimited words")
    section_count: int = Field(default=0, ge=0, description="Number of extracted sections")


class RebuildReport(BaseModel):
    """Outcome of one index rebuild."""

    trigger: RebuildTrigger = Field(..., description="What started the rebuild")
    success: bool = Field(..., description="Whether the new snapshot was published")
    version: int = Field(..., ge=0, description="Version of the live snapshot afterwards")
    section_count: int = Field(default=0, ge=0, description="Sections in the live snapshot")
    duration_ms: float = Field(default=0.0, ge=0.0, description="Rebuild wall time")
    error: str | None = Field(default=None, description="Failure message if not successful")
    finished_at: datetime = Field(..., description="When the rebuild finished")
