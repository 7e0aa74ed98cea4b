"""Engine core module.

This module contains the document data structures and parsing utilities:
- Section data structure
- Section extraction, slugs and table of contents
- Markdown helpers (metadata, front matter, reconstruction)
"""

from .document import Section
from .markdown import (
    build_metadata,
    count_words,
    escape_markdown,
    extract_meta_tags,
    extract_title,
    find_section_by_line,
    generate_markdown,
    strip_markdown,
)
from .sections import (
    HEADING_PATTERN,
    build_table_of_contents,
    extract_sections,
    slugify,
)

__all__ = [
    # Document structures
    "Section",
    # Extraction
    "HEADING_PATTERN",
    "extract_sections",
    "slugify",
    "build_table_of_contents",
    # Markdown helpers
    "build_metadata",
    "count_words",
    "escape_markdown",
    "extract_meta_tags",
    "extract_title",
    "find_section_by_line",
    "generate_markdown",
    "strip_markdown",
]
