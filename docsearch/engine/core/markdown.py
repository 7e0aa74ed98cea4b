"""Markdown helpers around extracted sections.

These work on raw text or on already extracted sections and never touch the
search index.
"""

import re

from ...models import DocumentMetadata
from .document import Section

# Title used when a document has no level-1 heading
DEFAULT_DOCUMENT_TITLE = "Untitled"

_ESCAPE_PATTERN = re.compile(r"([\\`*_{}\[\]()#+\-.!])")

# Order matters: code blocks go before inline code, images before links.
_STRIP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"!\[.*?\]\(.*?\)"), ""),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*>\s+", re.MULTILINE), ""),
    (re.compile(r"---+"), ""),
)


def generate_markdown(sections: list[Section]) -> str:
    """Rebuild document text from sections.

    Each section is rendered as its heading line, a blank line and its body.
    For a document that starts with a heading, the result matches the source
    up to whitespace.
    """
    return "\n\n".join(f"{section.heading}\n\n{section.content}" for section in sections)


def find_section_by_line(sections: list[Section], line_number: int) -> Section | None:
    """Return the section whose line range contains ``line_number`` (0-indexed)."""
    for section in sections:
        if section.start_line <= line_number <= section.end_line:
            return section
    return None


def extract_meta_tags(text: str) -> dict[str, str]:
    """Parse ``key: value`` pairs from a leading ``---`` front-matter block.

    Only flat pairs are read; surrounding single or double quotes are
    removed from values. Documents without front matter yield ``{}``.
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != "---":
        return {}

    meta: dict[str, str] = {}
    for line in lines[1:]:
        line = line.strip()
        if line == "---":
            break
        if ":" not in line:
            continue
        key, _, value = line.partition(":")
        meta[key.strip()] = re.sub(r"^[\"']|[\"']$", "", value.strip())
    return meta


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown control characters."""
    return _ESCAPE_PATTERN.sub(r"\\\1", text)


def strip_markdown(text: str) -> str:
    """Remove common Markdown formatting, keeping the readable text."""
    for pattern, replacement in _STRIP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def extract_title(text: str, fallback: str = DEFAULT_DOCUMENT_TITLE) -> str:
    """Return the first level-1 heading of the document, or ``fallback``."""
    for line in text.split("\n"):
        if line.startswith("# "):
            return line[2:].strip()
    return fallback


def count_words(text: str) -> int:
    return len(text.split())


def build_metadata(
    text: str,
    sections: list[Section],
    fallback_title: str = DEFAULT_DOCUMENT_TITLE,
) -> DocumentMetadata:
    """Compute summary statistics for a document and its sections."""
    return DocumentMetadata(
        title=extract_title(text, fallback_title),
        size=len(text.encode("utf-8")),
        word_count=count_words(text),
        section_count=len(sections),
    )
