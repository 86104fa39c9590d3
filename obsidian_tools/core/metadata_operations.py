"""Metadata extraction from markdown text: tags, headings, links, word count."""

from __future__ import annotations

import re
from typing import Any

from obsidian_tools.core.frontmatter_operations import parse_frontmatter
from obsidian_tools.data_models import ExtractedMetadata, Heading, Link

_CODE_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
# Inline #tags, not preceded by a word character, slash, or another '#'
_TAG_RE = re.compile(r"(?<![\w/#])#([\w-]+)")
_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
_STANDARD_LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")
_WIKI_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
_BOLD_RE = re.compile(r"\*\*([^*]*)\*\*")
_ITALIC_RE = re.compile(r"\*([^*]*)\*")
_HEADING_MARK_RE = re.compile(r"#{1,6}\s+")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def strip_code(text: str) -> str:
    """Remove fenced code blocks and inline code spans."""
    return _INLINE_CODE_RE.sub("", _CODE_FENCE_RE.sub("", text))


def normalize_tag_values(value: Any) -> list[str]:
    """Normalize a frontmatter ``tags`` value into a list of trimmed strings.

    Strings are split on commas; lists keep their items. Empty entries drop.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        items = [value]
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def extract_tags(content: str, frontmatter: dict[str, Any]) -> list[str]:
    """Return inline ``#tags`` united with frontmatter tags, de-duplicated.

    Insertion order is kept: inline tags in order of appearance, then any
    frontmatter tags not already seen.
    """
    seen: dict[str, None] = {}
    for match in _TAG_RE.finditer(strip_code(content)):
        seen.setdefault(match.group(1), None)
    for tag in normalize_tag_values(frontmatter.get("tags")):
        seen.setdefault(tag, None)
    return list(seen)


def extract_headings(content: str) -> list[Heading]:
    headings: list[Heading] = []
    for match in _HEADING_RE.finditer(content):
        text = match.group(2).strip()
        if text:
            headings.append(Heading(level=len(match.group(1)), text=text))
    return headings


def extract_links(content: str) -> list[Link]:
    """Return standard markdown links followed by wiki links, in text order."""
    links = [
        Link(kind="standard", text=match.group(1), url=match.group(2))
        for match in _STANDARD_LINK_RE.finditer(content)
    ]
    for match in _WIKI_LINK_RE.finditer(content):
        page, _, display = match.group(1).partition("|")
        page = page.strip()
        links.append(Link(kind="wiki", page=page, text=display.strip() or page))
    return links


def count_words(content: str) -> int:
    """Count words in a body once code and markdown syntax are stripped."""
    text = strip_code(content)
    text = _STANDARD_LINK_RE.sub(r"\1", text)
    text = _BOLD_RE.sub(r"\1", text)
    text = _ITALIC_RE.sub(r"\1", text)
    text = _HEADING_MARK_RE.sub("", text)
    text = _PUNCTUATION_RE.sub(" ", text)
    return len(text.split())


def extract_metadata(raw_text: str) -> ExtractedMetadata:
    """Parse a note's raw text into frontmatter, body, and derived metadata.

    Pure function over text; malformed frontmatter never raises (see
    :func:`obsidian_tools.core.frontmatter_operations.parse_frontmatter`).
    """
    parsed = parse_frontmatter(raw_text)
    content = parsed.content
    return ExtractedMetadata(
        frontmatter=parsed.metadata,
        content=content,
        tags=extract_tags(content, parsed.metadata),
        headings=extract_headings(content),
        links=extract_links(content),
        word_count=count_words(content),
        has_frontmatter=parsed.has_frontmatter,
        frontmatter_error=parsed.error,
    )
