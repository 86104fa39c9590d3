"""Frontmatter splitting, parsing, and serialization."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

import frontmatter
import yaml

from obsidian_tools.data_models import ParsedFrontmatter

logger = logging.getLogger(__name__)

# Opening "---" must sit at offset 0; the block ends at the next "---" line.
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(?P<block>.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_YAML_HANDLER = frontmatter.YAMLHandler()


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _normalize_value(value: Any) -> Any:
    """Coerce a YAML-loaded value into the frontmatter value set.

    Dates stay strings so business logic sees the text the author wrote.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_value(item) for item in value]
    return value


def coerce_scalar(value: str) -> Any:
    """Coerce a raw ``key: value`` right-hand side using the line-based rules.

    Order: quoted string, boolean, null, inline array (items coerced
    recursively), number, anything else (ISO dates included) as a string.
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    if value == "true":
        return True
    if value == "false":
        return False
    if value == "null":
        return None
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        if not inner.strip():
            return []
        return [coerce_scalar(item) for item in inner.split(",")]
    if _NUMBER_RE.match(value):
        return int(value) if _INTEGER_RE.match(value) else float(value)
    return value


def parse_yaml_like(block: str) -> Optional[dict[str, Any]]:
    """Line-based fallback parser for frontmatter YAML cannot handle.

    Returns:
        The parsed mapping, or ``None`` when no line carries a ``key:``
        separator at all.
    """
    result: dict[str, Any] = {}
    found_separator = False
    for line in block.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, separator, raw_value = stripped.partition(":")
        if not separator:
            continue
        found_separator = True
        key = key.strip()
        if key:
            result[key] = coerce_scalar(raw_value)
    return result if found_separator else None


def split_frontmatter(text: str) -> tuple[Optional[str], Optional[str], str]:
    """Split raw note text into ``(raw_block, yaml_block, body)``.

    ``raw_block`` is the verbatim header including both delimiter lines;
    both block values are ``None`` when the text has no frontmatter.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, None, text
    return match.group(0), match.group("block") or "", text[match.end():]


# ==============================================================================
# FRONTMATTER OPERATIONS
# ==============================================================================


def parse_frontmatter(text: str) -> ParsedFrontmatter:
    """Extract frontmatter metadata and note body from raw text.

    The block is parsed with the YAML handler from ``python-frontmatter``.
    Invalid YAML, or YAML that is not a mapping, falls back to
    :func:`parse_yaml_like`. This function never raises on malformed input:
    when even the fallback finds nothing, the metadata is empty, the whole
    text is treated as content, and ``error`` explains why.

    Args:
        text: Raw markdown text, possibly containing a frontmatter block.

    Returns:
        A :class:`ParsedFrontmatter` with metadata, body, and the raw header.
    """
    if not text:
        return ParsedFrontmatter(metadata={}, content="")

    raw_block, block, body = split_frontmatter(text)
    if raw_block is None:
        return ParsedFrontmatter(metadata={}, content=text)

    if not block.strip():
        return ParsedFrontmatter(metadata={}, content=body, raw_block=raw_block)

    reason: str
    try:
        loaded = _YAML_HANDLER.load(block)
    except yaml.YAMLError as exc:
        reason = f"invalid YAML: {exc}"
    else:
        if loaded is None:
            return ParsedFrontmatter(metadata={}, content=body, raw_block=raw_block)
        if isinstance(loaded, Mapping):
            metadata = {str(key): _normalize_value(value) for key, value in loaded.items()}
            return ParsedFrontmatter(metadata=metadata, content=body, raw_block=raw_block)
        reason = f"frontmatter is a {type(loaded).__name__}, not a mapping"

    fallback = parse_yaml_like(block)
    if fallback is not None:
        logger.debug("Frontmatter parsed with line-based fallback (%s)", reason)
        return ParsedFrontmatter(metadata=fallback, content=body, raw_block=raw_block, fallback=True)

    logger.debug("Frontmatter could not be parsed (%s); treating as content", reason)
    return ParsedFrontmatter(metadata={}, content=text, error=f"Malformed frontmatter: {reason}")


def sanitize_frontmatter(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Return a YAML-safe copy of ``metadata``.

    Raises:
        ValueError: If a key is empty or a value has an unsupported type.
    """

    def _sanitize(value: Any, path: str) -> Any:
        if isinstance(value, (str, int, float, bool)) or value is None:
            return value
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, (list, tuple)):
            return [_sanitize(item, f"{path}[{index}]") for index, item in enumerate(value)]
        if isinstance(value, Mapping):
            return {str(k): _sanitize(v, f"{path}.{k}") for k, v in value.items()}
        raise ValueError(f"Frontmatter field '{path}' uses unsupported type '{type(value).__name__}'.")

    sanitized: dict[str, Any] = {}
    for key, value in metadata.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError("Frontmatter keys must be non-empty strings.")
        sanitized[key] = _sanitize(value, key)
    return sanitized


def serialize_frontmatter(metadata: Mapping[str, Any], content: str) -> str:
    """Serialize metadata and body back into markdown.

    Only the header goes through the YAML handler; ``content`` is appended
    byte for byte, so rewriting frontmatter never touches the note body.

    Args:
        metadata: Frontmatter mapping. Empty mapping removes the block.
        content: Markdown body (without frontmatter).

    Returns:
        Markdown text with a YAML block whose keys keep their given order.
    """
    if not metadata:
        return content

    header = _YAML_HANDLER.export(sanitize_frontmatter(metadata), sort_keys=False)
    return f"---\n{header}\n---\n{content}"


def replace_body(raw_text: str, new_body: str) -> str:
    """Swap the body of ``raw_text`` keeping its frontmatter header verbatim.

    A header that failed to parse is part of the body, so it is not re-added.
    """
    raw_block = parse_frontmatter(raw_text).raw_block
    if raw_block is None:
        return new_body
    if not raw_block.endswith("\n"):
        raw_block += "\n"
    return raw_block + new_body
