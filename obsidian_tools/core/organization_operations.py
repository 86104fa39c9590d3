"""Organization strategies and move/rename planning."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from obsidian_tools.constants import ORGANIZED_FOLDER, SIZE_BUCKET_LARGEST, SIZE_BUCKETS
from obsidian_tools.data_models import FileRecord, MutationOperation

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r'[<>:"/\\|?*\s]+')
_HYPHEN_RUN_RE = re.compile(r"-{2,}")

UNTAGGED_FOLDER = "untagged"
DATE_FIELDS = ("created", "modified")
RENAME_PATTERNS = ("title", "heading", "date-prefix", "sanitize")


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def sanitize_filename(value: str) -> str:
    """Make ``value`` safe as a single path segment.

    Each of ``< > : " / \\ | ? *`` and any whitespace run becomes a hyphen,
    hyphen runs collapse to one, and leading/trailing hyphens are trimmed.
    """
    cleaned = _UNSAFE_RE.sub("-", str(value))
    return _HYPHEN_RUN_RE.sub("-", cleaned).strip("-")


def classify_note(record: FileRecord) -> str:
    """Guess a note's type from its body, first heading, and tags.

    Rules are checked in priority order and the first match wins.
    """
    body = record.content.lower()
    if "todo" in body or "task" in body or "- [ ]" in body:
        return "tasks"
    if "daily note" in body or "journal" in body:
        return "journal"
    if record.headings and "meeting" in record.headings[0].text.lower():
        return "meetings"
    if any(tag.lower() in {"project", "work"} for tag in record.tags):
        return "projects"
    return "notes"


def note_type(record: FileRecord) -> str:
    """Return the sanitized ``type`` property, falling back to :func:`classify_note`."""
    declared = record.frontmatter.get("type")
    if declared not in (None, "", []):
        sanitized = sanitize_filename(str(declared))
        if sanitized:
            return sanitized
    return classify_note(record)


def size_category(size: int) -> str:
    """Bucket a byte count into ``tiny``/``small``/``medium``/``large`` (half-open)."""
    for upper_bound, label in SIZE_BUCKETS:
        if size < upper_bound:
            return label
    return SIZE_BUCKET_LARGEST


def _reference_date(record: FileRecord) -> date:
    return record.created.date() if record.created else date.today()


# ==============================================================================
# ORGANIZATION STRATEGIES
# ==============================================================================


def by_date_folder(record: FileRecord, date_field: str = "created") -> Optional[Path]:
    """``by-date/{year}/{year}-{month}``; ``None`` when the record lacks the date."""
    if date_field not in DATE_FIELDS:
        raise ValueError(f"Unknown date field '{date_field}'. Use one of: {', '.join(DATE_FIELDS)}")
    value: Optional[datetime] = getattr(record, date_field)
    if value is None:
        return None
    return Path("by-date", f"{value.year}", f"{value.year}-{value.month:02d}")


def by_tag_folder(record: FileRecord) -> Path:
    primary = sanitize_filename(record.tags[0]) if record.tags else ""
    return Path("by-tags", primary or UNTAGGED_FOLDER)


def by_type_folder(record: FileRecord) -> Path:
    return Path("by-type", note_type(record))


def by_size_folder(record: FileRecord) -> Path:
    return Path("by-size", size_category(record.size))


def custom_folder(record: FileRecord, pattern: str) -> Path:
    """Fill ``{type}``, ``{year}``, ``{month}``, ``{day}``, ``{tags}`` in ``pattern``.

    Dates come from ``created`` (today when absent). Every ``/``-separated
    segment is sanitized on its own; segments that end up empty, ``.`` or
    ``..`` are dropped.

    Raises:
        ValueError: If the pattern is blank or resolves to no usable segment.
    """
    if not pattern or not pattern.strip():
        raise ValueError("Custom organization pattern cannot be empty")

    when = _reference_date(record)
    replacements = {
        "{type}": note_type(record),
        "{year}": f"{when.year}",
        "{month}": f"{when.month:02d}",
        "{day}": f"{when.day:02d}",
        "{tags}": sanitize_filename(record.tags[0]) if record.tags else UNTAGGED_FOLDER,
    }
    resolved = pattern
    for placeholder, value in replacements.items():
        resolved = resolved.replace(placeholder, value or UNTAGGED_FOLDER)

    segments = [sanitize_filename(segment) for segment in resolved.replace("\\", "/").split("/")]
    segments = [segment for segment in segments if segment and segment not in {".", ".."}]
    if not segments:
        raise ValueError(f"Custom organization pattern '{pattern}' produced an empty path")
    return Path("custom", *segments)


def rename_target(record: FileRecord, pattern: str) -> Optional[str]:
    """Compute a new base filename for ``record``.

    Args:
        record: The note to rename.
        pattern: ``title``, ``heading``, ``date-prefix`` or ``sanitize``.

    Returns:
        The new name without extension, or ``None`` when there is nothing to
        rename to (no title, no heading, empty result, or already prefixed).

    Raises:
        ValueError: If ``pattern`` is unknown.
    """
    if pattern == "title":
        title = record.frontmatter.get("title")
        new_name = sanitize_filename(str(title)) if title not in (None, "") else ""
    elif pattern == "heading":
        new_name = sanitize_filename(record.headings[0].text) if record.headings else ""
    elif pattern == "date-prefix":
        prefix = f"{_reference_date(record).isoformat()}-"
        if record.name.startswith(prefix):
            return None
        new_name = f"{prefix}{record.name}"
    elif pattern == "sanitize":
        new_name = sanitize_filename(record.name)
    else:
        raise ValueError(f"Unknown rename pattern '{pattern}'. Use one of: {', '.join(RENAME_PATTERNS)}")

    return new_name or None


STRATEGIES: dict[str, Callable[..., Optional[Path]]] = {
    "by-date": by_date_folder,
    "by-tag": by_tag_folder,
    "by-type": by_type_folder,
    "by-size": by_size_folder,
    "custom": custom_folder,
}


# ==============================================================================
# PLANNING OPERATIONS
# ==============================================================================


def plan_organization(
    records: Iterable[FileRecord],
    vault_root: Path,
    strategy: str,
    date_field: str = "created",
    pattern: Optional[str] = None,
) -> list[MutationOperation]:
    """Turn an organization strategy into move operations.

    Destinations are ``<vault_root>/organized/<folder>/<filename>``.

    Args:
        records: Scanned notes.
        vault_root: Root of the vault being organized.
        strategy: One of :data:`STRATEGIES`.
        date_field: ``created`` or ``modified`` for the ``by-date`` strategy.
        pattern: Folder pattern for the ``custom`` strategy.

    Returns:
        One move per record that has a destination and is not already there.

    Raises:
        ValueError: If the strategy is unknown or the custom pattern is empty.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown organization strategy '{strategy}'. Use one of: {', '.join(STRATEGIES)}")
    if strategy == "custom" and (not pattern or not pattern.strip()):
        raise ValueError("Custom organization pattern cannot be empty")
    if strategy == "by-date" and date_field not in DATE_FIELDS:
        raise ValueError(f"Unknown date field '{date_field}'. Use one of: {', '.join(DATE_FIELDS)}")

    output_root = Path(vault_root).expanduser().resolve() / ORGANIZED_FOLDER
    operations: list[MutationOperation] = []
    for record in records:
        if strategy == "by-date":
            folder = by_date_folder(record, date_field)
        elif strategy == "custom":
            folder = custom_folder(record, pattern)
        else:
            folder = STRATEGIES[strategy](record)

        if folder is None:
            logger.debug("Skipping %s; no %s date", record.path, date_field)
            continue
        destination = output_root / folder / record.filename
        if destination == record.path:
            continue
        operations.append(MutationOperation.move(record.path, destination, reason=strategy))

    logger.info("Planned %d moves with strategy '%s'", len(operations), strategy)
    return operations


def plan_renames(records: Iterable[FileRecord], pattern: str) -> list[MutationOperation]:
    """Plan in-place renames; records whose name would not change are skipped."""
    if pattern not in RENAME_PATTERNS:
        raise ValueError(f"Unknown rename pattern '{pattern}'. Use one of: {', '.join(RENAME_PATTERNS)}")

    operations: list[MutationOperation] = []
    for record in records:
        new_name = rename_target(record, pattern)
        if new_name is None or new_name == record.name:
            continue
        operations.append(MutationOperation.rename(record.path, new_name, reason=pattern))

    logger.info("Planned %d renames with pattern '%s'", len(operations), pattern)
    return operations
