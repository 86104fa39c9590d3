"""Vault detection, directory walking, and file record building."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from obsidian_tools.constants import (
    EXCLUDED_DIRECTORY_NAMES,
    MARKDOWN_EXTENSIONS,
    OBSIDIAN_FOLDER,
    ORGANIZED_FOLDER,
)
from obsidian_tools.core.metadata_operations import extract_metadata
from obsidian_tools.data_models import FileRecord, ScanError, VaultDescriptor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def is_markdown_file(path: Path) -> bool:
    """Return True when ``path`` has a markdown extension (case-insensitive)."""
    return Path(path).suffix.lower() in MARKDOWN_EXTENSIONS


def _is_excluded(name: str, at_root: bool, extra_excludes: frozenset[str]) -> bool:
    if name in EXCLUDED_DIRECTORY_NAMES or name in extra_excludes:
        return True
    # Organized output only lives directly under the vault root
    return at_root and name.startswith(ORGANIZED_FOLDER)


def _walk(root: Path, extra_excludes: frozenset[str]) -> Iterator[tuple[Path, list[str], list[str]]]:
    """Yield ``os.walk`` triples below ``root`` with excluded subtrees pruned."""

    def _on_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable directory during walk: %s", exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        at_root = current == root
        dirnames[:] = sorted(
            name for name in dirnames if not _is_excluded(name, at_root, extra_excludes)
        )
        yield current, dirnames, filenames


def _file_timestamps(stat: os.stat_result) -> tuple[Optional[datetime], datetime]:
    """Return ``(created, modified)`` from a stat result.

    Birth time is used where the platform records it; elsewhere the inode
    change time stands in for it.
    """
    birth = getattr(stat, "st_birthtime", None)
    created = datetime.fromtimestamp(birth if birth is not None else stat.st_ctime)
    return created, datetime.fromtimestamp(stat.st_mtime)


# ==============================================================================
# VAULT SCANNING
# ==============================================================================


def list_markdown_files(dir_path: Path, extra_excludes: Iterable[str] = ()) -> list[Path]:
    """List markdown files below ``dir_path``, sorted by path.

    Subtrees named ``node_modules``, ``.git``, ``.obsidian`` (and any name in
    ``extra_excludes``) are never walked, nor are ``organized*`` directories
    directly under ``dir_path``. Each call performs a fresh walk.
    """
    root = Path(dir_path).expanduser().resolve()
    excludes = frozenset(extra_excludes)
    files = [
        current / filename
        for current, _, filenames in _walk(root, excludes)
        for filename in filenames
        if is_markdown_file(Path(filename))
    ]
    return sorted(files)


def list_directories(dir_path: Path, extra_excludes: Iterable[str] = ()) -> list[Path]:
    """List every directory below ``dir_path`` (recursive), sorted by path string."""
    root = Path(dir_path).expanduser().resolve()
    excludes = frozenset(extra_excludes)
    directories = [
        current / name for current, dirnames, _ in _walk(root, excludes) for name in dirnames
    ]
    return sorted(directories, key=str)


def analyze_directory(dir_path: Path, extra_excludes: Iterable[str] = ()) -> VaultDescriptor:
    """Analyze a directory to decide whether it is a vault.

    Never raises: missing, non-directory, or inaccessible paths yield a
    descriptor with ``is_vault=False``.

    Args:
        dir_path: Directory to analyze.
        extra_excludes: Additional directory names to skip while counting.

    Returns:
        A :class:`VaultDescriptor`. ``is_vault`` is true when the directory has
        a ``.obsidian`` folder or contains at least one markdown file.
    """
    path = Path(dir_path).expanduser()
    descriptor = VaultDescriptor(name=path.name, path=path)

    try:
        if not path.is_dir():
            return descriptor
        path = path.resolve()
        has_obsidian_folder = (path / OBSIDIAN_FOLDER).is_dir()
        markdown_count = len(list_markdown_files(path, extra_excludes))
    except OSError as exc:
        logger.debug("Error analyzing directory %s: %s", path, exc)
        return descriptor

    return VaultDescriptor(
        name=path.name,
        path=path,
        is_vault=has_obsidian_folder or markdown_count > 0,
        has_obsidian_folder=has_obsidian_folder,
        markdown_file_count=markdown_count,
    )


# ==============================================================================
# FILE RECORDS
# ==============================================================================


def build_file_record(path: Path) -> FileRecord:
    """Read and stat one markdown file into a :class:`FileRecord`.

    Raises:
        OSError: If the file cannot be read or stat'd.
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    path = Path(path)
    stat = path.stat()
    raw_text = path.read_text(encoding="utf-8")
    created, modified = _file_timestamps(stat)
    extracted = extract_metadata(raw_text)

    return FileRecord(
        path=path,
        name=path.stem,
        size=stat.st_size,
        created=created,
        modified=modified,
        content=extracted.content,
        frontmatter=extracted.frontmatter,
        tags=extracted.tags,
        headings=extracted.headings,
        links=extracted.links,
        word_count=extracted.word_count,
        has_frontmatter=extracted.has_frontmatter,
        frontmatter_error=extracted.frontmatter_error,
    )


def build_file_records(
    paths: Iterable[Path],
    on_progress: Optional[ProgressCallback] = None,
) -> tuple[list[FileRecord], list[ScanError]]:
    """Build records for ``paths`` in order, collecting per-file failures.

    Args:
        paths: Markdown file paths.
        on_progress: Optional ``(current, total, label)`` hook fired after each file.

    Returns:
        ``(records, errors)``; a failing file never stops the batch.
    """
    paths = list(paths)
    records: list[FileRecord] = []
    errors: list[ScanError] = []

    for index, path in enumerate(paths, start=1):
        try:
            records.append(build_file_record(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Error processing file %s: %s", path, exc)
            errors.append(ScanError(path=Path(path), error=exc))
        if on_progress is not None:
            on_progress(index, len(paths), Path(path).name)

    return records, errors


def scan_vault(
    vault_path: Path,
    extra_excludes: Iterable[str] = (),
    on_progress: Optional[ProgressCallback] = None,
) -> tuple[list[FileRecord], list[ScanError]]:
    """List and build records for every markdown file in a vault."""
    files = list_markdown_files(vault_path, extra_excludes)
    logger.info("Found %d markdown files in %s", len(files), vault_path)
    return build_file_records(files, on_progress=on_progress)


def summarize_vault(vault_path: Path, records: Iterable[FileRecord]) -> dict[str, Any]:
    """Aggregate folder, tag, and property statistics over scanned records.

    Returns:
        A payload with totals plus the ten largest and ten most recently
        modified files (vault-relative paths).
    """
    root = Path(vault_path).expanduser().resolve()
    records = list(records)
    folders: set[str] = set()
    tags: dict[str, int] = {}
    properties: dict[str, set[str]] = {}

    for record in records:
        relative = record.path.relative_to(root) if record.path.is_relative_to(root) else record.path
        if relative.parent != Path("."):
            folders.add(relative.parent.as_posix())
        for tag in record.tags:
            tags[tag] = tags.get(tag, 0) + 1
        for key, value in record.frontmatter.items():
            properties.setdefault(key, set()).add(type(value).__name__)

    def _entry(record: FileRecord) -> dict[str, Any]:
        relative = record.path.relative_to(root) if record.path.is_relative_to(root) else record.path
        return {
            "path": relative.as_posix(),
            "size": record.size,
            "modified": record.modified.isoformat() if record.modified else None,
        }

    largest = sorted(records, key=lambda record: record.size, reverse=True)[:10]
    recent = sorted(
        (record for record in records if record.modified is not None),
        key=lambda record: record.modified,
        reverse=True,
    )[:10]

    return {
        "vault": root.name,
        "total_files": len(records),
        "folders": sorted(folders),
        "tags": dict(sorted(tags.items(), key=lambda item: (-item[1], item[0]))),
        "properties": {key: sorted(types) for key, types in sorted(properties.items())},
        "largest_files": [_entry(record) for record in largest],
        "recent_files": [_entry(record) for record in recent],
    }
