"""Bulk mutation engine: preview and apply filesystem changes per item."""

from __future__ import annotations

import logging
import os
import shutil
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Optional

from obsidian_tools.config import ToolSettings
from obsidian_tools.constants import PREVIEW_LIMIT
from obsidian_tools.core.frontmatter_operations import (
    parse_frontmatter,
    replace_body,
    serialize_frontmatter,
)
from obsidian_tools.data_models import (
    FrontmatterUpdate,
    MutationFailure,
    MutationKind,
    MutationOperation,
    MutationPreview,
    MutationResult,
)
from obsidian_tools.errors import DestinationExistsError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _timestamped_sibling(path: Path, marker: str) -> Path:
    """Return ``<path>.<marker>.<unixMillis>``, bumping the stamp until free."""
    stamp = int(time.time() * 1000)
    candidate = path.with_name(f"{path.name}.{marker}.{stamp}")
    while candidate.exists():
        stamp += 1
        candidate = path.with_name(f"{path.name}.{marker}.{stamp}")
    return candidate


def _is_same_file(source: Path, target: Path) -> bool:
    # Case-only renames on case-insensitive filesystems report the target as existing
    try:
        return os.path.samefile(source, target)
    except OSError:
        return False


# ==============================================================================
# MUTATION ENGINE
# ==============================================================================


class MutationEngine:
    """Applies :class:`MutationOperation` batches with per-item isolation.

    Operations run strictly in input order. A failing item is logged and
    collected as a :class:`MutationFailure`; the batch always continues.

    Args:
        create_backups: Copy each file to ``<path>.backup.<unixMillis>`` before
            rewriting it, and soft-delete to ``<path>.deleted.<unixMillis>``
            instead of unlinking.
        preview_limit: Maximum number of items listed by :meth:`preview`.
        on_progress: Optional ``(current, total, label)`` hook fired after
            every item, whether it succeeded or failed.
    """

    def __init__(
        self,
        create_backups: bool = True,
        preview_limit: int = PREVIEW_LIMIT,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.create_backups = create_backups
        self.preview_limit = preview_limit
        self.on_progress = on_progress

    @classmethod
    def from_settings(cls, settings: ToolSettings) -> "MutationEngine":
        def _log_progress(current: int, total: int, label: str) -> None:
            logger.debug("Progress %d/%d: %s", current, total, label)

        return cls(
            create_backups=settings.create_backups,
            preview_limit=settings.preview_limit,
            on_progress=_log_progress,
        )

    def preview(self, operations: Iterable[MutationOperation]) -> MutationPreview:
        """Project a batch into a bounded, side-effect free summary."""
        operations = list(operations)
        shown = [operation.describe() for operation in operations[: self.preview_limit]]
        return MutationPreview(
            total=len(operations),
            items=shown,
            remaining=max(len(operations) - len(shown), 0),
        )

    def apply(self, operations: Iterable[MutationOperation]) -> MutationResult:
        """Execute every operation in order and report what happened.

        Returns:
            A :class:`MutationResult` whose ``success_count`` plus the number
            of ``failures`` always equals ``total``.
        """
        operations = list(operations)
        result = MutationResult(total=len(operations))
        if not operations:
            return result

        for index, operation in enumerate(operations, start=1):
            try:
                self._execute(operation, result)
            except (OSError, ValueError, UnicodeDecodeError) as exc:
                logger.warning("Failed %s: %s", operation.describe(), exc)
                result.failures.append(MutationFailure(operation=operation, error=exc))
            else:
                result.success_count += 1
            if self.on_progress is not None:
                self.on_progress(index, len(operations), operation.source_path.name)

        logger.info(
            "Applied %d of %d operations (%d failed)",
            result.success_count,
            result.total,
            len(result.failures),
        )
        return result

    # ------------------------------------------------------------------ kinds

    def _execute(self, operation: MutationOperation, result: MutationResult) -> None:
        if operation.kind in (MutationKind.MOVE, MutationKind.RENAME):
            self._move(operation)
        elif operation.kind is MutationKind.FRONTMATTER_UPDATE:
            self._update_frontmatter(operation, result)
        elif operation.kind is MutationKind.CONTENT_UPDATE:
            self._update_content(operation, result)
        elif operation.kind is MutationKind.DELETE:
            self._delete(operation, result)
        else:
            raise ValueError(f"Unsupported mutation kind: {operation.kind!r}")

    def _move(self, operation: MutationOperation) -> None:
        source = operation.source_path
        target = operation.target
        if not isinstance(target, Path):
            raise ValueError(f"{operation.kind.value} operation needs a destination path")
        if not source.exists():
            raise FileNotFoundError(f"Source file not found: {source}")
        if source == target:
            logger.debug("Skipping %s; already at destination", source)
            return
        if target.exists() and not _is_same_file(source, target):
            raise DestinationExistsError(target)

        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(target))
        logger.debug("Moved %s -> %s", source, target)

    def _update_frontmatter(self, operation: MutationOperation, result: MutationResult) -> None:
        update = operation.target
        if not isinstance(update, FrontmatterUpdate):
            raise ValueError("frontmatter-update operation needs a FrontmatterUpdate target")

        # Re-read so a stale record never clobbers newer frontmatter on disk
        path = operation.source_path
        raw_text = path.read_text(encoding="utf-8")
        parsed = parse_frontmatter(raw_text)
        if parsed.error:
            raise ValueError(f"Cannot update frontmatter of {path.name}: {parsed.error}")
        if parsed.fallback:
            raise ValueError(f"Cannot update frontmatter of {path.name}: header is not valid YAML")

        merged = update.apply_to(parsed.metadata)
        if list(merged.items()) == list(parsed.metadata.items()):
            logger.debug("Frontmatter of %s already up to date", path)
            return
        self._write(path, raw_text, serialize_frontmatter(merged, parsed.content), result)

    def _update_content(self, operation: MutationOperation, result: MutationResult) -> None:
        if not isinstance(operation.target, str):
            raise ValueError("content-update operation needs the new body text")
        path = operation.source_path
        raw_text = path.read_text(encoding="utf-8")
        self._write(path, raw_text, replace_body(raw_text, operation.target), result)

    def _delete(self, operation: MutationOperation, result: MutationResult) -> None:
        path = operation.source_path
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.create_backups:
            path.unlink()
            logger.debug("Deleted %s", path)
            return
        destination = _timestamped_sibling(path, "deleted")
        path.rename(destination)
        result.backups.append(destination)
        logger.debug("Soft-deleted %s -> %s", path, destination)

    def _write(self, path: Path, old_text: str, new_text: str, result: MutationResult) -> None:
        if new_text == old_text:
            logger.debug("No changes for %s", path)
            return
        if self.create_backups:
            backup = _timestamped_sibling(path, "backup")
            shutil.copy2(path, backup)
            result.backups.append(backup)
        path.write_text(new_text, encoding="utf-8")
        logger.debug("Updated %s", path)


def execute_plan(
    engine: MutationEngine,
    operations: Iterable[MutationOperation],
    apply: bool = False,
) -> dict[str, Any]:
    """Preview or apply a batch and return the tool payload.

    The payload always carries ``total``, ``success_count`` and ``failures``;
    a preview reports zero successes because nothing was written.
    """
    operations = list(operations)
    if apply:
        return {"applied": True, **engine.apply(operations).as_payload()}

    preview = engine.preview(operations)
    return {
        "applied": False,
        "total": preview.total,
        "success_count": 0,
        "failures": [],
        "preview": preview.as_payload(),
        "summary": preview.render(),
    }
