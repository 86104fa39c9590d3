"""Batch planners: find/replace, cleanup, date and tag updates, pipelines."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from obsidian_tools.core.metadata_operations import normalize_tag_values
from obsidian_tools.core.mutation_operations import MutationEngine
from obsidian_tools.core.organization_operations import plan_organization, plan_renames
from obsidian_tools.core.property_operations import parse_date, plan_property_updates
from obsidian_tools.core.vault_operations import scan_vault
from obsidian_tools.data_models import FileRecord, FrontmatterUpdate, MutationOperation

logger = logging.getLogger(__name__)

REPLACE_SCOPES = ("content", "frontmatter", "both")
CLEANUP_OPERATIONS = ("empty-files", "whitespace")
DATE_OPERATIONS = ("add-created", "add-modified", "standardize-dates", "add-timestamp")
DATE_PROPERTIES = ("created", "modified", "date", "updated")
TAG_ACTIONS = ("add", "remove", "replace")
PIPELINE_STEPS = (
    "standardize-properties",
    "clean-properties",
    "add-missing-properties",
    "sort-properties",
    "organize-by-date",
    "organize-by-tags",
    "sanitize-filenames",
    "remove-empty-files",
)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def compile_search(find: str, use_regex: bool = False, case_sensitive: bool = True) -> re.Pattern[str]:
    """Compile the search term for find/replace.

    Raises:
        ValueError: If ``find`` is empty or is an invalid regular expression.
    """
    if not find:
        raise ValueError("Search text cannot be empty")
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(find if use_regex else re.escape(find), flags)
    except re.error as exc:
        raise ValueError(f"Invalid regular expression '{find}': {exc}") from exc


def _replace_in_value(value: Any, substitute: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return substitute(value)
    if isinstance(value, list):
        return [_replace_in_value(item, substitute) for item in value]
    if isinstance(value, dict):
        return {key: _replace_in_value(item, substitute) for key, item in value.items()}
    return value


def _normalize_tag(tag: str) -> str:
    return tag.strip().lstrip("#").strip()


# ==============================================================================
# FIND AND REPLACE
# ==============================================================================


def plan_find_replace(
    records: Iterable[FileRecord],
    find: str,
    replace: str = "",
    scope: str = "content",
    use_regex: bool = False,
    case_sensitive: bool = True,
) -> list[MutationOperation]:
    """Plan content and frontmatter rewrites for every match of ``find``.

    Literal searches insert ``replace`` verbatim; regular expression searches
    allow group references such as ``\\1`` in ``replace``. Frontmatter
    matching walks string values only, never keys.

    Raises:
        ValueError: If the scope is unknown, the search term is empty or
            invalid, or the replacement refers to a group the pattern lacks.
    """
    if scope not in REPLACE_SCOPES:
        raise ValueError(f"Unknown scope '{scope}'. Use one of: {', '.join(REPLACE_SCOPES)}")
    pattern = compile_search(find, use_regex, case_sensitive)
    if use_regex:
        try:
            pattern.sub(replace, "")
        except (re.error, IndexError) as exc:
            raise ValueError(f"Invalid replacement template '{replace}': {exc}") from exc

    def substitute(text: str) -> str:
        if use_regex:
            return pattern.sub(replace, text)
        return pattern.sub(lambda _: replace, text)

    operations: list[MutationOperation] = []
    for record in records:
        if scope in ("content", "both"):
            new_content = substitute(record.content)
            if new_content != record.content:
                operations.append(MutationOperation.update_content(record.path, new_content, reason="find-replace"))

        if scope in ("frontmatter", "both") and record.frontmatter and not record.frontmatter_error:
            changed = {}
            for key, value in record.frontmatter.items():
                new_value = _replace_in_value(value, substitute)
                if new_value != value:
                    changed[key] = new_value
            if changed:
                operations.append(
                    MutationOperation.update_frontmatter(
                        record.path, FrontmatterUpdate(values=changed), reason="find-replace"
                    )
                )

    logger.info("Planned %d find/replace updates for '%s'", len(operations), find)
    return operations


# ==============================================================================
# CLEANUP
# ==============================================================================


def plan_cleanup(records: Iterable[FileRecord], operations: Sequence[str]) -> list[MutationOperation]:
    """Plan cleanup passes.

    ``empty-files`` soft-deletes notes whose body is blank; ``whitespace``
    strips trailing whitespace from every body line. A file slated for
    deletion is not also rewritten.
    """
    unknown = [name for name in operations if name not in CLEANUP_OPERATIONS]
    if not operations or unknown:
        raise ValueError(f"Cleanup operations must be any of: {', '.join(CLEANUP_OPERATIONS)}")

    planned: list[MutationOperation] = []
    deleted: set[Path] = set()
    records = list(records)

    if "empty-files" in operations:
        for record in records:
            if not record.content.strip():
                planned.append(MutationOperation.delete(record.path, reason="empty file"))
                deleted.add(record.path)

    if "whitespace" in operations:
        for record in records:
            if record.path in deleted:
                continue
            cleaned = "\n".join(line.rstrip() for line in record.content.split("\n"))
            if cleaned != record.content:
                planned.append(
                    MutationOperation.update_content(record.path, cleaned, reason="trailing whitespace")
                )

    logger.info("Planned %d cleanup operations", len(planned))
    return planned


# ==============================================================================
# DATE AND TAG UPDATES
# ==============================================================================


def plan_date_updates(
    records: Iterable[FileRecord],
    operation: str,
    now: Optional[datetime] = None,
) -> list[MutationOperation]:
    """Plan date property updates.

    Args:
        records: Scanned notes.
        operation: ``add-created`` / ``add-modified`` fill a missing or empty
            property from file stats; ``standardize-dates`` rewrites parseable
            ``created``, ``modified``, ``date`` and ``updated`` values as
            ``YYYY-MM-DD``; ``add-timestamp`` stamps ``updated`` with ``now``.
        now: Timestamp for ``add-timestamp``. Defaults to the current time.
    """
    if operation not in DATE_OPERATIONS:
        raise ValueError(f"Unknown date operation '{operation}'. Use one of: {', '.join(DATE_OPERATIONS)}")
    stamp = (now or datetime.now()).isoformat(timespec="seconds")

    planned: list[MutationOperation] = []
    for record in records:
        if record.frontmatter_error:
            continue
        frontmatter = record.frontmatter
        values: dict[str, Any] = {}

        if operation in ("add-created", "add-modified"):
            key = operation.removeprefix("add-")
            source: Optional[datetime] = getattr(record, key)
            if frontmatter.get(key) in (None, "") and source is not None:
                values[key] = source.date().isoformat()
        elif operation == "standardize-dates":
            for key in DATE_PROPERTIES:
                value = frontmatter.get(key)
                parsed = parse_date(value) if isinstance(value, str) else None
                if parsed is not None and parsed.isoformat() != value:
                    values[key] = parsed.isoformat()
        else:
            values["updated"] = stamp

        if values:
            planned.append(
                MutationOperation.update_frontmatter(record.path, FrontmatterUpdate(values=values), reason=operation)
            )

    logger.info("Planned %d date updates (%s)", len(planned), operation)
    return planned


def plan_tag_updates(
    records: Iterable[FileRecord],
    action: str,
    tag: str,
    new_tag: Optional[str] = None,
) -> list[MutationOperation]:
    """Plan edits of the frontmatter ``tags`` list.

    Tags are compared case-insensitively and a leading ``#`` is ignored.
    Inline ``#tags`` in note bodies are left alone.

    Raises:
        ValueError: If the action is unknown, a tag is blank, or ``replace``
            is missing ``new_tag``.
    """
    if action not in TAG_ACTIONS:
        raise ValueError(f"Unknown tag action '{action}'. Use one of: {', '.join(TAG_ACTIONS)}")
    tag = _normalize_tag(tag or "")
    if not tag:
        raise ValueError("Tag cannot be empty")
    replacement = _normalize_tag(new_tag or "")
    if action == "replace" and not replacement:
        raise ValueError("Replacing a tag requires the new tag")

    planned: list[MutationOperation] = []
    for record in records:
        if record.frontmatter_error:
            continue
        current = normalize_tag_values(record.frontmatter.get("tags"))
        matches = [item for item in current if _normalize_tag(item).lower() == tag.lower()]

        if action == "add":
            if matches:
                continue
            updated = current + [tag]
        elif not matches:
            continue
        elif action == "remove":
            updated = [item for item in current if item not in matches]
        else:
            updated = []
            for item in current:
                value = replacement if item in matches else item
                if value.lower() not in {existing.lower() for existing in updated}:
                    updated.append(value)

        planned.append(
            MutationOperation.update_frontmatter(
                record.path, FrontmatterUpdate(values={"tags": updated}), reason=f"{action}-tag"
            )
        )

    logger.info("Planned %d tag updates (%s '%s')", len(planned), action, tag)
    return planned


# ==============================================================================
# PIPELINE
# ==============================================================================


def _plan_step(step: str, records: list[FileRecord], vault_root: Path) -> list[MutationOperation]:
    if step.endswith("-properties"):
        operation = step.removesuffix("-properties")
        return plan_property_updates(records, [operation])[0]
    if step == "organize-by-date":
        return plan_organization(records, vault_root, "by-date")
    if step == "organize-by-tags":
        return plan_organization(records, vault_root, "by-tag")
    if step == "sanitize-filenames":
        return plan_renames(records, "sanitize")
    return plan_cleanup(records, ["empty-files"])


def run_pipeline(
    vault_root: Path,
    steps: Sequence[str],
    engine: MutationEngine,
    apply: bool = False,
    extra_excludes: Iterable[str] = (),
) -> list[dict[str, Any]]:
    """Run named steps in order, re-scanning the vault before each one.

    Records go stale after every write, so each step plans against a fresh
    scan. Without ``apply`` every step is only previewed against the current
    state of the vault.

    Returns:
        One payload per step with the step name, scan errors, and either a
        preview or the mutation result.

    Raises:
        ValueError: If no steps are given or a step name is unknown. Nothing
            runs in that case.
    """
    unknown = [step for step in steps if step not in PIPELINE_STEPS]
    if not steps or unknown:
        raise ValueError(f"Pipeline steps must be any of: {', '.join(PIPELINE_STEPS)}")

    excludes = tuple(extra_excludes)
    results: list[dict[str, Any]] = []
    for step in steps:
        records, errors = scan_vault(vault_root, excludes)
        operations = _plan_step(step, records, Path(vault_root))
        payload: dict[str, Any] = {
            "step": step,
            "planned": len(operations),
            "scan_errors": [error.as_payload() for error in errors],
        }
        if apply:
            payload.update(engine.apply(operations).as_payload())
        else:
            payload["preview"] = engine.preview(operations).as_payload()
        logger.info("Pipeline step '%s': %d operations", step, len(operations))
        results.append(payload)

    return results
