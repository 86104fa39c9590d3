"""Property strategies: standardize, clean, complete, sort, and validate frontmatter."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, Optional

from obsidian_tools.data_models import FileRecord, FrontmatterUpdate, MutationOperation

logger = logging.getLogger(__name__)

# Canonical name -> (value type, aliases). Aliases are matched case-insensitively;
# "category" appears twice and resolves to the first entry, tags.
STANDARD_PROPERTIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "created": ("date", ("date-created", "datecreated", "creation-date")),
    "modified": ("date", ("date-modified", "datemodified", "last-modified")),
    "tags": ("array", ("tag", "categories", "category")),
    "title": ("string", ("name", "heading")),
    "author": ("string", ("creator", "writer")),
    "status": ("string", ("state",)),
    "priority": ("number", ("importance",)),
    "type": ("string", ("kind", "category")),
    "description": ("string", ("summary", "excerpt")),
    "source": ("string", ("reference", "url", "link")),
}

PROPERTY_ORDER = (
    "title",
    "created",
    "modified",
    "author",
    "tags",
    "type",
    "status",
    "priority",
    "description",
    "source",
)

PROPERTY_OPERATIONS = ("standardize", "clean", "add-missing", "sort")

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%m/%d/%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_SQUASH_RE = re.compile(r"[\W_]+")


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _squash(name: str) -> str:
    return _SQUASH_RE.sub("", name.lower())


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO or common human date string; ``None`` if it is not a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_number(value: Any) -> Optional[float | int]:
    if isinstance(value, bool) or not isinstance(value, str):
        return None
    text = value.strip()
    if not _NUMBER_RE.match(text):
        return None
    if _INTEGER_RE.match(text):
        return int(text)
    return float(text)


def value_type(value: Any) -> str:
    """Name a frontmatter value's type the way reports show it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def find_standard_property(name: str) -> Optional[str]:
    """Resolve ``name`` to its canonical property name.

    Resolution order: canonical name (case-insensitive), alias table, then a
    fuzzy match ignoring case, punctuation, and whitespace.

    Returns:
        The canonical name, or ``None`` when nothing matches.
    """
    lowered = name.lower()
    if lowered in STANDARD_PROPERTIES:
        return lowered
    for canonical, (_, aliases) in STANDARD_PROPERTIES.items():
        if lowered in aliases:
            return canonical
    squashed = _squash(name)
    for canonical in STANDARD_PROPERTIES:
        if squashed == _squash(canonical):
            return canonical
    return None


def properties_similar(first: str, second: str) -> bool:
    if first == second:
        return False
    if _squash(first) == _squash(second):
        return True
    canonical = find_standard_property(first)
    return canonical is not None and canonical == find_standard_property(second)


# ==============================================================================
# PROPERTY STRATEGIES
# ==============================================================================


def standardize_names(frontmatter: dict[str, Any]) -> tuple[dict[str, Any], list[dict[str, str]]]:
    """Rename aliased keys to their canonical names, keeping key positions.

    A key is left as-is when its canonical name is already taken, so no value
    is ever dropped and a second pass changes nothing.

    Returns:
        ``(frontmatter, mappings)`` where each mapping is ``{"from", "to"}``.
    """
    taken = set(frontmatter)
    standardized: dict[str, Any] = {}
    mappings: list[dict[str, str]] = []

    for key, value in frontmatter.items():
        canonical = find_standard_property(key)
        if canonical is None or canonical == key or canonical in taken:
            standardized[key] = value
            continue
        standardized[canonical] = value
        taken.add(canonical)
        mappings.append({"from": key, "to": canonical})

    return standardized, mappings


def clean_values(frontmatter: dict[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Normalize values of canonical properties to their expected type.

    Dates become ``YYYY-MM-DD``, comma strings become arrays, numeric strings
    become numbers. Values that cannot be normalized are left untouched.

    Returns:
        ``(frontmatter, changes)``; a change ``{"property", "from", "to"}`` is
        recorded only when the value actually differs.
    """
    cleaned: dict[str, Any] = {}
    changes: list[dict[str, Any]] = []

    for key, value in frontmatter.items():
        new_value = value
        expected = STANDARD_PROPERTIES.get(key, (None, ()))[0]
        if expected == "date" and isinstance(value, str):
            parsed = parse_date(value)
            if parsed is not None:
                new_value = parsed.isoformat()
        elif expected == "array" and isinstance(value, str):
            new_value = [item.strip() for item in value.split(",") if item.strip()]
        elif expected == "number":
            number = parse_number(value)
            if number is not None:
                new_value = number

        cleaned[key] = new_value
        if new_value != value or type(new_value) is not type(value):
            changes.append({"property": key, "from": value, "to": new_value})

    return cleaned, changes


def add_missing(
    frontmatter: dict[str, Any],
    created: Optional[datetime] = None,
    modified: Optional[datetime] = None,
) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Add ``created``, ``modified`` and ``tags`` when the key is absent.

    Presence is the only trigger: an existing empty value is kept.
    """
    updated = dict(frontmatter)
    additions: list[dict[str, Any]] = []

    for key, stamp in (("created", created), ("modified", modified)):
        if key not in updated and stamp is not None:
            updated[key] = stamp.date().isoformat()
            additions.append({"property": key, "value": updated[key]})

    if "tags" not in updated:
        updated["tags"] = []
        additions.append({"property": "tags", "value": []})

    return updated, additions


def sort_properties(frontmatter: dict[str, Any]) -> dict[str, Any]:
    """Order canonical keys first, then the rest in their original order."""
    ordered = {key: frontmatter[key] for key in PROPERTY_ORDER if key in frontmatter}
    for key, value in frontmatter.items():
        ordered.setdefault(key, value)
    return ordered


def validate_property(name: str, value: Any) -> tuple[bool, list[str]]:
    """Check a value's shape against its canonical type; unknown names pass."""
    if name not in STANDARD_PROPERTIES:
        return True, []

    expected = STANDARD_PROPERTIES[name][0]
    issues: list[str] = []
    if expected == "date" and parse_date(value) is None:
        issues.append(f"Invalid date format: {value}")
    elif expected == "array" and not isinstance(value, list):
        issues.append(f"Expected array, got {value_type(value)}")
    elif expected == "string" and not isinstance(value, str):
        issues.append(f"Expected string, got {value_type(value)}")
    elif expected == "number":
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not is_number and parse_number(value) is None:
            issues.append(f"Expected number, got {value_type(value)}")
    return not issues, issues


# ==============================================================================
# ANALYSIS AND PLANNING
# ==============================================================================


def analyze_properties(records: Iterable[FileRecord]) -> dict[str, Any]:
    """Gather per-property statistics, inconsistencies, and suggestions."""
    records = list(records)
    stats: dict[str, dict[str, Any]] = {}
    files_with_properties = 0

    for record in records:
        if not record.frontmatter:
            continue
        files_with_properties += 1
        for key, value in record.frontmatter.items():
            entry = stats.setdefault(key, {"count": 0, "types": [], "examples": [], "files": []})
            entry["count"] += 1
            kind = value_type(value)
            if kind not in entry["types"]:
                entry["types"].append(kind)
            if len(entry["examples"]) < 3:
                entry["examples"].append(value)
            entry["files"].append(str(record.path))

    inconsistencies: list[dict[str, Any]] = []
    names = list(stats)
    for index, name in enumerate(names):
        types = stats[name]["types"]
        if len(types) > 1:
            inconsistencies.append(
                {
                    "type": "mixed-types",
                    "property": name,
                    "details": f"Property '{name}' has {len(types)} different types: {', '.join(types)}",
                    "files": stats[name]["files"][:5],
                }
            )
        for other in names[index + 1:]:
            if properties_similar(name, other):
                inconsistencies.append(
                    {
                        "type": "similar-names",
                        "property": name,
                        "related_property": other,
                        "details": f"Properties '{name}' and '{other}' might be duplicates",
                    }
                )

    suggestions: list[dict[str, Any]] = []
    for name, entry in stats.items():
        canonical = find_standard_property(name)
        if canonical is not None and canonical != name:
            suggestions.append(
                {
                    "type": "standardize",
                    "from": name,
                    "to": canonical,
                    "reason": f"Standardize '{name}' to '{canonical}'",
                    "affected_files": entry["count"],
                }
            )
    for name in ("created", "modified", "tags"):
        if name not in stats:
            suggestions.append(
                {
                    "type": "add-missing",
                    "property": name,
                    "reason": f"Consider adding '{name}' property to files",
                    "affected_files": len(records),
                }
            )

    return {
        "total_files": len(records),
        "files_with_properties": files_with_properties,
        "properties": stats,
        "inconsistencies": inconsistencies,
        "suggestions": suggestions,
    }


def plan_property_updates(
    records: Iterable[FileRecord],
    operations: Sequence[str],
) -> tuple[list[MutationOperation], list[dict[str, Any]]]:
    """Chain property strategies over each record's frontmatter.

    Args:
        records: Scanned notes.
        operations: Strategy names from :data:`PROPERTY_OPERATIONS`, applied in
            the given order.

    Returns:
        ``(mutations, change_log)`` with one ``frontmatter-update`` per record
        whose frontmatter changed. Records with unparseable frontmatter are
        skipped.

    Raises:
        ValueError: If ``operations`` is empty or names an unknown strategy.
    """
    if not operations:
        raise ValueError("At least one property operation is required")
    unknown = [name for name in operations if name not in PROPERTY_OPERATIONS]
    if unknown:
        raise ValueError(
            f"Unknown property operation(s): {', '.join(unknown)}. "
            f"Use any of: {', '.join(PROPERTY_OPERATIONS)}"
        )

    mutations: list[MutationOperation] = []
    change_log: list[dict[str, Any]] = []

    for record in records:
        if record.frontmatter_error:
            logger.debug("Skipping %s: %s", record.path, record.frontmatter_error)
            continue

        current = dict(record.frontmatter)
        entry: dict[str, Any] = {"path": str(record.path)}
        for name in operations:
            if name == "standardize":
                current, entry["mappings"] = standardize_names(current)
            elif name == "clean":
                current, entry["changes"] = clean_values(current)
            elif name == "add-missing":
                current, entry["additions"] = add_missing(current, record.created, record.modified)
            elif name == "sort":
                current = sort_properties(current)

        if list(current.items()) == list(record.frontmatter.items()):
            continue

        update = FrontmatterUpdate(
            values=current,
            remove=tuple(key for key in record.frontmatter if key not in current),
            order=tuple(current),
        )
        mutations.append(
            MutationOperation.update_frontmatter(record.path, update, reason=", ".join(operations))
        )
        change_log.append(entry)

    logger.info("Planned property updates for %d files", len(mutations))
    return mutations, change_log
