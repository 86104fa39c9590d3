"""Validation and property reports rendered as markdown."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any, Optional

from obsidian_tools.constants import MAX_LINE_LENGTH
from obsidian_tools.core.property_operations import validate_property
from obsidian_tools.data_models import FileRecord, ScanError

logger = logging.getLogger(__name__)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _truncate(value: Any, max_length: int = 20) -> str:
    text = str(value)
    return f"{text[:max_length]}..." if len(text) > max_length else text


def _cell(value: Any) -> str:
    # Pipes would split the markdown table cell
    return str(value).replace("|", "\\|").replace("\n", " ")


def _display_path(path: Path, vault_root: Optional[Path]) -> str:
    if vault_root is not None and path.is_relative_to(vault_root):
        return path.relative_to(vault_root).as_posix()
    return str(path)


# ==============================================================================
# VALIDATION
# ==============================================================================


def validate_record(record: FileRecord, max_line_length: int = MAX_LINE_LENGTH) -> list[str]:
    """Return human-readable issues for one note; an empty list means valid."""
    issues: list[str] = []
    content = record.content

    if not content.strip():
        issues.append("File is empty")
    if record.frontmatter_error:
        issues.append(record.frontmatter_error)

    long_lines = sum(1 for line in content.split("\n") if len(line) > max_line_length)
    if long_lines:
        issues.append(f"{long_lines} very long lines detected (over {max_line_length} characters)")

    if content.count("```") % 2:
        issues.append("Unclosed code fence")

    has_h1 = any(heading.level == 1 for heading in record.headings)
    if not record.frontmatter.get("title") and not has_h1:
        issues.append("No title found in frontmatter or as H1 heading")

    for key, value in record.frontmatter.items():
        valid, problems = validate_property(key, value)
        if not valid:
            issues.extend(f"Property '{key}': {problem}" for problem in problems)

    return issues


def build_validation_report(
    records: Iterable[FileRecord],
    errors: Iterable[ScanError] = (),
    total: Optional[int] = None,
    max_line_length: int = MAX_LINE_LENGTH,
    vault_root: Optional[Path] = None,
) -> dict[str, Any]:
    """Aggregate per-file issues into a validation report payload.

    Args:
        records: Successfully built records.
        errors: Files that could not be read.
        total: Number of files found; defaults to records plus errors.
        max_line_length: Threshold for the long-line check.
        vault_root: When given, file paths are reported relative to it.
    """
    records = list(records)
    errors = list(errors)
    root = Path(vault_root).expanduser().resolve() if vault_root is not None else None

    issues = []
    for record in records:
        found = validate_record(record, max_line_length)
        if found:
            issues.append({"file": _display_path(record.path, root), "issues": found})

    return {
        "total_files": total if total is not None else len(records) + len(errors),
        "processed_files": len(records),
        "error_files": len(errors),
        "valid_files": len(records) - len(issues),
        "issues": issues,
        "errors": [
            {"file": _display_path(error.path, root), "error": str(error.error)} for error in errors
        ],
    }


# ==============================================================================
# RENDERING
# ==============================================================================


def render_validation_report(report: dict[str, Any], generated_on: Optional[date] = None) -> str:
    """Render a validation report payload as markdown."""
    generated_on = generated_on or date.today()
    lines = [
        "# Vault Validation Report",
        "",
        f"Generated on: {generated_on.isoformat()}",
        "",
        "## Summary",
        "",
        f"- **Total Files**: {report['total_files']}",
        f"- **Processed Files**: {report['processed_files']}",
        f"- **Files with Errors**: {report['error_files']}",
        f"- **Files with Issues**: {len(report['issues'])}",
        "",
    ]

    if report["issues"]:
        lines.extend(["## Issues Found", ""])
        for entry in report["issues"]:
            lines.extend([f"### {entry['file']}", ""])
            lines.extend(f"- {issue}" for issue in entry["issues"])
            lines.append("")

    if report.get("errors"):
        lines.extend(["## Processing Errors", ""])
        lines.extend(f"- {entry['file']}: {entry['error']}" for entry in report["errors"])
        lines.append("")

    return "\n".join(lines)


def render_property_report(analysis: dict[str, Any], generated_on: Optional[date] = None) -> str:
    """Render :func:`analyze_properties` output as markdown.

    Properties are listed most frequent first, ties broken by name.
    """
    generated_on = generated_on or date.today()
    total = analysis["total_files"]
    with_properties = analysis["files_with_properties"]
    share = round(with_properties / total * 100) if total else 0
    properties = analysis["properties"]

    lines = [
        "# Property Analysis Report",
        "",
        f"Generated on: {generated_on.isoformat()}",
        "",
        "## Summary",
        "",
        f"- **Total Files**: {total}",
        f"- **Files with Properties**: {with_properties} ({share}%)",
        f"- **Unique Properties**: {len(properties)}",
        "",
    ]

    if properties:
        lines.extend(
            [
                "## Property Statistics",
                "",
                "| Property | Count | Types | Example |",
                "|----------|-------|-------|---------|",
            ]
        )
        ranked = sorted(properties.items(), key=lambda item: (-item[1]["count"], item[0]))
        for name, stats in ranked:
            example = _truncate(stats["examples"][0]) if stats["examples"] else ""
            lines.append(
                f"| {_cell(name)} | {stats['count']} | {', '.join(stats['types'])} | {_cell(example)} |"
            )
        lines.append("")

    if analysis["inconsistencies"]:
        lines.extend(["## Inconsistencies", ""])
        lines.extend(f"- **{issue['type']}**: {issue['details']}" for issue in analysis["inconsistencies"])
        lines.append("")

    if analysis["suggestions"]:
        lines.extend(["## Suggestions", ""])
        lines.extend(
            f"- **{suggestion['type']}**: {suggestion['reason']} ({suggestion['affected_files']} files)"
            for suggestion in analysis["suggestions"]
        )
        lines.append("")

    return "\n".join(lines)


def write_report(vault_root: Path, prefix: str, content: str) -> Path:
    """Write ``content`` to ``<vault_root>/<prefix>-<unixMillis>.md``.

    Raises:
        FileExistsError: If the report path is already taken.
    """
    report_path = Path(vault_root).expanduser() / f"{prefix}-{int(time.time() * 1000)}.md"
    with report_path.open("x", encoding="utf-8") as handle:
        handle.write(content)
    logger.info("Report saved to %s", report_path)
    return report_path
