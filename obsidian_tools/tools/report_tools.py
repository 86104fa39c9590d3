"""MCP tools for vault validation reports."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context

from obsidian_tools.server import mcp
from obsidian_tools.config import SETTINGS
from obsidian_tools.session import get_session
from obsidian_tools.models import ValidationReportInput
from obsidian_tools.core.report_operations import (
    build_validation_report,
    render_validation_report,
    write_report,
)
from obsidian_tools.core.vault_operations import build_file_records, list_markdown_files

logger = logging.getLogger(__name__)


@mcp.tool()
async def generate_validation_report(
    input: ValidationReportInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Validate every note and render a markdown validation report.

    Checks: empty files, malformed frontmatter, very long lines, unclosed
    code fences, missing title (frontmatter or H1), and property values of
    the wrong type.

    Args:
        input (ValidationReportInput): Validated input containing:
            - vault_path (str, optional), save (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "vault": str,
            "total_files": int,
            "processed_files": int,
            "error_files": int,
            "valid_files": int,
            "files_with_issues": int,
            "report": str,
            "report_path": str | None
        }
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    files = list_markdown_files(root, session.extra_excludes)
    records, errors = build_file_records(files)

    report = build_validation_report(
        records,
        errors,
        total=len(files),
        max_line_length=SETTINGS.max_line_length,
        vault_root=root,
    )
    rendered = render_validation_report(report)
    report_path = write_report(root, "validation-report", rendered) if input.save else None
    logger.info(
        "Validated %d files in %s: %d with issues",
        report["processed_files"],
        root,
        len(report["issues"]),
    )

    return {
        "vault": str(root),
        "total_files": report["total_files"],
        "processed_files": report["processed_files"],
        "error_files": report["error_files"],
        "valid_files": report["valid_files"],
        "files_with_issues": len(report["issues"]),
        "report": rendered,
        "report_path": str(report_path) if report_path else None,
    }
