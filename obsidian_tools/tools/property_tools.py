"""MCP tools for frontmatter property organization and reporting."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from obsidian_tools.server import mcp
from obsidian_tools.config import SETTINGS
from obsidian_tools.session import get_session
from obsidian_tools.models import OrganizePropertiesInput, PropertyReportInput
from obsidian_tools.core.mutation_operations import MutationEngine, execute_plan
from obsidian_tools.core.property_operations import analyze_properties, plan_property_updates
from obsidian_tools.core.report_operations import render_property_report, write_report
from obsidian_tools.core.vault_operations import scan_vault


@mcp.tool()
async def organize_vault_properties(
    input: OrganizePropertiesInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Standardize, clean, complete, and sort frontmatter across the vault.

    Operations (applied in the order given):
        - standardize: rename aliases to canonical names (e.g. date-created → created)
        - clean: dates to YYYY-MM-DD, comma lists to arrays, numeric strings to numbers
        - add-missing: add created/modified from file dates and an empty tags list
        - sort: canonical keys first (title, created, modified, author, tags, ...)

    Each file is re-read right before writing, so edits made since the scan
    are merged rather than overwritten.

    Args:
        input (OrganizePropertiesInput): Validated input containing:
            - operations (list[str]), vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "vault": str,
            "applied": bool,
            "total": int,
            "success_count": int,
            "failures": [...],
            "changes": [{"path": str, "mappings": [...], "changes": [...], "additions": [...]}]
        }
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    records, errors = scan_vault(root, session.extra_excludes)
    operations, change_log = plan_property_updates(records, input.operations)

    payload = execute_plan(MutationEngine.from_settings(SETTINGS), operations, apply=input.apply)
    payload.update(
        {
            "vault": str(root),
            "changes": change_log[: SETTINGS.preview_limit] if not input.apply else change_log,
            "scan_errors": [error.as_payload() for error in errors],
        }
    )
    return payload


@mcp.tool()
async def generate_property_report(
    input: PropertyReportInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Analyze frontmatter usage and render a markdown property report.

    Reports per-property counts, value types, examples, inconsistencies
    (mixed types, near-duplicate names), and suggestions.

    Args:
        input (PropertyReportInput): Validated input containing:
            - vault_path (str, optional), save (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "report": str, "report_path": str | None,
         "inconsistencies": int, "suggestions": int}
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    records, _ = scan_vault(root, session.extra_excludes)
    analysis = analyze_properties(records)
    report = render_property_report(analysis)

    report_path = write_report(root, "property-report", report) if input.save else None
    return {
        "vault": str(root),
        "report": report,
        "report_path": str(report_path) if report_path else None,
        "inconsistencies": len(analysis["inconsistencies"]),
        "suggestions": len(analysis["suggestions"]),
    }
