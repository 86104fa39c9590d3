"""File organization MCP tools.

This module provides MCP tool wrappers for reorganizing notes:
- Move notes into ``organized/`` folders by date, tag, type, size, or pattern
- Rename notes in place

Every tool previews by default and only touches files with ``apply=True``.
All tools delegate to core operations in obsidian_tools.core.
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from obsidian_tools.server import mcp
from obsidian_tools.config import SETTINGS
from obsidian_tools.session import get_session
from obsidian_tools.models import OrganizeFilesInput, RenameFilesInput
from obsidian_tools.core.mutation_operations import MutationEngine, execute_plan
from obsidian_tools.core.organization_operations import plan_organization, plan_renames
from obsidian_tools.core.vault_operations import scan_vault


# ==============================================================================
# ORGANIZATION OPERATIONS
# ==============================================================================

@mcp.tool()
async def organize_vault_files(
    input: OrganizeFilesInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Move notes into ``<vault>/organized/<strategy>/...`` folders.

    Strategies:
        - by-date: organized/by-date/{year}/{year}-{month} (notes without the date are skipped)
        - by-tag: organized/by-tags/{first tag} or organized/by-tags/untagged
        - by-type: organized/by-type/{frontmatter type or guessed type}
        - by-size: organized/by-size/{tiny|small|medium|large}
        - custom: organized/custom/{pattern with placeholders filled}

    Existing files are never overwritten; a move onto an occupied path is
    reported as a failure and the rest of the batch continues.

    Args:
        input (OrganizeFilesInput): Validated input containing:
            - strategy (str), date_field (str), pattern (str, optional)
            - vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "vault": str,
            "strategy": str,
            "applied": bool,
            "total": int,
            "success_count": int,
            "failures": [...],
            "preview": {...}            # only when applied is False
        }
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    records, errors = scan_vault(root, session.extra_excludes)
    operations = plan_organization(
        records,
        root,
        input.strategy,
        date_field=input.date_field,
        pattern=input.pattern,
    )
    payload = execute_plan(MutationEngine.from_settings(SETTINGS), operations, apply=input.apply)
    payload.update(
        {
            "vault": str(root),
            "strategy": input.strategy,
            "scan_errors": [error.as_payload() for error in errors],
        }
    )
    return payload


@mcp.tool()
async def rename_vault_files(
    input: RenameFilesInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Rename notes in place from their title, first heading, date, or name.

    Patterns:
        - title: frontmatter ``title``, sanitized
        - heading: first heading text, sanitized
        - date-prefix: ``YYYY-MM-DD-`` + current name (creation date)
        - sanitize: current name with unsafe characters replaced

    Args:
        input (RenameFilesInput): Validated input containing:
            - pattern (str), vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        Same shape as organize_vault_files, with "pattern" instead of "strategy".
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    records, errors = scan_vault(root, session.extra_excludes)
    operations = plan_renames(records, input.pattern)
    payload = execute_plan(MutationEngine.from_settings(SETTINGS), operations, apply=input.apply)
    payload.update(
        {
            "vault": str(root),
            "pattern": input.pattern,
            "scan_errors": [error.as_payload() for error in errors],
        }
    )
    return payload
