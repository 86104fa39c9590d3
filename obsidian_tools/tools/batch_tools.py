"""Batch operation MCP tools.

This module provides MCP tool wrappers for vault-wide batch edits:
- Find and replace in content and frontmatter
- Cleanup of empty files and trailing whitespace
- Date property updates
- Frontmatter tag edits
- Multi-step pipelines

Every tool previews by default and only touches files with ``apply=True``.
All tools delegate to core operations in obsidian_tools.core.batch_operations.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import Context

from obsidian_tools.server import mcp
from obsidian_tools.config import SETTINGS
from obsidian_tools.session import VaultSession, get_session
from obsidian_tools.models import (
    FindReplaceInput,
    CleanupInput,
    DateUpdateInput,
    TagUpdateInput,
    PipelineInput,
)
from obsidian_tools.core.batch_operations import (
    plan_cleanup,
    plan_date_updates,
    plan_find_replace,
    plan_tag_updates,
    run_pipeline as run_pipeline_steps,
)
from obsidian_tools.core.mutation_operations import MutationEngine, execute_plan
from obsidian_tools.core.vault_operations import scan_vault
from obsidian_tools.data_models import FileRecord, MutationOperation, ScanError


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _scan(session: VaultSession, vault_path: str | None) -> tuple[Path, list[FileRecord], list[ScanError]]:
    root = session.resolve_vault_path(vault_path)
    records, errors = scan_vault(root, session.extra_excludes)
    return root, records, errors


def _run(
    root: Path,
    operations: list[MutationOperation],
    errors: list[ScanError],
    apply: bool,
) -> dict[str, Any]:
    payload = execute_plan(MutationEngine.from_settings(SETTINGS), operations, apply=apply)
    payload["vault"] = str(root)
    payload["scan_errors"] = [error.as_payload() for error in errors]
    return payload


# ==============================================================================
# BATCH OPERATIONS
# ==============================================================================

@mcp.tool()
async def find_and_replace(
    input: FindReplaceInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Find and replace text across note bodies and/or frontmatter values.

    Frontmatter keys are never changed, only string values (including
    strings inside lists).

    Args:
        input (FindReplaceInput): Validated input containing:
            - find (str), replace (str), scope ('content' | 'frontmatter' | 'both')
            - use_regex (bool), case_sensitive (bool)
            - vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "applied": bool, "total": int, "success_count": int, "failures": [...]}

    Error Handling:
        - Invalid regular expression → ValueError naming the pattern
    """
    root, records, errors = _scan(get_session(ctx), input.vault_path)
    operations = plan_find_replace(
        records,
        input.find,
        input.replace,
        scope=input.scope,
        use_regex=input.use_regex,
        case_sensitive=input.case_sensitive,
    )
    return _run(root, operations, errors, input.apply)


@mcp.tool()
async def cleanup_vault(
    input: CleanupInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Remove empty notes and/or strip trailing whitespace.

    Empty notes are soft-deleted to ``<path>.deleted.<millis>`` unless
    backups are disabled in settings.

    Args:
        input (CleanupInput): Validated input containing:
            - operations (list[str]): 'empty-files', 'whitespace'
            - vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "applied": bool, "total": int, "success_count": int, "failures": [...]}
    """
    root, records, errors = _scan(get_session(ctx), input.vault_path)
    return _run(root, plan_cleanup(records, input.operations), errors, input.apply)


@mcp.tool()
async def update_date_properties(
    input: DateUpdateInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Fill, standardize, or stamp date properties in frontmatter.

    Operations:
        - add-created / add-modified: copy the file date when the property is missing
        - standardize-dates: created, modified, date, updated → YYYY-MM-DD
        - add-timestamp: set updated to the current time

    Args:
        input (DateUpdateInput): Validated input containing:
            - operation (str), vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "applied": bool, "total": int, "success_count": int, "failures": [...]}
    """
    root, records, errors = _scan(get_session(ctx), input.vault_path)
    return _run(root, plan_date_updates(records, input.operation), errors, input.apply)


@mcp.tool()
async def update_tags(
    input: TagUpdateInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Add, remove, or replace a tag in every note's frontmatter ``tags`` list.

    Matching is case-insensitive. Inline ``#tags`` in note bodies are not changed.

    Args:
        input (TagUpdateInput): Validated input containing:
            - action (str), tag (str), new_tag (str, optional for replace)
            - vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "applied": bool, "total": int, "success_count": int, "failures": [...]}
    """
    root, records, errors = _scan(get_session(ctx), input.vault_path)
    operations = plan_tag_updates(records, input.action, input.tag, input.new_tag)
    return _run(root, operations, errors, input.apply)


@mcp.tool()
async def run_pipeline(
    input: PipelineInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Run several batch steps in order, re-scanning the vault between steps.

    Without ``apply`` each step is previewed against the vault as it is now,
    so later steps may plan differently once earlier steps are applied.

    Args:
        input (PipelineInput): Validated input containing:
            - steps (list[str]), vault_path (str, optional), apply (bool)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "applied": bool, "steps": [{"step": str, "planned": int, ...}]}
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    steps = run_pipeline_steps(
        root,
        input.steps,
        MutationEngine.from_settings(SETTINGS),
        apply=input.apply,
        extra_excludes=session.extra_excludes,
    )
    return {"vault": str(root), "applied": input.apply, "steps": steps}
