"""MCP tools for vault selection and inspection."""

import logging
from typing import Any
from mcp.server.fastmcp import Context

from obsidian_tools.server import mcp
from obsidian_tools.models import (
    AnalyzeDirectoryInput,
    SetCurrentVaultInput,
    ListRecentVaultsInput,
    ListVaultFoldersInput,
    VaultStatisticsInput,
)
from obsidian_tools.session import get_session, get_session_key
from obsidian_tools.core.vault_operations import (
    analyze_directory,
    list_directories,
    scan_vault,
    summarize_vault,
)

logger = logging.getLogger(__name__)


@mcp.tool()
async def analyze_vault_directory(
    input: AnalyzeDirectoryInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Check whether a directory looks like an Obsidian vault.

    A directory is a vault when it has a ``.obsidian`` folder or contains at
    least one markdown file. Never fails on missing or unreadable paths;
    those are reported as ``is_vault: false``.

    Args:
        input (AnalyzeDirectoryInput): Validated input containing:
            - path (str): Directory to analyze ('~' is expanded)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "name": str,
            "path": str,
            "is_vault": bool,
            "has_obsidian_folder": bool,
            "markdown_files": int
        }

    Examples:
        - Use when: User points at a folder and asks if it holds notes
        - Don't use: To select the vault (use set_current_vault())
    """
    session = get_session(ctx)
    return analyze_directory(input.path, session.extra_excludes).as_payload()


@mcp.tool()
async def set_current_vault(
    input: SetCurrentVaultInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Select the current vault for this conversation session.

    The directory is analyzed first and only accepted when it is a vault.
    Accepted vaults are remembered in the recent-vault history.

    Args:
        input (SetCurrentVaultInput): Validated input containing:
            - path (str): Vault directory
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"accepted": bool, "vault": {...descriptor...}, "status": "current" | "rejected"}

    Error Handling:
        - ValidationError: Empty path
        - Not a vault → accepted is False and the previous vault stays current
    """
    session = get_session(ctx)
    accepted, descriptor = session.set_current_vault(input.path)
    if accepted and ctx is not None:
        logger.info("Current vault for session %s set to '%s'", get_session_key(ctx), descriptor.path)
    return {
        "accepted": accepted,
        "vault": descriptor.as_payload(),
        "status": "current" if accepted else "rejected",
    }


@mcp.tool()
async def list_recent_vaults(
    input: ListRecentVaultsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List recently used vaults (newest first) and the current vault.

    Args:
        input (ListRecentVaultsInput): Validated input (no fields required)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"current": str | None, "recent": [str, ...]}
    """
    session = get_session(ctx)
    current = session.current_vault
    return {
        "current": str(current.path) if current else None,
        "recent": [str(path) for path in session.history.load()],
    }


@mcp.tool()
async def list_vault_folders(
    input: ListVaultFoldersInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List every folder in the vault (recursive, sorted), skipping system folders.

    Args:
        input (ListVaultFoldersInput): Validated input containing:
            - vault_path (str, optional): Vault directory (omit for current vault)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {"vault": str, "folders": [str, ...]}  # vault-relative, forward slashes

    Error Handling:
        - No vault_path and no current vault → NoVaultSetError
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    folders = list_directories(root, session.extra_excludes)
    return {
        "vault": str(root),
        "folders": [folder.relative_to(root).as_posix() for folder in folders],
    }


@mcp.tool()
async def get_vault_statistics(
    input: VaultStatisticsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Summarize a vault: files, folders, tags, properties, largest and recent files.

    Scans every markdown file, so cost grows with vault size.

    Args:
        input (VaultStatisticsInput): Validated input containing:
            - vault_path (str, optional): Vault directory (omit for current vault)
        ctx (Context, optional): FastMCP context for session state

    Returns:
        {
            "vault": str,
            "total_files": int,
            "folders": [str],
            "tags": {tag: count},
            "properties": {name: [types]},
            "largest_files": [...],
            "recent_files": [...],
            "errors": [{"path": str, "error": str}]
        }
    """
    session = get_session(ctx)
    root = session.resolve_vault_path(input.vault_path)
    records, errors = scan_vault(root, session.extra_excludes)
    summary = summarize_vault(root, records)
    summary["errors"] = [error.as_payload() for error in errors]
    return summary
