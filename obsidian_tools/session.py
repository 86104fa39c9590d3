"""Session state management for the current vault."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from mcp.server.fastmcp import Context

from obsidian_tools.config import SETTINGS, VaultHistory
from obsidian_tools.core.vault_operations import analyze_directory
from obsidian_tools.data_models import VaultDescriptor
from obsidian_tools.errors import NoVaultSetError

logger = logging.getLogger(__name__)


class VaultSession:
    """Current vault plus recent-vault history for one operator.

    Args:
        history: Persisted recent-vault list. A fresh history built from the
            loaded settings is used when omitted.
        extra_excludes: Directory names skipped in addition to the built-in ones.
    """

    def __init__(
        self,
        history: Optional[VaultHistory] = None,
        extra_excludes: frozenset[str] = SETTINGS.exclude_names,
    ) -> None:
        if history is None:
            history = VaultHistory(SETTINGS.history_path, SETTINGS.max_recent_vaults)
            history.load()
        self.history = history
        self.extra_excludes = extra_excludes
        self.current_vault: Optional[VaultDescriptor] = None

    def set_current_vault(self, vault_path: Path) -> tuple[bool, VaultDescriptor]:
        """Analyze ``vault_path`` and make it current when it is a vault.

        Returns:
            ``(accepted, descriptor)``. A rejected directory leaves the
            current vault unchanged.
        """
        descriptor = analyze_directory(vault_path, self.extra_excludes)
        if not descriptor.is_vault:
            logger.info("Rejected %s: not a vault", vault_path)
            return False, descriptor

        self.current_vault = descriptor
        self.history.add(descriptor.path)
        logger.info("Current vault set to %s", descriptor.path)
        return True, descriptor

    def resolve_vault_path(self, vault_path: Optional[str | Path] = None) -> Path:
        """Return the explicit path when given, else the current vault's path.

        Raises:
            NoVaultSetError: If no path is given and no vault is current.
        """
        if vault_path:
            return Path(vault_path).expanduser().resolve()
        if self.current_vault is None:
            raise NoVaultSetError()
        return self.current_vault.path


# Session state storage
_SESSIONS: Dict[int, VaultSession] = {}


def get_session_key(ctx: Context) -> int:
    """Produce a stable per-session key from the FastMCP session object identity."""
    return id(ctx.session)


def get_session(ctx: Optional[Context] = None) -> VaultSession:
    """Return the :class:`VaultSession` for a client connection.

    Calls without a context share one process-local session.
    """
    key = get_session_key(ctx) if ctx is not None else 0
    if key not in _SESSIONS:
        _SESSIONS[key] = VaultSession()
    return _SESSIONS[key]
