"""Obsidian Tools MCP Server

Vault scanning, bulk organization, and frontmatter maintenance for Obsidian
vaults via Model Context Protocol.
"""

from obsidian_tools.config import SETTINGS, VaultHistory
from obsidian_tools.data_models import FileRecord, MutationOperation, VaultDescriptor
from obsidian_tools.errors import DestinationExistsError, NoVaultSetError
from obsidian_tools.session import VaultSession, get_session
from obsidian_tools.server import mcp, run_server

# Import tools to register them with the MCP server
from obsidian_tools import tools  # noqa: F401

__version__ = "0.1.0"
__all__ = [
    "SETTINGS",
    "VaultHistory",
    "FileRecord",
    "MutationOperation",
    "VaultDescriptor",
    "DestinationExistsError",
    "NoVaultSetError",
    "VaultSession",
    "get_session",
    "mcp",
    "run_server",
]
