"""MCP tool definitions for Obsidian vault organization.

This module imports all tool submodules to register them with the MCP server.
Each tool module uses the @mcp.tool() decorator to auto-register its tools.
"""

# Import all tool modules to register their @mcp.tool() decorated functions
from obsidian_tools.tools import vault_tools
from obsidian_tools.tools import organize_tools
from obsidian_tools.tools import property_tools
from obsidian_tools.tools import batch_tools
from obsidian_tools.tools import report_tools

__all__ = [
    "vault_tools",
    "organize_tools",
    "property_tools",
    "batch_tools",
    "report_tools",
]
