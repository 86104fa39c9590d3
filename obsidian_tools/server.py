"""FastMCP server initialization and tool registration."""

import logging
from mcp.server.fastmcp import FastMCP

from obsidian_tools.config import SETTINGS

# Initialize logger
logging.basicConfig(level=SETTINGS.log_level)
logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("obsidian_tools")

# Tool modules are imported in __init__.py to register all @mcp.tool() decorators


def run_server():
    """Start the MCP server with stdio transport."""
    logger.info("Starting Obsidian tools server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
