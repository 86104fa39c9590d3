"""Module-level constants for the Obsidian tools package."""

import os
from pathlib import Path

# Configuration
CONFIG_PATH = Path(os.environ.get("OBSIDIAN_TOOLS_CONFIG", Path(__file__).parent.parent / "settings.yaml"))
DEFAULT_HISTORY_PATH = Path.home() / ".config" / "obsidian-tools" / "vault-history.yaml"

# Vault layout
MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown", ".mdown", ".mkd"})
EXCLUDED_DIRECTORY_NAMES = frozenset({"node_modules", ".git", ".obsidian"})
OBSIDIAN_FOLDER = ".obsidian"
ORGANIZED_FOLDER = "organized"

# Size buckets (bytes, half-open upper bounds)
SIZE_BUCKETS = (
    (1024, "tiny"),
    (10_240, "small"),
    (102_400, "medium"),
)
SIZE_BUCKET_LARGEST = "large"

# Limits
PREVIEW_LIMIT = 10
MAX_LINE_LENGTH = 1000
MAX_RECENT_VAULTS = 10

# Logging
LOG_LEVEL = "INFO"
