"""Settings loading and recent-vault history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from obsidian_tools.constants import (
    CONFIG_PATH,
    DEFAULT_HISTORY_PATH,
    LOG_LEVEL,
    MAX_LINE_LENGTH,
    MAX_RECENT_VAULTS,
    PREVIEW_LIMIT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSettings:
    """Operator settings shared by every tool invocation."""

    create_backups: bool = True
    preview_limit: int = PREVIEW_LIMIT
    max_line_length: int = MAX_LINE_LENGTH
    max_recent_vaults: int = MAX_RECENT_VAULTS
    history_path: Path = DEFAULT_HISTORY_PATH
    log_level: str = LOG_LEVEL
    exclude_names: frozenset[str] = field(default_factory=frozenset)


def _require(value: Any, expected: type, key: str) -> Any:
    # bool is an int subclass; keep "preview_limit: true" from slipping through
    if expected is int and isinstance(value, bool):
        raise ValueError(f"Setting '{key}' must be an integer")
    if not isinstance(value, expected):
        raise ValueError(f"Setting '{key}' must be of type {expected.__name__}")
    return value


def load_settings(config_path: Path = CONFIG_PATH) -> ToolSettings:
    """Load and validate the settings file.

    Args:
        config_path: Path to the YAML settings file. Defaults to ``settings.yaml``
            at the repository root, or ``$OBSIDIAN_TOOLS_CONFIG`` when set.

    Returns:
        A :class:`ToolSettings` instance. Defaults are used for every key the
        file omits, and for all keys when the file does not exist.

    Raises:
        ValueError: If the file exists but is not a mapping or a key has the
            wrong type.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        logger.debug("No settings file at %s; using defaults", config_path)
        return ToolSettings()

    raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw_config, dict):
        raise ValueError("Settings file must contain a mapping of setting names to values")

    defaults = ToolSettings()
    values: dict[str, Any] = {}

    if "create_backups" in raw_config:
        values["create_backups"] = _require(raw_config["create_backups"], bool, "create_backups")

    for key in ("preview_limit", "max_line_length", "max_recent_vaults"):
        if key in raw_config:
            number = _require(raw_config[key], int, key)
            if number < 1:
                raise ValueError(f"Setting '{key}' must be a positive integer")
            values[key] = number

    if "history_path" in raw_config:
        raw_path = _require(raw_config["history_path"], str, "history_path")
        values["history_path"] = Path(raw_path).expanduser()

    if "log_level" in raw_config:
        level = _require(raw_config["log_level"], str, "log_level").upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Setting 'log_level' has unknown level '{level}'")
        values["log_level"] = level

    if "exclude_names" in raw_config:
        names = _require(raw_config["exclude_names"], list, "exclude_names")
        if not all(isinstance(name, str) and name.strip() for name in names):
            raise ValueError("Setting 'exclude_names' must be a list of directory names")
        values["exclude_names"] = frozenset(name.strip() for name in names)

    unknown = sorted(set(raw_config) - set(defaults.__dataclass_fields__))
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))

    return ToolSettings(**{**defaults.__dict__, **values})


class VaultHistory:
    """Most-recently-used vault paths, newest first, persisted as YAML.

    History is a convenience; failures to read or write it are logged and
    never interrupt the caller.
    """

    def __init__(self, history_path: Path, max_entries: int = MAX_RECENT_VAULTS) -> None:
        self.history_path = Path(history_path)
        self.max_entries = max_entries
        self.recent: list[Path] = []

    def load(self) -> list[Path]:
        """Read history from disk, dropping paths that no longer exist."""
        try:
            if not self.history_path.exists():
                self.recent = []
                return self.recent
            data = yaml.safe_load(self.history_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.debug("Error loading vault history from %s: %s", self.history_path, exc)
            self.recent = []
            return self.recent

        entries = data.get("recent_vaults", []) if isinstance(data, dict) else []
        self.recent = [
            Path(entry) for entry in entries if isinstance(entry, str) and Path(entry).exists()
        ][: self.max_entries]
        return self.recent

    def save(self) -> None:
        payload = {
            "recent_vaults": [str(path) for path in self.recent],
            "last_updated": datetime.now().isoformat(timespec="seconds"),
        }
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            self.history_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        except OSError as exc:
            logger.debug("Error saving vault history to %s: %s", self.history_path, exc)

    def add(self, vault_path: Path) -> list[Path]:
        """Move ``vault_path`` to the front of the history and persist it."""
        vault_path = Path(vault_path)
        self.recent = [path for path in self.recent if path != vault_path]
        self.recent.insert(0, vault_path)
        del self.recent[self.max_entries :]
        self.save()
        return self.recent


# Module-level singleton - loaded once at import time
SETTINGS = load_settings()
