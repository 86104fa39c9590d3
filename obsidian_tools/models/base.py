"""Base Pydantic models for MCP tool input validation.

This module defines base models that provide common validation patterns
for vault-scoped and mutating operations. Other input models inherit from
these bases.

Base Models:
- BaseVaultInput: Optional vault path, falling back to the current vault
- BaseMutationInput: Adds the preview/apply switch for mutating tools
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def normalize_choice(value: str, allowed: Iterable[str], field_name: str) -> str:
    """Lower-case and strip ``value`` and check it against ``allowed``.

    Raises:
        ValueError: If the cleaned value is not one of ``allowed``.
    """
    allowed = tuple(allowed)
    cleaned = value.strip().lower()
    if cleaned not in allowed:
        raise ValueError(
            f"{field_name} must be one of: {', '.join(allowed)}. "
            f"Got: '{value}'"
        )
    return cleaned


class BaseVaultInput(BaseModel):
    """Base model for operations scoped to one vault.

    Provides the optional ``vault_path``. When it is omitted the session's
    current vault is used.
    """

    vault_path: Optional[str] = Field(
        None,
        description=(
            "Absolute path of the vault directory (omit to use the current vault). "
            "Use set_current_vault() to select a vault for the session."
        ),
        examples=["/home/me/Documents/Notes", "~/Obsidian/Work"]
    )

    @field_validator('vault_path')
    @classmethod
    def validate_vault_path(cls, v: Optional[str]) -> Optional[str]:
        """Validate vault path format.

        Args:
            v: The vault path to validate

        Returns:
            The stripped vault path or None

        Raises:
            ValueError: If vault path is an empty string
        """
        if v is not None and not v.strip():
            raise ValueError(
                "Vault path cannot be empty. "
                "Either omit vault_path to use the current vault, "
                "or provide the directory of a vault."
            )

        return v.strip() if v else None


class BaseMutationInput(BaseVaultInput):
    """Base model for tools that change files.

    Mutating tools only preview their planned operations unless ``apply`` is
    set, so every change is seen before it is made.
    """

    apply: bool = Field(
        False,
        description=(
            "If False (default), return a preview of the planned operations only. "
            "If True, apply them and report successes and failures."
        )
    )
