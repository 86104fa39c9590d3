"""Pydantic input models for vault management operations.

This module defines input models for vault management tools:
- Analyze a directory as a potential vault
- Set the current vault for the session
- List recently used vaults
- List folders and statistics of a vault
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .base import BaseVaultInput


class DirectoryPathInput(BaseModel):
    """Base model for tools that take a directory path.

    Examples:
        >>> DirectoryPathInput(path="~/Documents/Notes")
    """

    path: str = Field(
        min_length=1,
        description=(
            "Directory to analyze. "
            "Examples: '~/Documents/Notes', '/Users/me/Obsidian/Work'. "
            "'~' is expanded to the home directory."
        ),
        examples=["~/Documents/Notes", "/Users/me/Obsidian/Work"]
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate directory path is not blank.

        Args:
            v: The path to validate

        Returns:
            The stripped path

        Raises:
            ValueError: If path is empty or only whitespace
        """
        cleaned = v.strip()

        if not cleaned:
            raise ValueError(
                "Directory path cannot be empty. "
                "Provide the directory that holds your notes."
            )

        return cleaned


class AnalyzeDirectoryInput(DirectoryPathInput):
    """Input model for analyze_vault_directory tool.

    Reports whether a directory looks like a vault without selecting it.

    Examples:
        >>> AnalyzeDirectoryInput(path="~/Documents/Notes")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"path": "~/Documents/Notes"},
                {"path": "/Users/me/Obsidian/Work"}
            ]
        }


class SetCurrentVaultInput(DirectoryPathInput):
    """Input model for set_current_vault tool.

    Selects the current vault for the conversation session. Tools that omit
    vault_path use this vault afterwards.

    Examples:
        >>> SetCurrentVaultInput(path="~/Documents/Notes")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"path": "~/Documents/Notes"}
            ]
        }


class ListRecentVaultsInput(BaseModel):
    """Input model for list_recent_vaults tool.

    Takes no parameters; the model keeps every tool on the same calling
    convention.

    Examples:
        >>> ListRecentVaultsInput()
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}]
        }


class ListVaultFoldersInput(BaseVaultInput):
    """Input model for list_vault_folders tool.

    Examples:
        >>> ListVaultFoldersInput()
        >>> ListVaultFoldersInput(vault_path="~/Documents/Notes")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"vault_path": None},
                {"vault_path": "~/Documents/Notes"}
            ]
        }


class VaultStatisticsInput(BaseVaultInput):
    """Input model for get_vault_statistics tool.

    Examples:
        >>> VaultStatisticsInput()
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"vault_path": None}
            ]
        }
