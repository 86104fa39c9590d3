"""Pydantic input models for file organization operations.

This module defines input models for organization tools:
- Move notes into organized folders by date, tag, type, size, or pattern
- Rename notes from their title, first heading, date, or sanitized name
"""

from __future__ import annotations

from typing import Optional
from pydantic import Field, field_validator, model_validator

from obsidian_tools.core.organization_operations import DATE_FIELDS, RENAME_PATTERNS, STRATEGIES

from .base import BaseMutationInput, normalize_choice


class OrganizeFilesInput(BaseMutationInput):
    """Input model for organize_vault_files tool.

    Moves notes under ``<vault>/organized/<strategy folder>/``.

    Examples:
        >>> OrganizeFilesInput(strategy="by-date", date_field="modified")
        >>> OrganizeFilesInput(strategy="custom", pattern="{type}/{year}/{month}")
    """

    strategy: str = Field(
        description=(
            "Grouping strategy: 'by-date', 'by-tag', 'by-type', 'by-size', or 'custom'."
        ),
        examples=["by-date", "by-tag", "custom"]
    )

    date_field: str = Field(
        "created",
        description="Date used by 'by-date': 'created' or 'modified'."
    )

    pattern: Optional[str] = Field(
        None,
        description=(
            "Folder pattern for 'custom'. Placeholders: {type}, {year}, {month}, {day}, {tags}. "
            "Example: '{type}/{year}/{month}'"
        )
    )

    @field_validator('strategy')
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        """Validate strategy is a known organization strategy."""
        return normalize_choice(v, STRATEGIES, "strategy")

    @field_validator('date_field')
    @classmethod
    def validate_date_field(cls, v: str) -> str:
        """Validate date_field is 'created' or 'modified'."""
        return normalize_choice(v, DATE_FIELDS, "date_field")

    @model_validator(mode='after')
    def validate_pattern_for_custom(self) -> 'OrganizeFilesInput':
        """Require a non-blank pattern for the custom strategy.

        Raises:
            ValueError: If strategy is 'custom' and pattern is missing
        """
        if self.strategy == "custom" and (not self.pattern or not self.pattern.strip()):
            raise ValueError(
                "The 'custom' strategy needs a folder pattern. "
                "Example: '{type}/{year}/{month}'."
            )
        return self

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"strategy": "by-date", "date_field": "created", "apply": False},
                {"strategy": "custom", "pattern": "{type}/{year}", "apply": True}
            ]
        }


class RenameFilesInput(BaseMutationInput):
    """Input model for rename_vault_files tool.

    Renames notes in place. Notes whose name would not change are skipped.

    Examples:
        >>> RenameFilesInput(pattern="title")
        >>> RenameFilesInput(pattern="date-prefix", apply=True)
    """

    pattern: str = Field(
        description="Rename pattern: 'title', 'heading', 'date-prefix', or 'sanitize'.",
        examples=["title", "sanitize"]
    )

    @field_validator('pattern')
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Validate pattern is a known rename pattern."""
        return normalize_choice(v, RENAME_PATTERNS, "pattern")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"pattern": "title", "apply": False},
                {"pattern": "sanitize", "vault_path": "~/Notes", "apply": True}
            ]
        }
