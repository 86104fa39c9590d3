"""Pydantic input models for frontmatter property operations."""

from __future__ import annotations

from pydantic import Field, field_validator

from obsidian_tools.core.property_operations import PROPERTY_OPERATIONS

from .base import BaseMutationInput, BaseVaultInput, normalize_choice


class OrganizePropertiesInput(BaseMutationInput):
    """Input model for organize_vault_properties tool.

    Chains property strategies over every note's frontmatter, in the given
    order.

    Examples:
        >>> OrganizePropertiesInput(operations=["standardize", "sort"])
    """

    operations: list[str] = Field(
        min_length=1,
        description=(
            "Property strategies to apply in order: "
            "'standardize', 'clean', 'add-missing', 'sort'."
        ),
        examples=[["standardize", "clean", "sort"]]
    )

    @field_validator('operations')
    @classmethod
    def validate_operations(cls, v: list[str]) -> list[str]:
        """Validate and de-duplicate operation names, keeping their order."""
        cleaned: list[str] = []
        for name in v:
            choice = normalize_choice(name, PROPERTY_OPERATIONS, "operations")
            if choice not in cleaned:
                cleaned.append(choice)
        return cleaned

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"operations": ["standardize", "clean", "add-missing", "sort"], "apply": False}
            ]
        }


class PropertyReportInput(BaseVaultInput):
    """Input model for generate_property_report tool.

    Examples:
        >>> PropertyReportInput(save=False)
    """

    save: bool = Field(
        True,
        description=(
            "If True, also write the report to 'property-report-<millis>.md' "
            "in the vault root."
        )
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"save": True},
                {"vault_path": "~/Notes", "save": False}
            ]
        }
