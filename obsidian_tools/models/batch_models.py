"""Pydantic input models for batch operations.

This module defines input models for batch tools:
- Find and replace across content and frontmatter
- Cleanup (empty files, trailing whitespace)
- Date property updates
- Frontmatter tag edits
- Multi-step pipelines
- Validation reports
"""

from __future__ import annotations

from typing import Optional
from pydantic import Field, field_validator, model_validator

from obsidian_tools.core.batch_operations import (
    CLEANUP_OPERATIONS,
    DATE_OPERATIONS,
    PIPELINE_STEPS,
    REPLACE_SCOPES,
    TAG_ACTIONS,
)

from .base import BaseMutationInput, BaseVaultInput, normalize_choice


class FindReplaceInput(BaseMutationInput):
    """Input model for find_and_replace tool.

    Examples:
        >>> FindReplaceInput(find="TODO", replace="DONE")
        >>> FindReplaceInput(find=r"(\\d{4})", replace=r"[\\1]", use_regex=True, scope="both")
    """

    find: str = Field(
        min_length=1,
        description="Text (or regular expression when use_regex is True) to search for."
    )

    replace: str = Field(
        "",
        description="Replacement text. With use_regex, group references like \\1 are allowed."
    )

    scope: str = Field(
        "content",
        description="Where to search: 'content', 'frontmatter', or 'both'."
    )

    use_regex: bool = Field(False, description="Treat 'find' as a regular expression.")

    case_sensitive: bool = Field(True, description="Match case exactly.")

    @field_validator('scope')
    @classmethod
    def validate_scope(cls, v: str) -> str:
        """Validate scope is content, frontmatter, or both."""
        return normalize_choice(v, REPLACE_SCOPES, "scope")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"find": "TODO", "replace": "DONE", "scope": "content"},
                {"find": "draft", "replace": "published", "scope": "frontmatter", "case_sensitive": False}
            ]
        }


class CleanupInput(BaseMutationInput):
    """Input model for cleanup_vault tool.

    Examples:
        >>> CleanupInput(operations=["empty-files", "whitespace"])
    """

    operations: list[str] = Field(
        min_length=1,
        description="Cleanup passes: 'empty-files' (soft delete) and/or 'whitespace'."
    )

    @field_validator('operations')
    @classmethod
    def validate_operations(cls, v: list[str]) -> list[str]:
        """Validate cleanup pass names."""
        return list(dict.fromkeys(normalize_choice(name, CLEANUP_OPERATIONS, "operations") for name in v))

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"operations": ["empty-files"], "apply": False}
            ]
        }


class DateUpdateInput(BaseMutationInput):
    """Input model for update_date_properties tool.

    Examples:
        >>> DateUpdateInput(operation="standardize-dates")
    """

    operation: str = Field(
        description=(
            "Date operation: 'add-created', 'add-modified', "
            "'standardize-dates', or 'add-timestamp'."
        )
    )

    @field_validator('operation')
    @classmethod
    def validate_operation(cls, v: str) -> str:
        """Validate the date operation name."""
        return normalize_choice(v, DATE_OPERATIONS, "operation")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"operation": "add-created", "apply": True}
            ]
        }


class TagUpdateInput(BaseMutationInput):
    """Input model for update_tags tool.

    Examples:
        >>> TagUpdateInput(action="add", tag="inbox")
        >>> TagUpdateInput(action="replace", tag="todo", new_tag="tasks")
    """

    action: str = Field(description="Tag action: 'add', 'remove', or 'replace'.")

    tag: str = Field(
        min_length=1,
        description="Tag to add, remove, or replace (a leading '#' is ignored)."
    )

    new_tag: Optional[str] = Field(
        None,
        description="Replacement tag; required when action is 'replace'."
    )

    @field_validator('action')
    @classmethod
    def validate_action(cls, v: str) -> str:
        """Validate the tag action name."""
        return normalize_choice(v, TAG_ACTIONS, "action")

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Strip whitespace and a leading '#'."""
        cleaned = v.strip().lstrip("#").strip()
        if not cleaned:
            raise ValueError("Tag cannot be empty. Provide a tag such as 'project'.")
        return cleaned

    @model_validator(mode='after')
    def validate_new_tag(self) -> 'TagUpdateInput':
        """Require new_tag for the replace action."""
        if self.action == "replace" and (not self.new_tag or not self.new_tag.strip().lstrip("#")):
            raise ValueError(
                "Replacing a tag requires 'new_tag'. "
                "Example: action='replace', tag='todo', new_tag='tasks'."
            )
        return self

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"action": "add", "tag": "inbox"},
                {"action": "replace", "tag": "todo", "new_tag": "tasks", "apply": True}
            ]
        }


class PipelineInput(BaseMutationInput):
    """Input model for run_pipeline tool.

    Steps run in order and each step sees the vault as the previous step
    left it.

    Examples:
        >>> PipelineInput(steps=["standardize-properties", "sort-properties"])
    """

    steps: list[str] = Field(
        min_length=1,
        description=(
            "Ordered steps: 'standardize-properties', 'clean-properties', "
            "'add-missing-properties', 'sort-properties', 'organize-by-date', "
            "'organize-by-tags', 'sanitize-filenames', 'remove-empty-files'."
        )
    )

    @field_validator('steps')
    @classmethod
    def validate_steps(cls, v: list[str]) -> list[str]:
        """Validate step names; repeats are allowed."""
        return [normalize_choice(step, PIPELINE_STEPS, "steps") for step in v]

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"steps": ["standardize-properties", "clean-properties", "sort-properties"]}
            ]
        }


class ValidationReportInput(BaseVaultInput):
    """Input model for generate_validation_report tool.

    Examples:
        >>> ValidationReportInput(save=False)
    """

    save: bool = Field(
        True,
        description=(
            "If True, also write the report to 'validation-report-<millis>.md' "
            "in the vault root."
        )
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"save": True}
            ]
        }
