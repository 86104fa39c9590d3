"""Pydantic input models for MCP tool validation.

This package defines Pydantic models that provide automatic input validation
for all MCP tools. Each model represents the input schema for one tool,
with field-level validation and descriptive error messages, so malformed
arguments are rejected before any file is touched.

Architecture:
- base: Base models (BaseVaultInput, BaseMutationInput) for common validation
- vault_models: Input models for vault selection and statistics
- organize_models: Input models for moving and renaming notes
- property_models: Input models for frontmatter property operations
- batch_models: Input models for find/replace, cleanup, dates, tags, pipelines, validation

Usage:
    from obsidian_tools.models import SetCurrentVaultInput, OrganizeFilesInput
    from obsidian_tools.models import FindReplaceInput, PipelineInput
"""

from .base import BaseMutationInput, BaseVaultInput
from .vault_models import (
    AnalyzeDirectoryInput,
    SetCurrentVaultInput,
    ListRecentVaultsInput,
    ListVaultFoldersInput,
    VaultStatisticsInput,
)
from .organize_models import (
    OrganizeFilesInput,
    RenameFilesInput,
)
from .property_models import (
    OrganizePropertiesInput,
    PropertyReportInput,
)
from .batch_models import (
    FindReplaceInput,
    CleanupInput,
    DateUpdateInput,
    TagUpdateInput,
    PipelineInput,
    ValidationReportInput,
)

__all__ = [
    # Base models
    "BaseVaultInput",
    "BaseMutationInput",
    # Vault models
    "AnalyzeDirectoryInput",
    "SetCurrentVaultInput",
    "ListRecentVaultsInput",
    "ListVaultFoldersInput",
    "VaultStatisticsInput",
    # Organization models
    "OrganizeFilesInput",
    "RenameFilesInput",
    # Property models
    "OrganizePropertiesInput",
    "PropertyReportInput",
    # Batch models
    "FindReplaceInput",
    "CleanupInput",
    "DateUpdateInput",
    "TagUpdateInput",
    "PipelineInput",
    "ValidationReportInput",
]
