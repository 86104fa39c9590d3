"""Tests for Pydantic input models.

This test suite validates the input validation logic for MCP tools,
ensuring that:
- Valid inputs are accepted and normalized correctly
- Invalid inputs raise ValidationError with descriptive messages
- Cross-field rules (custom pattern, replacement tag) are enforced
- Schema generation produces correct JSON schemas for MCP
"""

import pytest
from pydantic import ValidationError

from obsidian_tools.models import (
    AnalyzeDirectoryInput,
    CleanupInput,
    DateUpdateInput,
    FindReplaceInput,
    ListVaultFoldersInput,
    OrganizeFilesInput,
    OrganizePropertiesInput,
    PipelineInput,
    RenameFilesInput,
    SetCurrentVaultInput,
    TagUpdateInput,
    ValidationReportInput,
)


class TestVaultInputs:
    """Test suite for vault selection and vault-scoped models."""

    def test_directory_path_is_stripped(self):
        """Test that surrounding whitespace is removed from paths."""
        model = SetCurrentVaultInput(path="  ~/Notes  ")
        assert model.path == "~/Notes"

    def test_blank_directory_path_raises_error(self):
        """Test that whitespace-only paths are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            AnalyzeDirectoryInput(path="   ")
        assert "cannot be empty" in str(exc_info.value)

    def test_vault_path_defaults_to_current_vault(self):
        """Test that omitting vault_path leaves it None."""
        assert ListVaultFoldersInput().vault_path is None

    def test_vault_path_is_stripped(self):
        """Test that vault paths are stripped."""
        assert ListVaultFoldersInput(vault_path=" /vault ").vault_path == "/vault"

    def test_empty_vault_path_raises_error(self):
        """Test that an empty vault_path string is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            ListVaultFoldersInput(vault_path="  ")
        assert "Vault path cannot be empty" in str(exc_info.value)


class TestOrganizeInputs:
    """Test suite for organization and rename models."""

    def test_strategy_is_normalized(self):
        """Test that strategy names are case-insensitive."""
        model = OrganizeFilesInput(strategy=" By-Date ", date_field="Modified")
        assert model.strategy == "by-date"
        assert model.date_field == "modified"
        assert model.apply is False

    def test_unknown_strategy_raises_error(self):
        """Test that unknown strategies list the allowed values."""
        with pytest.raises(ValidationError) as exc_info:
            OrganizeFilesInput(strategy="by-color")
        assert "strategy must be one of" in str(exc_info.value)

    def test_custom_strategy_requires_pattern(self):
        """Test that the custom strategy needs a pattern."""
        with pytest.raises(ValidationError) as exc_info:
            OrganizeFilesInput(strategy="custom", pattern="  ")
        assert "needs a folder pattern" in str(exc_info.value)

    def test_custom_strategy_with_pattern(self):
        """Test that a custom pattern is accepted."""
        model = OrganizeFilesInput(strategy="custom", pattern="{type}/{year}", apply=True)
        assert model.pattern == "{type}/{year}"
        assert model.apply is True

    def test_rename_pattern_validation(self):
        """Test rename pattern normalization and rejection."""
        assert RenameFilesInput(pattern="DATE-PREFIX").pattern == "date-prefix"
        with pytest.raises(ValidationError):
            RenameFilesInput(pattern="slugify")


class TestPropertyInputs:
    """Test suite for property operation models."""

    def test_operations_are_deduplicated_in_order(self):
        """Test that repeated operations collapse while order is kept."""
        model = OrganizePropertiesInput(operations=["sort", "Standardize", "sort"])
        assert model.operations == ["sort", "standardize"]

    def test_empty_operations_raise_error(self):
        """Test that at least one operation is required."""
        with pytest.raises(ValidationError):
            OrganizePropertiesInput(operations=[])

    def test_unknown_operation_raises_error(self):
        """Test that unknown operation names are rejected."""
        with pytest.raises(ValidationError):
            OrganizePropertiesInput(operations=["explode"])


class TestBatchInputs:
    """Test suite for batch operation models."""

    def test_find_replace_defaults(self):
        """Test find/replace defaults."""
        model = FindReplaceInput(find="TODO")
        assert model.replace == ""
        assert model.scope == "content"
        assert model.use_regex is False
        assert model.case_sensitive is True

    def test_find_replace_rejects_empty_search_and_bad_scope(self):
        """Test that empty search text and unknown scopes are rejected."""
        with pytest.raises(ValidationError):
            FindReplaceInput(find="")
        with pytest.raises(ValidationError):
            FindReplaceInput(find="x", scope="everywhere")

    def test_cleanup_operations(self):
        """Test cleanup pass validation."""
        assert CleanupInput(operations=["whitespace", "whitespace"]).operations == ["whitespace"]
        with pytest.raises(ValidationError):
            CleanupInput(operations=["vacuum"])

    def test_date_operation(self):
        """Test date operation validation."""
        assert DateUpdateInput(operation="Add-Created").operation == "add-created"
        with pytest.raises(ValidationError):
            DateUpdateInput(operation="add-birthday")

    def test_tag_is_stripped_of_hash(self):
        """Test that a leading '#' is removed from tags."""
        model = TagUpdateInput(action="add", tag=" #inbox ")
        assert model.tag == "inbox"

    def test_tag_of_only_hash_raises_error(self):
        """Test that '#' alone is not a tag."""
        with pytest.raises(ValidationError):
            TagUpdateInput(action="add", tag="#")

    def test_replace_requires_new_tag(self):
        """Test that replace needs new_tag."""
        with pytest.raises(ValidationError) as exc_info:
            TagUpdateInput(action="replace", tag="todo")
        assert "requires 'new_tag'" in str(exc_info.value)
        assert TagUpdateInput(action="replace", tag="todo", new_tag="tasks").new_tag == "tasks"

    def test_pipeline_steps_allow_repeats(self):
        """Test that pipeline steps keep repeats and order."""
        steps = ["sort-properties", "organize-by-tags", "sort-properties"]
        assert PipelineInput(steps=steps).steps == steps

    def test_pipeline_rejects_unknown_step(self):
        """Test that unknown pipeline steps are rejected."""
        with pytest.raises(ValidationError):
            PipelineInput(steps=["launch-rockets"])

    def test_validation_report_saves_by_default(self):
        """Test the save default of the validation report."""
        assert ValidationReportInput().save is True


class TestPydanticIntegration:
    """Test suite for schema generation used by MCP."""

    def test_model_json_schema_generation(self):
        """Test that JSON schema is generated correctly for MCP."""
        schema = OrganizeFilesInput.model_json_schema()

        assert "properties" in schema
        for name in ("strategy", "date_field", "pattern", "vault_path", "apply"):
            assert name in schema["properties"]
        assert "description" in schema["properties"]["strategy"]
        assert "examples" in schema

    def test_model_dump_produces_dict(self):
        """Test that model_dump returns plain values."""
        model = TagUpdateInput(action="remove", tag="old", vault_path="/vault")
        assert model.model_dump() == {
            "vault_path": "/vault",
            "apply": False,
            "action": "remove",
            "tag": "old",
            "new_tag": None,
        }
