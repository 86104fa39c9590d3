"""
Tests for batch planners: find/replace, cleanup, dates, tags, and pipelines.
"""

from datetime import datetime

import pytest

from obsidian_tools.core.batch_operations import (
    compile_search,
    plan_cleanup,
    plan_date_updates,
    plan_find_replace,
    plan_tag_updates,
    run_pipeline,
)
from obsidian_tools.core.frontmatter_operations import parse_frontmatter
from obsidian_tools.core.mutation_operations import MutationEngine
from obsidian_tools.data_models import MutationKind
from conftest import make_record


# ============================================================================
# FIND AND REPLACE
# ============================================================================

def test_literal_replace_inserts_text_verbatim():
    record = make_record(content="foo (bar) foo")
    operations = plan_find_replace([record], "(bar)", r"\1")
    assert len(operations) == 1
    assert operations[0].kind is MutationKind.CONTENT_UPDATE
    assert operations[0].target == r"foo \1 foo"


def test_regex_replace_supports_group_references():
    record = make_record(content="mail bob@old.org and amy@old.org")
    operations = plan_find_replace([record], r"(\w+)@old\.org", r"\1@new.org", use_regex=True)
    assert operations[0].target == "mail bob@new.org and amy@new.org"


def test_case_insensitive_search():
    record = make_record(content="Draft DRAFT draft")
    operations = plan_find_replace([record], "draft", "final", case_sensitive=False)
    assert operations[0].target == "final final final"


def test_frontmatter_scope_walks_values_not_keys():
    record = make_record(
        frontmatter={"foo": "keep", "title": "Foo plan", "tags": ["foo", "bar"], "count": 1},
        content="foo in body",
    )

    operations = plan_find_replace([record], "foo", "baz", scope="frontmatter", case_sensitive=False)

    assert len(operations) == 1
    assert operations[0].kind is MutationKind.FRONTMATTER_UPDATE
    assert operations[0].target.values == {"title": "baz plan", "tags": ["baz", "bar"]}


def test_both_scope_plans_content_and_frontmatter():
    record = make_record(frontmatter={"title": "x"}, content="x")
    operations = plan_find_replace([record], "x", "y", scope="both")
    assert [op.kind for op in operations] == [MutationKind.CONTENT_UPDATE, MutationKind.FRONTMATTER_UPDATE]


def test_records_without_matches_are_skipped():
    assert plan_find_replace([make_record(content="nothing here")], "zzz", "y") == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"find": ""},
        {"find": "(", "use_regex": True},
        {"find": "x", "scope": "everywhere"},
        {"find": "(a)", "replace": r"\2", "use_regex": True},
        {"find": "(a)", "replace": r"\g<missing>", "use_regex": True},
    ],
)
def test_find_replace_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        plan_find_replace([make_record(content="x")], **kwargs)


def test_bad_group_reference_is_reported_before_planning():
    with pytest.raises(ValueError, match="Invalid replacement template"):
        plan_find_replace([make_record(content="no match")], "(a)", r"\2", use_regex=True)


def test_compile_search_escapes_literal_text():
    assert compile_search("a.b").search("axb") is None
    assert compile_search("a.b", use_regex=True).search("axb") is not None


# ============================================================================
# CLEANUP
# ============================================================================

def test_cleanup_deletes_empty_files_and_strips_trailing_whitespace():
    empty = make_record(path="/vault/empty.md", content="  \n\t\n")
    messy = make_record(path="/vault/messy.md", content="a  \nb\t\n")
    tidy = make_record(path="/vault/tidy.md", content="a\nb\n")

    operations = plan_cleanup([empty, messy, tidy], ["empty-files", "whitespace"])

    assert [(op.kind, op.source_path.name) for op in operations] == [
        (MutationKind.DELETE, "empty.md"),
        (MutationKind.CONTENT_UPDATE, "messy.md"),
    ]
    assert operations[1].target == "a\nb\n"


@pytest.mark.parametrize("operations", [[], ["vacuum"]])
def test_cleanup_rejects_unknown_operations(operations):
    with pytest.raises(ValueError):
        plan_cleanup([make_record()], operations)


# ============================================================================
# DATES
# ============================================================================

def test_add_created_fills_missing_or_empty_values():
    stamp = datetime(2024, 4, 5, 6, 7)
    records = [
        make_record(path="/vault/missing.md", created=stamp),
        make_record(path="/vault/empty.md", frontmatter={"created": ""}, created=stamp),
        make_record(path="/vault/present.md", frontmatter={"created": "2020-01-01"}, created=stamp),
        make_record(path="/vault/unknown.md"),
    ]

    operations = plan_date_updates(records, "add-created")

    assert [op.source_path.name for op in operations] == ["missing.md", "empty.md"]
    assert operations[0].target.values == {"created": "2024-04-05"}


def test_standardize_dates_rewrites_parseable_values():
    record = make_record(
        frontmatter={"date": "2024/1/5", "updated": "2024-01-05", "modified": "someday", "other": "2024/1/5"}
    )
    operations = plan_date_updates([record], "standardize-dates")
    assert operations[0].target.values == {"date": "2024-01-05"}


def test_add_timestamp_stamps_updated():
    operations = plan_date_updates(
        [make_record()], "add-timestamp", now=datetime(2024, 5, 6, 7, 8, 9, 123)
    )
    assert operations[0].target.values == {"updated": "2024-05-06T07:08:09"}


def test_date_updates_reject_unknown_operation():
    with pytest.raises(ValueError):
        plan_date_updates([make_record()], "add-birthday")


# ============================================================================
# TAGS
# ============================================================================

def test_add_tag_skips_notes_that_already_have_it():
    records = [
        make_record(path="/vault/a.md", frontmatter={"tags": "a, b"}),
        make_record(path="/vault/b.md", frontmatter={"tags": ["New"]}),
    ]
    operations = plan_tag_updates(records, "add", "#new")
    assert len(operations) == 1
    assert operations[0].target.values == {"tags": ["a", "b", "new"]}


def test_remove_tag_is_case_insensitive():
    record = make_record(frontmatter={"tags": ["Keep", "DROP"]})
    operations = plan_tag_updates([record], "remove", "drop")
    assert operations[0].target.values == {"tags": ["Keep"]}
    assert plan_tag_updates([make_record()], "remove", "drop") == []


def test_replace_tag_merges_duplicates():
    record = make_record(frontmatter={"tags": ["old", "keep", "New"]})
    operations = plan_tag_updates([record], "replace", "old", "new")
    assert operations[0].target.values == {"tags": ["new", "keep"]}


@pytest.mark.parametrize(
    "action, tag, new_tag",
    [("rename", "a", None), ("add", "#", None), ("replace", "a", None)],
)
def test_tag_updates_reject_bad_arguments(action, tag, new_tag):
    with pytest.raises(ValueError):
        plan_tag_updates([make_record()], action, tag, new_tag)


# ============================================================================
# PIPELINE
# ============================================================================

def test_pipeline_preview_leaves_vault_untouched(vault, write_note):
    note = write_note("a.md", "---\ndate-created: 2024-01-01\n---\nBody\n")
    empty = write_note("empty.md", "")
    before = note.read_text(encoding="utf-8")

    results = run_pipeline(vault, ["standardize-properties", "remove-empty-files"], MutationEngine())

    assert [(item["step"], item["planned"]) for item in results] == [
        ("standardize-properties", 1),
        ("remove-empty-files", 1),
    ]
    assert results[0]["preview"]["total"] == 1
    assert note.read_text(encoding="utf-8") == before
    assert empty.exists()


def test_pipeline_applies_steps_against_fresh_scans(vault, write_note):
    write_note("a.md", "---\ndate-created: 2024-01-01\n---\nBody\n")
    empty = write_note("empty.md", "")

    results = run_pipeline(
        vault,
        ["standardize-properties", "remove-empty-files", "organize-by-tags"],
        MutationEngine(),
        apply=True,
    )

    assert [item["success_count"] for item in results] == [1, 1, 1]
    assert not empty.exists()
    moved = vault / "organized" / "by-tags" / "untagged" / "a.md"
    assert parse_frontmatter(moved.read_text(encoding="utf-8")).metadata == {"created": "2024-01-01"}

    rerun = run_pipeline(vault, ["organize-by-tags"], MutationEngine(), apply=True)
    assert rerun[0]["planned"] == 0


@pytest.mark.parametrize("steps", [[], ["standardize-properties", "launch-rockets"]])
def test_pipeline_rejects_unknown_steps(vault, steps):
    with pytest.raises(ValueError):
        run_pipeline(vault, steps, MutationEngine())
