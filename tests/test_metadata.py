"""
Tests for metadata extraction: tags, headings, links, and word counts.
"""

from obsidian_tools.core.metadata_operations import (
    count_words,
    extract_headings,
    extract_links,
    extract_metadata,
    extract_tags,
    normalize_tag_values,
    strip_code,
)
from obsidian_tools.data_models import Heading


# ============================================================================
# TAGS
# ============================================================================

def test_inline_and_frontmatter_tags_are_united():
    tags = extract_tags("content with #tag1 and #tag2", {"tags": ["tag2", "tag3"]})
    assert set(tags) == {"tag1", "tag2", "tag3"}
    assert len(tags) == 3


def test_tags_keep_first_seen_order():
    tags = extract_tags("#beta then #alpha then #beta", {"tags": "gamma, alpha"})
    assert tags == ["beta", "alpha", "gamma"]


def test_tags_inside_code_are_ignored():
    body = "```\n#notatag\n```\nInline `#skip` and #real"
    assert extract_tags(body, {}) == ["real"]


def test_hash_inside_words_or_urls_is_not_a_tag():
    body = "issue#12 and https://example.com/#anchor and #ok-tag"
    assert extract_tags(body, {}) == ["ok-tag"]


def test_normalize_tag_values_variants():
    assert normalize_tag_values(None) == []
    assert normalize_tag_values("a, b ,, ") == ["a", "b"]
    assert normalize_tag_values([" x ", "", None, 3]) == ["x", "3"]
    assert normalize_tag_values("single") == ["single"]


# ============================================================================
# HEADINGS AND LINKS
# ============================================================================

def test_headings_extract_level_and_text():
    body = "# Title\ntext\n## Sub Heading  \n###### Deep\n####### too deep\n#notaheading"
    assert extract_headings(body) == [
        Heading(level=1, text="Title"),
        Heading(level=2, text="Sub Heading"),
        Heading(level=6, text="Deep"),
    ]


def test_links_standard_then_wiki():
    body = "See [[Other|Shown]] and [Docs](https://example.com/docs) plus [[Page]]."
    links = [link.as_payload() for link in extract_links(body)]
    assert links == [
        {"type": "standard", "text": "Docs", "url": "https://example.com/docs"},
        {"type": "wiki", "page": "Other", "text": "Shown"},
        {"type": "wiki", "page": "Page", "text": "Page"},
    ]


# ============================================================================
# WORD COUNT
# ============================================================================

def test_word_count_strips_markdown_syntax():
    assert count_words("Hello **world** with [link](http://x.org) and `code`") == 5


def test_word_count_ignores_fenced_code():
    body = "# Heading\n\nOne two\n\n```python\nprint('hidden words here')\n```\n*three*"
    assert count_words(body) == 4


def test_strip_code_removes_fences_and_spans():
    assert strip_code("a ```x``` b `y` c") == "a  b  c"


# ============================================================================
# FULL EXTRACTION
# ============================================================================

def test_extract_metadata_combines_everything():
    raw = "---\ntitle: Plan\ntags: [work]\n---\n# Plan\nShip it #release\n[[Roadmap]]\n"
    metadata = extract_metadata(raw)
    assert metadata.frontmatter == {"title": "Plan", "tags": ["work"]}
    assert metadata.content.startswith("# Plan")
    assert metadata.tags == ["release", "work"]
    assert metadata.headings == [Heading(level=1, text="Plan")]
    assert [link.page for link in metadata.links] == ["Roadmap"]
    assert metadata.has_frontmatter is True
    assert metadata.frontmatter_error is None


def test_extract_metadata_on_malformed_frontmatter_never_raises():
    raw = "---\nnot yaml at all\n---\nBody #kept"
    metadata = extract_metadata(raw)
    assert metadata.frontmatter == {}
    assert metadata.content == raw
    assert metadata.frontmatter_error is not None
    assert metadata.tags == ["kept"]


def test_extract_metadata_on_empty_text():
    metadata = extract_metadata("")
    assert metadata.frontmatter == {}
    assert metadata.word_count == 0
    assert metadata.tags == []
