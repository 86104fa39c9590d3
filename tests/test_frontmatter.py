import unittest
from datetime import date, datetime
from pathlib import Path
from tempfile import TemporaryDirectory

from obsidian_tools.core.frontmatter_operations import (
    coerce_scalar,
    parse_frontmatter,
    parse_yaml_like,
    replace_body,
    sanitize_frontmatter,
    serialize_frontmatter,
    split_frontmatter,
)


class FrontmatterParsingTests(unittest.TestCase):
    def test_parse_frontmatter_handles_metadata_and_content(self) -> None:
        raw = "---\ntitle: Example Note\ntags:\n  - test\n---\n\nBody text."
        parsed = parse_frontmatter(raw)
        self.assertEqual(parsed.metadata["title"], "Example Note")
        self.assertEqual(parsed.metadata["tags"], ["test"])
        self.assertEqual(parsed.content.strip(), "Body text.")
        self.assertTrue(parsed.has_frontmatter)
        self.assertIsNone(parsed.error)
        self.assertFalse(parsed.fallback)

    def test_parse_frontmatter_without_block_returns_original_content(self) -> None:
        raw = "No frontmatter here.\n---\nnot: a block\n---\n"
        parsed = parse_frontmatter(raw)
        self.assertEqual(parsed.metadata, {})
        self.assertEqual(parsed.content, raw)
        self.assertFalse(parsed.has_frontmatter)

    def test_yaml_dates_become_iso_strings(self) -> None:
        parsed = parse_frontmatter("---\ncreated: 2024-03-01\nseen: 2024-03-01 10:30:00\n---\nBody")
        self.assertEqual(parsed.metadata["created"], "2024-03-01")
        self.assertEqual(parsed.metadata["seen"], "2024-03-01T10:30:00")

    def test_empty_block_yields_empty_metadata(self) -> None:
        parsed = parse_frontmatter("---\n---\nBody")
        self.assertEqual(parsed.metadata, {})
        self.assertEqual(parsed.content, "Body")
        self.assertTrue(parsed.has_frontmatter)

    def test_invalid_yaml_falls_back_to_line_parser(self) -> None:
        raw = "---\ntitle: Note: with colon\ncount: 3\nflag: true\nitems: [a, 2]\n---\nBody"
        parsed = parse_frontmatter(raw)
        self.assertEqual(
            parsed.metadata,
            {"title": "Note: with colon", "count": 3, "flag": True, "items": ["a", 2]},
        )
        self.assertEqual(parsed.content, "Body")
        self.assertIsNone(parsed.error)
        self.assertTrue(parsed.fallback)

    def test_unparseable_block_degrades_to_content(self) -> None:
        raw = "---\njust some text\nand more text\n---\nBody"
        parsed = parse_frontmatter(raw)
        self.assertEqual(parsed.metadata, {})
        self.assertEqual(parsed.content, raw)
        self.assertIn("Malformed frontmatter", parsed.error)
        self.assertFalse(parsed.has_frontmatter)

    def test_split_frontmatter_returns_raw_block(self) -> None:
        raw_block, block, body = split_frontmatter("---\na: 1\n---\nrest\n")
        self.assertEqual(raw_block, "---\na: 1\n---\n")
        self.assertEqual(block, "a: 1")
        self.assertEqual(body, "rest\n")

    def test_windows_line_endings_are_recognized(self) -> None:
        parsed = parse_frontmatter("---\r\ntitle: Crlf\r\n---\r\nBody\r\n")
        self.assertEqual(parsed.metadata, {"title": "Crlf"})
        self.assertEqual(parsed.content, "Body\r\n")


class ScalarCoercionTests(unittest.TestCase):
    def test_coercion_rules_apply_in_order(self) -> None:
        self.assertEqual(coerce_scalar('"true"'), "true")
        self.assertEqual(coerce_scalar("'quoted'"), "quoted")
        self.assertIs(coerce_scalar("true"), True)
        self.assertIs(coerce_scalar("false"), False)
        self.assertIsNone(coerce_scalar("null"))
        self.assertEqual(coerce_scalar("[1, two, 'three']"), [1, "two", "three"])
        self.assertEqual(coerce_scalar("[]"), [])
        self.assertEqual(coerce_scalar("-4"), -4)
        self.assertEqual(coerce_scalar("3.5"), 3.5)
        self.assertEqual(coerce_scalar("2024-03-01"), "2024-03-01")
        self.assertEqual(coerce_scalar("2024-03-01T10:00:00"), "2024-03-01T10:00:00")
        self.assertEqual(coerce_scalar("  plain text "), "plain text")

    def test_parse_yaml_like_skips_comments_and_blank_lines(self) -> None:
        block = "# comment\n\nstatus: draft\nnot a pair\n"
        self.assertEqual(parse_yaml_like(block), {"status": "draft"})

    def test_parse_yaml_like_without_separator_returns_none(self) -> None:
        self.assertIsNone(parse_yaml_like("nothing here\nat all"))


class FrontmatterSerializationTests(unittest.TestCase):
    def test_round_trip_preserves_values_and_order(self) -> None:
        metadata = {"title": "Note", "tags": ["a", "b"], "count": 3, "done": False}
        text = serialize_frontmatter(metadata, "Body text\n")
        parsed = parse_frontmatter(text)
        self.assertEqual(parsed.metadata, metadata)
        self.assertEqual(list(parsed.metadata), ["title", "tags", "count", "done"])
        self.assertEqual(parsed.content, "Body text\n")
        self.assertEqual(text, "---\ntitle: Note\ntags:\n- a\n- b\ncount: 3\ndone: false\n---\nBody text\n")

    def test_round_trip_of_date_strings(self) -> None:
        text = serialize_frontmatter({"created": "2024-03-01"}, "Body")
        self.assertEqual(parse_frontmatter(text).metadata, {"created": "2024-03-01"})

    def test_reserialized_body_is_unchanged(self) -> None:
        for raw in (
            "---\ntitle: x\n---\nbody  \n\n",
            "---\ntitle: x\n---\n\n\nspaced out\n  \n",
            "---\ntitle: x\n---\nno trailing newline",
            "---\ntitle: x\n---\n",
        ):
            with self.subTest(raw=raw):
                first = parse_frontmatter(raw)
                second = parse_frontmatter(serialize_frontmatter(first.metadata, first.content))
                self.assertEqual(second.content, first.content)
                self.assertEqual(second.metadata, first.metadata)

    def test_empty_metadata_removes_block(self) -> None:
        self.assertEqual(serialize_frontmatter({}, "Body only\n"), "Body only\n")

    def test_sanitize_converts_dates(self) -> None:
        sanitized = sanitize_frontmatter({"when": datetime(2025, 1, 1, 12, 0), "day": date(2025, 10, 27)})
        self.assertEqual(sanitized, {"when": "2025-01-01T12:00:00", "day": "2025-10-27"})

    def test_sanitize_rejects_unsupported_types(self) -> None:
        with self.assertRaises(ValueError):
            sanitize_frontmatter({"bad": {1, 2}})
        with self.assertRaises(ValueError):
            sanitize_frontmatter({"  ": "blank key"})


class ReplaceBodyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.vault_path = Path(self.tmpdir.name).resolve()

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_replace_body_keeps_header_verbatim(self) -> None:
        raw = "---\ntitle:   Spaced   \n# comment kept\n---\nold body\n"
        self.assertEqual(
            replace_body(raw, "new body\n"),
            "---\ntitle:   Spaced   \n# comment kept\n---\nnew body\n",
        )

    def test_replace_body_without_frontmatter(self) -> None:
        self.assertEqual(replace_body("old", "new"), "new")

    def test_replace_body_does_not_duplicate_malformed_header(self) -> None:
        raw = "---\njust some text\n---\nBody"
        self.assertEqual(replace_body(raw, "Replaced"), "Replaced")

    def test_file_round_trip_through_disk(self) -> None:
        note_path = self.vault_path / "note.md"
        note_path.write_text(serialize_frontmatter({"status": "active"}, "Content\n"), encoding="utf-8")
        parsed = parse_frontmatter(note_path.read_text(encoding="utf-8"))
        self.assertEqual(parsed.metadata, {"status": "active"})


if __name__ == "__main__":
    unittest.main()
