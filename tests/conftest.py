from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pytest

from obsidian_tools.data_models import FileRecord, Heading


def make_record(
    path: Path = Path("/vault/note.md"),
    content: str = "",
    frontmatter: Optional[dict[str, Any]] = None,
    tags: Optional[list[str]] = None,
    headings: Optional[list[Heading]] = None,
    size: int = 0,
    created: Optional[datetime] = None,
    modified: Optional[datetime] = None,
    frontmatter_error: Optional[str] = None,
) -> FileRecord:
    """Build a FileRecord without touching the filesystem."""
    path = Path(path)
    return FileRecord(
        path=path,
        name=path.stem,
        size=size,
        created=created,
        modified=modified,
        content=content,
        frontmatter=frontmatter or {},
        tags=tags or [],
        headings=headings or [],
        has_frontmatter=bool(frontmatter),
        frontmatter_error=frontmatter_error,
    )


@pytest.fixture
def vault(tmp_path):
    """An empty vault directory with a .obsidian folder."""
    vault_path = (tmp_path / "vault").resolve()
    (vault_path / ".obsidian").mkdir(parents=True)
    return vault_path


@pytest.fixture
def write_note(vault):
    """Write a note relative to the vault root and return its path."""

    def _write(relative: str, text: str) -> Path:
        note_path = vault / relative
        note_path.parent.mkdir(parents=True, exist_ok=True)
        note_path.write_text(text, encoding="utf-8")
        return note_path

    return _write
