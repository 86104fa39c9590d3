"""Data models for vaults, file records, and mutation operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

# Frontmatter values are coerced into this closed set at the parse boundary.
# Nested mappings from hand-written YAML are carried through untouched.
FrontmatterValue = Union[str, int, float, bool, None, list, dict]


@dataclass(frozen=True)
class VaultDescriptor:
    """Result of analyzing a directory as a potential vault."""

    name: str
    path: Path
    is_vault: bool = False
    has_obsidian_folder: bool = False
    markdown_file_count: int = 0

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "is_vault": self.is_vault,
            "has_obsidian_folder": self.has_obsidian_folder,
            "markdown_files": self.markdown_file_count,
        }


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Link:
    """A standard ``[text](url)`` link or a wiki ``[[page|text]]`` link."""

    kind: str
    text: str
    url: Optional[str] = None
    page: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        if self.kind == "wiki":
            return {"type": "wiki", "page": self.page, "text": self.text}
        return {"type": "standard", "text": self.text, "url": self.url}


@dataclass(frozen=True)
class ParsedFrontmatter:
    """Frontmatter split from a note.

    ``raw_block`` is the verbatim header (delimiters included) or ``None`` when
    the text has no frontmatter; ``error`` is set when the block could not be
    parsed and the whole text was kept as content.
    ``fallback`` marks metadata read by the line-based parser, which can miss
    nested values and must not be written back.
    """

    metadata: dict[str, Any]
    content: str
    raw_block: Optional[str] = None
    error: Optional[str] = None
    fallback: bool = False

    @property
    def has_frontmatter(self) -> bool:
        return self.raw_block is not None


@dataclass(frozen=True)
class ExtractedMetadata:
    frontmatter: dict[str, Any]
    content: str
    tags: list[str]
    headings: list[Heading]
    links: list[Link]
    word_count: int
    has_frontmatter: bool = False
    frontmatter_error: Optional[str] = None


@dataclass(frozen=True)
class FileRecord:
    """Snapshot of one markdown note taken at scan time.

    Records are never mutated; once a mutation is applied to the underlying
    file the record is stale and the file must be scanned again.
    """

    path: Path
    name: str
    size: int
    created: Optional[datetime]
    modified: Optional[datetime]
    content: str
    frontmatter: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    word_count: int = 0
    has_frontmatter: bool = False
    frontmatter_error: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation (body omitted)."""
        return {
            "path": str(self.path),
            "name": self.name,
            "size": self.size,
            "created": self.created.isoformat() if self.created else None,
            "modified": self.modified.isoformat() if self.modified else None,
            "frontmatter": self.frontmatter,
            "tags": list(self.tags),
            "headings": [{"level": h.level, "text": h.text} for h in self.headings],
            "links": [link.as_payload() for link in self.links],
            "word_count": self.word_count,
        }


@dataclass(frozen=True)
class ScanError:
    path: Path
    error: Exception

    def as_payload(self) -> dict[str, Any]:
        return {"path": str(self.path), "error": str(self.error)}


class MutationKind(str, Enum):
    MOVE = "move"
    RENAME = "rename"
    FRONTMATTER_UPDATE = "frontmatter-update"
    CONTENT_UPDATE = "content-update"
    DELETE = "delete"


@dataclass(frozen=True)
class FrontmatterUpdate:
    """Explicit merge contract for frontmatter writes.

    Keys in ``remove`` are dropped from the frontmatter read from disk, then
    ``values`` are merged over it key for key (incoming wins). When ``order``
    is given, keys are emitted in that order followed by any remaining keys in
    their existing order.
    """

    values: dict[str, Any] = field(default_factory=dict)
    remove: tuple[str, ...] = ()
    order: Optional[tuple[str, ...]] = None

    def apply_to(self, current: dict[str, Any]) -> dict[str, Any]:
        merged = {key: value for key, value in current.items() if key not in self.remove}
        merged.update(self.values)
        if self.order is None:
            return merged

        ordered = {key: merged[key] for key in self.order if key in merged}
        for key, value in merged.items():
            ordered.setdefault(key, value)
        return ordered


MutationTarget = Union[Path, FrontmatterUpdate, str, None]


@dataclass(frozen=True)
class MutationOperation:
    """One filesystem change for the mutation engine.

    ``target`` depends on ``kind``: a destination :class:`Path` for moves and
    renames, a :class:`FrontmatterUpdate` for frontmatter updates, the new body
    text for content updates, and ``None`` for deletes.
    """

    source_path: Path
    kind: MutationKind
    target: MutationTarget = None
    reason: str = ""

    @classmethod
    def move(cls, source: Path, destination: Path, reason: str = "") -> "MutationOperation":
        return cls(Path(source), MutationKind.MOVE, Path(destination), reason)

    @classmethod
    def rename(cls, source: Path, new_name: str, reason: str = "") -> "MutationOperation":
        source = Path(source)
        return cls(source, MutationKind.RENAME, source.with_name(f"{new_name}{source.suffix}"), reason)

    @classmethod
    def update_frontmatter(
        cls,
        source: Path,
        update: FrontmatterUpdate,
        reason: str = "",
    ) -> "MutationOperation":
        return cls(Path(source), MutationKind.FRONTMATTER_UPDATE, update, reason)

    @classmethod
    def update_content(cls, source: Path, content: str, reason: str = "") -> "MutationOperation":
        return cls(Path(source), MutationKind.CONTENT_UPDATE, content, reason)

    @classmethod
    def delete(cls, source: Path, reason: str = "") -> "MutationOperation":
        return cls(Path(source), MutationKind.DELETE, None, reason)

    def describe(self) -> str:
        """Single-line human readable summary used by previews and logs."""
        if self.kind in (MutationKind.MOVE, MutationKind.RENAME):
            return f"{self.kind.value}: {self.source_path.name} -> {self.target}"
        if self.kind is MutationKind.FRONTMATTER_UPDATE:
            update = self.target
            fields = sorted(update.values) if isinstance(update, FrontmatterUpdate) else []
            detail = ", ".join(fields) or "reorder"
            return f"{self.kind.value}: {self.source_path.name} ({detail})"
        suffix = f" ({self.reason})" if self.reason else ""
        return f"{self.kind.value}: {self.source_path.name}{suffix}"

    def as_payload(self) -> dict[str, Any]:
        target: Any = self.target
        if isinstance(target, Path):
            target = str(target)
        elif isinstance(target, FrontmatterUpdate):
            target = {
                "values": target.values,
                "remove": list(target.remove),
                "order": list(target.order) if target.order is not None else None,
            }
        return {
            "source": str(self.source_path),
            "kind": self.kind.value,
            "target": target,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class MutationFailure:
    operation: MutationOperation
    error: Exception

    def as_payload(self) -> dict[str, Any]:
        return {
            "operation": self.operation.as_payload(),
            "error": str(self.error),
            "error_type": type(self.error).__name__,
        }


@dataclass
class MutationResult:
    """Outcome of applying a batch: success count plus per-item failures."""

    total: int = 0
    success_count: int = 0
    failures: list[MutationFailure] = field(default_factory=list)
    backups: list[Path] = field(default_factory=list)

    def as_payload(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "success_count": self.success_count,
            "failures": [failure.as_payload() for failure in self.failures],
            "backups": [str(path) for path in self.backups],
        }


@dataclass(frozen=True)
class MutationPreview:
    """Bounded projection of a batch; ``remaining`` counts items not listed."""

    total: int
    items: list[str]
    remaining: int

    def render(self, title: str = "Planned operations") -> str:
        lines = [f"{title} ({self.total}):"]
        if not self.items:
            lines.append("  (none)")
        lines.extend(f"  - {item}" for item in self.items)
        if self.remaining:
            lines.append(f"  ... and {self.remaining} more")
        return "\n".join(lines)

    def as_payload(self) -> dict[str, Any]:
        return {"total": self.total, "items": self.items, "remaining": self.remaining}
