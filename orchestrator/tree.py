"""In-memory tree structures used to organize repository entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .models import AccessControlList, RepositoryEntry


@dataclass
class FileVersion:
    """Content of one stored revision of a file."""

    data: bytes
    encoding: str | None = None
    mime_type: str | None = None
    comment: str | None = None


@dataclass
class EntryTree:
    """Tree node holding one entry and, for folders, its children."""

    entry: RepositoryEntry
    parent: EntryTree | None = None
    children: dict[str, EntryTree] = field(default_factory=dict)
    acl: AccessControlList | None = None
    versions: list[FileVersion] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.entry.name

    def path(self) -> str:
        if self.parent is None:
            return "/"
        base = self.parent.path().rstrip("/")
        return f"{base}/{self.name}"

    def find(self, segments: list[str]) -> EntryTree | None:
        """Walk down ``segments`` from this node."""
        node: EntryTree | None = self
        for segment in segments:
            if node is None or not node.entry.folder:
                return None
            node = node.children.get(segment)
        return node

    def walk(self) -> Iterator[EntryTree]:
        """Yield this node and every descendant, parents first."""
        yield self
        for child in self.children.values():
            yield from child.walk()


__all__ = ["EntryTree", "FileVersion"]
