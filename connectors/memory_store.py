"""
memory_store.py
---------------
In-memory implementation of the hierarchical store protocol.

Backs the mock REST store daemon and the tests. Folders and files live in an
EntryTree; every node gets a uuid id and files keep all their versions.
"""

import uuid
from typing import Any, Iterable

from connectors.store_interface import ContentTypeRegistry, FileData, HierarchicalStore
from orchestrator.models import AccessControlList, RepositoryEntry
from orchestrator.paths import SEPARATOR, split_path
from orchestrator.tree import EntryTree, FileVersion


class InMemoryStore(HierarchicalStore):
    """A hierarchical store held in memory.

    Args:
        folders: Folder paths to create up front, e.g. ("/public", "/home/admin").
    """

    def __init__(self, folders: Iterable[str] = ()):
        root = RepositoryEntry(id=str(uuid.uuid4()), name=SEPARATOR, path=SEPARATOR, folder=True)
        self.root = EntryTree(root)
        self._by_id: dict[Any, EntryTree] = {root.id: self.root}
        for folder in folders:
            self.ensure_folder(folder)

    def get_entry(self, path: str) -> RepositoryEntry | None:
        node = self.root.find(split_path(path))
        return node.entry if node is not None else None

    def create_folder(self, parent_id: Any, entry: RepositoryEntry,
                      acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry:
        return self._add_child(parent_id, entry.model_copy(update={"folder": True}), acl).entry

    def create_file(self, parent_id: Any, entry: RepositoryEntry, data: FileData,
                    acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry:
        node = self._add_child(parent_id, entry.model_copy(update={"folder": False}), acl)
        node.versions.append(_to_version(data, comment))
        return node.entry

    def update_file(self, entry: RepositoryEntry, data: FileData, comment: str | None = None) -> RepositoryEntry:
        node = self._node(entry.id)
        if node.entry.folder:
            raise ValueError(f"Cannot update folder {node.path()} with file content")
        node.versions.append(_to_version(data, comment))
        return node.entry

    # helpers beyond the store protocol

    def get_by_id(self, entry_id: Any) -> RepositoryEntry:
        return self._node(entry_id).entry

    def ensure_folder(self, path: str) -> RepositoryEntry:
        """Create every missing folder along ``path`` and return the last one."""
        node = self.root
        for segment in split_path(path):
            child = node.children.get(segment)
            if child is None:
                child = self._add_child(node.entry.id, RepositoryEntry(name=segment, folder=True), None)
            elif not child.entry.folder:
                raise ValueError(f"{child.path()} is a file")
            node = child
        return node.entry

    def read_file(self, path: str) -> FileData | None:
        """Latest content of the file at ``path``."""
        node = self.root.find(split_path(path))
        if node is None or node.entry.folder or not node.versions:
            return None
        latest = node.versions[-1]
        return FileData(data=latest.data, encoding=latest.encoding, mime_type=latest.mime_type)

    def versions(self, path: str) -> list[FileVersion]:
        node = self.root.find(split_path(path))
        return list(node.versions) if node is not None else []

    def get_acl(self, path: str) -> AccessControlList | None:
        node = self.root.find(split_path(path))
        return node.acl if node is not None else None

    def list_children(self, path: str) -> list[RepositoryEntry]:
        node = self.root.find(split_path(path))
        if node is None:
            raise KeyError(f"No entry at {path}")
        return [child.entry for child in node.children.values()]

    @property
    def entry_count(self) -> int:
        return len(self._by_id)

    def _node(self, entry_id: Any) -> EntryTree:
        try:
            return self._by_id[entry_id]
        except KeyError:
            raise KeyError(f"No entry with id {entry_id!r}") from None

    def _add_child(self, parent_id: Any, entry: RepositoryEntry, acl: AccessControlList | None) -> EntryTree:
        parent = self._node(parent_id)
        if not parent.entry.folder:
            raise ValueError(f"Parent {parent.path()} is not a folder")
        if entry.name in parent.children:
            raise ValueError(f"{entry.name!r} already exists in {parent.path()}")
        node = EntryTree(entry, parent=parent, acl=acl)
        node.entry = entry.model_copy(update={"id": str(uuid.uuid4()), "path": node.path()})
        parent.children[entry.name] = node
        self._by_id[node.entry.id] = node
        return node


class StaticContentTypeRegistry(ContentTypeRegistry):
    """Content type registry over a fixed set of extensions."""

    def __init__(self, types: Iterable[str] = ()):
        self._types = frozenset(t.lower() for t in types)

    def content_types(self) -> set[str]:
        return set(self._types)


def _to_version(data: FileData, comment: str | None) -> FileVersion:
    return FileVersion(data=data.data, encoding=data.get("encoding"), mime_type=data.get("mime_type"), comment=comment)
