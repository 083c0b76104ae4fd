"""Cached lookup of the folder id that must contain a given child path."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping

from connectors.store_interface import HierarchicalStore

from .errors import InvalidImportArgument, ParentFolderMissing
from .paths import SEPARATOR, concat, parent_path

logger = logging.getLogger(__name__)


class ParentIdResolver:
    """Resolves parent folder ids against the destination store.

    Entries are never invalidated: during one import pass the destination
    subtree only grows, so a resolved folder keeps its id.
    """

    def __init__(self, store: HierarchicalStore):
        self.store = store
        self._cache: dict[str, Any] = {}
        self._folder_ids: dict[str, Any] = {}

    @property
    def cache(self) -> Mapping[str, Any]:
        return MappingProxyType(self._cache)

    def resolve(self, destination_path: str, child_path: str) -> Any:
        """Id of the folder containing ``child_path`` below ``destination_path``."""
        if destination_path is None or child_path is None:
            raise InvalidImportArgument("destination_path and child_path are required")
        normalized = child_path if child_path.startswith(SEPARATOR) else SEPARATOR + child_path
        if normalized in self._cache:
            return self._cache[normalized]

        parent = parent_path(normalized).lstrip(SEPARATOR)
        folder_path = concat(destination_path, parent)
        if folder_path not in self._folder_ids:
            parent_entry = self.store.get_entry(folder_path)
            if parent_entry is None:
                raise ParentFolderMissing(folder_path, normalized)
            logger.debug(f"Resolved parent folder {folder_path} -> {parent_entry.id}")
            self._folder_ids[folder_path] = parent_entry.id
        self._cache[normalized] = self._folder_ids[folder_path]
        return self._cache[normalized]


__all__ = ["ParentIdResolver"]
