"""Exceptions raised by the import orchestrator."""

from __future__ import annotations


class ImportFailure(Exception):
    """Base class for import errors."""


class InvalidImportArgument(ImportFailure, ValueError):
    """A required top-level argument of an import call is missing or empty."""


class ParentFolderMissing(ImportFailure, LookupError):
    """The folder that must contain a child path does not exist in the store.

    Folders have to be imported before their children, so this always
    points at a caller that fed bundles in the wrong order.
    """

    def __init__(self, parent_path: str, child_path: str):
        super().__init__(f"Parent folder {parent_path!r} of {child_path!r} not found in repository")
        self.parent_path = parent_path
        self.child_path = child_path


class ConversionError(ImportFailure):
    """A converter could not turn a bundle's content into file data."""


__all__ = [
    "ConversionError",
    "ImportFailure",
    "InvalidImportArgument",
    "ParentFolderMissing",
]
