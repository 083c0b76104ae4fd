from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Any, BinaryIO, Iterable
from box import Box

if TYPE_CHECKING:
    from orchestrator.models import AccessControlList, Bundle, RepositoryEntry


class FileData(Box):
    """
    Store-ready file content. Box (dot-access dict) with the keys
    ``data`` (bytes), ``encoding`` and ``mime_type``.
    Examples:
        data = FileData(data=b"<xml/>", encoding="UTF-8", mime_type="text/xml")
        print(data.mime_type)   # text/xml
        print(data["data"])     # b'<xml/>'
    """


class Converter(Protocol):
    """Protocol for content converters registered per file extension."""

    def convert(self, stream: BinaryIO, charset: str | None, mime_type: str) -> FileData:
        """
        Turn a bundle's byte stream into store-ready file data.
        Raise OSError, ValueError (UnicodeDecodeError included) or ConversionError
        on unreadable or malformed input; the importer skips only that bundle.
        """
        ...


class ContentTypeRegistry(Protocol):
    """Optional plugin capability listing the extensions the platform can run or display."""

    def content_types(self) -> Iterable[str]: ...


class HierarchicalStore(Protocol):
    """
    Protocol for the repository the bundles are merged into.
    Paths use '/' as separator, ids are opaque and store-assigned.
    """

    def get_entry(self, path: str) -> RepositoryEntry | None:
        "returns the entry at path, or None if there is none"
        ...

    def create_folder(self, parent_id: Any, entry: RepositoryEntry,
                      acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry: ...

    def create_file(self, parent_id: Any, entry: RepositoryEntry, data: FileData,
                    acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry: ...

    def update_file(self, entry: RepositoryEntry, data: FileData, comment: str | None = None) -> RepositoryEntry:
        """
        Replace the content of an existing file, keeping its id and metadata.
        """
        ...


class ImportHandler(Protocol):
    """
    Protocol for import handlers.
    A handler imports what it can and returns a report whose 'unhandled'
    bundles are left for the next handler.
    """

    @property
    def name(self) -> str: ...

    def import_all(self, bundles: Iterable[Bundle], destination_path: str,
                   comment: str | None = None, overwrite: bool = False) -> Any: ...
