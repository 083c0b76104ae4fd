"""Pydantic models that capture import domain concepts."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, BinaryIO, Literal, Mapping

import json
import yaml
from pydantic import BaseModel, Field, ValidationError


class AccessControlEntry(BaseModel):
    """One grant of permissions to a user or role."""

    recipient: str = Field(..., min_length=1)
    recipient_type: Literal["user", "role"] = "user"
    permissions: list[str] = Field(default_factory=lambda: ["read"])


class AccessControlList(BaseModel):
    """Access control descriptor handed through to the store untouched."""

    owner: str = Field(..., min_length=1)
    owner_type: Literal["user", "role"] = "user"
    entries_inheriting: bool = True
    entries: list[AccessControlEntry] = Field(default_factory=list)


class RepositoryEntry(BaseModel):
    """A file or folder node of the hierarchical store."""

    id: str | None = None
    name: str = Field(..., min_length=1)
    path: str | None = None
    folder: bool = False
    hidden: bool = False

    def with_hidden(self, hidden: bool) -> RepositoryEntry:
        """Return a copy of this entry with ``hidden`` set."""
        return self.model_copy(update={"hidden": hidden})


class Bundle(BaseModel):
    """One file-or-folder unit of an import source.

    ``path`` is the containing folder in source-native notation and ``name``
    the leaf name. File content is either held in ``content`` or read from
    ``source_file`` when the bundle is opened.
    """

    path: str = ""
    name: str = Field(..., min_length=1)
    folder: bool = False
    content: bytes | None = None
    source_file: Path | None = None
    charset: str | None = None
    mime_type: str | None = None
    acl: AccessControlList | None = None

    def __init__(self, **data: Any) -> None:
        raw_acl = data.pop("acl", None)
        super().__init__(**data, acl=coerce_acl(raw_acl) if raw_acl is not None else None)

    def open_stream(self) -> BinaryIO:
        """Open the byte content of this bundle. Callers close the stream."""
        if self.folder:
            raise IsADirectoryError(f"Bundle {self.name!r} is a folder")
        if self.source_file is not None:
            return self.source_file.open("rb")
        return io.BytesIO(self.content or b"")

    def entry_template(self) -> RepositoryEntry:
        """Entry descriptor for creating this bundle in the store."""
        return RepositoryEntry(name=self.name, folder=self.folder)


# ---------------------------------------------------------------------------
# helpers


def coerce_acl(value: Any) -> AccessControlList:
    """Normalize supported inputs into an AccessControlList instance."""
    if isinstance(value, AccessControlList):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    else:
        raise TypeError("Unsupported value for acl assignment")
    try:
        return AccessControlList.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid acl payload") from exc


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError:
        return json.loads(text)


__all__ = [
    "AccessControlEntry",
    "AccessControlList",
    "Bundle",
    "RepositoryEntry",
    "coerce_acl",
]
