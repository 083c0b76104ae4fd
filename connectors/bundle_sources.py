"""
bundle_sources.py
-----------------
Builds import bundles from local sources: a directory tree or a zip archive.

Bundles come out top-down, every folder before its content, which is the
order the import orchestrator needs to resolve parent folders.
"""

import mimetypes
import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterator

from orchestrator.models import Bundle

# Platform content types the standard mimetypes table does not know.
EXTRA_MIME_TYPES = {
    "prpt": "application/zip",
    "xaction": "text/xml",
    "xanalyzer": "text/xml",
    "xcdf": "text/xml",
    "xdash": "text/xml",
    "xreportspec": "text/xml",
    "xwaqr": "text/xml",
    "xmi": "text/xml",
    "jrxml": "text/xml",
    "rptdesign": "text/xml",
    "kjb": "text/xml",
    "ktr": "text/xml",
    "report": "text/xml",
    "url": "text/plain",
    "properties": "text/plain",
    "sql": "text/plain",
}

TEXT_CHARSET = "UTF-8"


def guess_mime_type(name: str) -> str | None:
    """Mime type for a leaf name, None when the type is unknown."""
    suffix = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if suffix in EXTRA_MIME_TYPES:
        return EXTRA_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(name, strict=False)
    return mime_type


def _charset_for(mime_type: str | None, default_charset: str | None) -> str | None:
    if mime_type and (mime_type.startswith("text/") or mime_type.endswith(("xml", "javascript", "json"))):
        return default_charset
    return None


def directory_bundles(root: str | Path, default_charset: str | None = TEXT_CHARSET) -> Iterator[Bundle]:
    """Yield a bundle for every folder and file below ``root`` (``root`` itself excluded)."""
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")
    # sorted relative paths put every folder before its children
    for item in sorted(root.rglob("*"), key=lambda p: p.relative_to(root).parts):
        relative = item.relative_to(root)
        folder_path = relative.parent.as_posix() if relative.parent != Path(".") else ""
        if item.is_dir():
            yield Bundle(path=folder_path, name=item.name, folder=True)
        elif item.is_file():
            mime_type = guess_mime_type(item.name)
            yield Bundle(
                path=folder_path,
                name=item.name,
                source_file=item,
                mime_type=mime_type,
                charset=_charset_for(mime_type, default_charset),
            )


def zip_bundles(archive: str | Path, default_charset: str | None = TEXT_CHARSET) -> Iterator[Bundle]:
    """Yield bundles for the entries of a zip archive.

    Folders that only appear implicitly in member names get their own bundle.
    Mac resource forks (``__MACOSX``) are ignored.
    """
    with zipfile.ZipFile(archive, "r") as z:
        folders: set[str] = set()
        files: dict[str, zipfile.ZipInfo] = {}
        for info in z.infolist():
            name = info.filename.replace("\\", "/").lstrip("/")
            if "__MACOSX" in name:
                continue
            parts = PurePosixPath(name).parts
            for depth in range(1, len(parts)):
                folders.add("/".join(parts[:depth]))
            if info.is_dir():
                folders.add("/".join(parts))
            else:
                files["/".join(parts)] = info

        for path in sorted(folders | set(files), key=lambda p: p.split("/")):
            folder_path, _, leaf = path.rpartition("/")
            if path in files:
                mime_type = guess_mime_type(leaf)
                yield Bundle(
                    path=folder_path,
                    name=leaf,
                    content=z.read(files[path]),
                    mime_type=mime_type,
                    charset=_charset_for(mime_type, default_charset),
                )
            else:
                yield Bundle(path=folder_path, name=leaf, folder=True)


def open_source(source: str | Path, default_charset: str | None = TEXT_CHARSET) -> list[Bundle]:
    """Collect the bundles of a directory or zip archive."""
    source = Path(source)
    if source.is_dir():
        return list(directory_bundles(source, default_charset))
    if zipfile.is_zipfile(source):
        return list(zip_bundles(source, default_charset))
    raise ValueError(f"{source} is neither a directory nor a zip archive")
