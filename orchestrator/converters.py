"""Extension-keyed registry of content converters."""

from __future__ import annotations

from types import MappingProxyType
from typing import BinaryIO, Mapping

from connectors.store_interface import Converter, FileData

from .errors import ConversionError
from .paths import candidate_extensions


class StreamConverter(Converter):
    """Pass-through converter: stores the raw bytes with their charset and mime type."""

    def convert(self, stream: BinaryIO, charset: str | None, mime_type: str) -> FileData:
        data = stream.read()
        if not isinstance(data, (bytes, bytearray)):
            raise ConversionError(f"Expected a binary stream, got {type(data).__name__}")
        return FileData(data=bytes(data), encoding=charset, mime_type=mime_type)


class ConverterRegistry:
    """Maps lowercase extensions to converters.

    Extensions may contain embedded dots (``"cfg.xml"``). The registry is
    filled once, frozen, and then only read, so one instance can be shared by
    every orchestrator in the process.
    """

    def __init__(self, converters: Mapping[str, Converter] | None = None):
        self._converters: dict[str, Converter] = {}
        self._frozen = False
        for extension, converter in (converters or {}).items():
            self.register(extension, converter)

    def register(self, extension: str, converter: Converter) -> None:
        if self._frozen:
            raise RuntimeError("Converter registry is frozen")
        key = _normalize_extension(extension)
        if not key:
            raise ValueError("Extension must not be empty")
        self._converters[key] = converter

    def freeze(self) -> ConverterRegistry:
        """Stop accepting registrations. Returns the registry for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, extension: str) -> Converter | None:
        return self._converters.get(_normalize_extension(extension))

    def match(self, filename: str) -> tuple[str, Converter] | None:
        """Find the converter for a leaf name, preferring the longest registered suffix."""
        for extension in candidate_extensions(filename.lower()):
            converter = self._converters.get(extension)
            if converter is not None:
                return extension, converter
        return None

    def as_mapping(self) -> Mapping[str, Converter]:
        return MappingProxyType(self._converters)

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and _normalize_extension(extension) in self._converters

    def __len__(self) -> int:
        return len(self._converters)


DEFAULT_EXTENSIONS = (
    "prpt",
    "mondrian.xml",
    "kjb",
    "ktr",
    "report",
    "rptdesign",
    "svg",
    "url",
    "xaction",
    "xanalyzer",
    "xcdf",
    "xdash",
    "xreportspec",
    "waqr.xaction",
    "xwaqr",
    "gif",
    "css",
    "html",
    "htm",
    "jpg",
    "jpeg",
    "js",
    "cfg.xml",
    "jrxml",
    "png",
    "properties",
    "sql",
    "xmi",
    "xml",
)


def default_registry() -> ConverterRegistry:
    """Frozen registry with the stream converter bound to every known content type."""
    stream_converter = StreamConverter()
    return ConverterRegistry({ext: stream_converter for ext in DEFAULT_EXTENSIONS}).freeze()


def _normalize_extension(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


# Shared by every orchestrator built without its own registry
DEFAULT_REGISTRY = default_registry()


__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_REGISTRY",
    "ConverterRegistry",
    "StreamConverter",
    "default_registry",
]
