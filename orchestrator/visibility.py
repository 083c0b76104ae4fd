"""Hidden/visible classification of imported files."""

from __future__ import annotations

import logging

from connectors.store_interface import ContentTypeRegistry

logger = logging.getLogger(__name__)

# Legacy action sequences and URL shortcuts are always runnable.
BUILTIN_EXECUTABLE_TYPES = frozenset({"xaction", "url"})


class VisibilityClassifier:
    """Files are visible only when the platform can run or display their type."""

    def __init__(self, content_types: ContentTypeRegistry | None = None):
        self.executable_types = determine_executable_types(content_types)

    def is_hidden(self, extension: str) -> bool:
        return extension.lower() not in self.executable_types


def determine_executable_types(content_types: ContentTypeRegistry | None) -> frozenset[str]:
    """Union of the registry's content types with the built-in executable types."""
    types: set[str] = set()
    if content_types is None:
        logger.debug("No content type registry available, using built-in executable types only")
    else:
        try:
            types.update(t.lower() for t in content_types.content_types() or ())
        except Exception as e:
            logger.debug(f"Content type registry unavailable: {e}")
    return frozenset(types | BUILTIN_EXECUTABLE_TYPES)


__all__ = ["BUILTIN_EXECUTABLE_TYPES", "VisibilityClassifier", "determine_executable_types"]
