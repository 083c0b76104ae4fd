"""Repository path helpers: separator normalization, joining and reserved areas."""

from __future__ import annotations

from .models import Bundle

SEPARATOR = "/"

# Top-level or second-level folders that bulk import must never touch.
RESERVED_NAMES = frozenset({"system", "admin"})


def separators_to_repository(path: str | None) -> str:
    """Convert any source-native separators into the repository separator."""
    if not path:
        return ""
    return path.replace("\\", SEPARATOR)


def concat(base: str | None, name: str | None) -> str:
    """Join two repository path fragments with exactly one separator."""
    base = base or ""
    name = name or ""
    if not base:
        return name
    if not name:
        return base
    return f"{base.rstrip(SEPARATOR)}{SEPARATOR}{name.lstrip(SEPARATOR)}"


def split_path(path: str | None) -> list[str]:
    """Split a repository path into its non-empty segments."""
    return [segment for segment in separators_to_repository(path).split(SEPARATOR) if segment]


def compute_bundle_path(bundle: Bundle) -> str:
    """Repository-relative folder path of a bundle, without leading separator."""
    bundle_path = separators_to_repository(bundle.path)
    if bundle_path.startswith(SEPARATOR):
        bundle_path = bundle_path[1:]
    return bundle_path


def bundle_path_name(bundle: Bundle) -> str:
    """Repository-relative path of the bundle itself (folder path plus leaf name)."""
    return concat(compute_bundle_path(bundle), bundle.name)


def parent_path(path: str) -> str:
    """Drop the last segment of ``path``. The root's parent is the empty path."""
    cut = path.rstrip(SEPARATOR).rfind(SEPARATOR)
    if cut <= 0:
        return ""
    return path[:cut]


def get_extension(name: str) -> str:
    """Final extension of a leaf name, without the dot. Empty when there is none."""
    leaf = separators_to_repository(name).rsplit(SEPARATOR, 1)[-1]
    dot = leaf.rfind(".")
    if dot < 0:
        return ""
    return leaf[dot + 1:]


def candidate_extensions(name: str) -> list[str]:
    """Every dotted suffix of a leaf name, longest first.

    ``"a.cfg.xml"`` gives ``["cfg.xml", "xml"]``.
    """
    leaf = separators_to_repository(name).rsplit(SEPARATOR, 1)[-1]
    parts = leaf.split(".")[1:]
    return [".".join(parts[i:]) for i in range(len(parts)) if parts[i:] != [""]]


def is_system_path(path: str | None) -> bool:
    """Detect if the 1st or 2nd segment of the path is a reserved folder."""
    segments = split_path(path)
    return _is_system_dir(segments, 0) or _is_system_dir(segments, 1)


def _is_system_dir(segments: list[str], index: int) -> bool:
    return index < len(segments) and segments[index] in RESERVED_NAMES


__all__ = [
    "RESERVED_NAMES",
    "SEPARATOR",
    "bundle_path_name",
    "candidate_extensions",
    "compute_bundle_path",
    "concat",
    "get_extension",
    "is_system_path",
    "parent_path",
    "separators_to_repository",
    "split_path",
]
