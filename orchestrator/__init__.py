"""Core orchestrator package exposing import services and models."""

from .models import AccessControlEntry, AccessControlList, Bundle, RepositoryEntry, coerce_acl
from .tree import EntryTree
from .errors import ConversionError, ImportFailure, InvalidImportArgument, ParentFolderMissing
from .converters import DEFAULT_REGISTRY, ConverterRegistry, StreamConverter, default_registry
from .parent_ids import ParentIdResolver
from .visibility import VisibilityClassifier
from .importer import BundleOutcome, ImportAction, ImportOrchestrator, ImportReport, run_import_chain
from .settings import ImportSettings, load_settings

__all__ = [
    "AccessControlEntry",
    "AccessControlList",
    "Bundle",
    "BundleOutcome",
    "ConversionError",
    "ConverterRegistry",
    "EntryTree",
    "ImportAction",
    "ImportFailure",
    "ImportOrchestrator",
    "ImportReport",
    "ImportSettings",
    "InvalidImportArgument",
    "ParentFolderMissing",
    "ParentIdResolver",
    "RepositoryEntry",
    "StreamConverter",
    "VisibilityClassifier",
    "coerce_acl",
    "default_registry",
    "DEFAULT_REGISTRY",
    "load_settings",
    "run_import_chain",
]
