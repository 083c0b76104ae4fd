"""Import orchestrator: merges bundles into a hierarchical store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from connectors.store_interface import ContentTypeRegistry, HierarchicalStore, ImportHandler

from .converters import DEFAULT_REGISTRY, ConverterRegistry
from .errors import ConversionError, InvalidImportArgument
from .models import Bundle, RepositoryEntry
from .parent_ids import ParentIdResolver
from .paths import bundle_path_name, concat, get_extension, is_system_path
from .visibility import VisibilityClassifier

logger = logging.getLogger(__name__)


class ImportAction(str, Enum):
    SKIPPED_RESERVED = "skipped_reserved"
    KEPT_EXISTING = "kept_existing"
    FOLDER_EXISTS = "folder_exists"
    UPDATED = "updated"
    UPDATE_FAILED = "update_failed"
    FOLDER_CREATED = "folder_created"
    FILE_CREATED = "file_created"
    FAILED = "failed"


@dataclass
class BundleOutcome:
    path: str
    action: ImportAction
    handled: bool
    reason: str | None = None


@dataclass
class ImportReport:
    """Result of one import pass.

    ``unhandled`` keeps the input order and holds every bundle a downstream
    handler still has to look at.
    """

    handled: list[Bundle] = field(default_factory=list)
    unhandled: list[Bundle] = field(default_factory=list)
    outcomes: list[BundleOutcome] = field(default_factory=list)

    def count(self, action: ImportAction) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action == action)

    def merge(self, later: ImportReport) -> ImportReport:
        """Combine with the report of a handler that ran on our unhandled bundles."""
        return ImportReport(
            handled=self.handled + later.handled,
            unhandled=list(later.unhandled),
            outcomes=self.outcomes + later.outcomes,
        )


class ImportOrchestrator(ImportHandler):
    """Default import handler.

    Creates missing folders and files, overwrites existing files when asked
    to, and leaves reserved paths and unconvertible files for other handlers.
    One instance owns its parent-id cache and must not be shared by
    concurrent runs.
    """

    def __init__(self, store: HierarchicalStore, converters: ConverterRegistry | None = None,
                 content_types: ContentTypeRegistry | None = None):
        if store is None:
            raise InvalidImportArgument("store is required")
        self.store = store
        self._converters = converters if converters is not None else DEFAULT_REGISTRY
        self._visibility = VisibilityClassifier(content_types)
        self._parent_ids = ParentIdResolver(store)

    @property
    def name(self) -> str:
        return "DefaultImportHandler"

    @property
    def converters(self) -> Mapping[str, Any]:
        return self._converters.as_mapping()

    @property
    def executable_types(self) -> frozenset[str]:
        return self._visibility.executable_types

    @property
    def parent_id_cache(self) -> Mapping[str, Any]:
        return self._parent_ids.cache

    def import_all(self, bundles: Iterable[Bundle], destination_path: str,
                   comment: str | None = None, overwrite: bool = False) -> ImportReport:
        """Import ``bundles`` below ``destination_path``.

        Raises InvalidImportArgument for missing arguments and
        ParentFolderMissing when a bundle arrives before its folder. Every
        other problem only leaves the bundle unhandled.
        """
        if bundles is None or not destination_path:
            raise InvalidImportArgument("bundles and destination_path are required")

        report = ImportReport()
        for bundle in bundles:
            outcome = self._import_bundle(bundle, destination_path, comment, overwrite)
            report.outcomes.append(outcome)
            if outcome.handled:
                report.handled.append(bundle)
            else:
                report.unhandled.append(bundle)
        logger.info(f"Imported into {destination_path}: {len(report.handled)} handled, "
                    f"{len(report.unhandled)} left unhandled")
        return report

    def _import_bundle(self, bundle: Bundle, destination_path: str,
                       comment: str | None, overwrite: bool) -> BundleOutcome:
        path_name = bundle_path_name(bundle)
        if is_system_path(path_name):
            logger.debug(f"Skipping {path_name} since it is in admin / system folders")
            return BundleOutcome(path_name, ImportAction.SKIPPED_RESERVED, False, "reserved path")

        repository_path = concat(destination_path, path_name)
        existing = self.store.get_entry(repository_path)
        if existing is not None:
            if not overwrite:
                logger.debug(f"{repository_path} already exists and overwrite is false - skip")
                return BundleOutcome(path_name, ImportAction.KEPT_EXISTING, True)
            if existing.folder:
                logger.debug(f"{repository_path} is a folder that already exists - skip")
                return BundleOutcome(path_name, ImportAction.FOLDER_EXISTS, True)
            reason = self._copy_file(bundle, destination_path, path_name, existing, comment)
            # handled even when the update failed
            if reason is None:
                return BundleOutcome(path_name, ImportAction.UPDATED, True)
            return BundleOutcome(path_name, ImportAction.UPDATE_FAILED, True, reason)

        if bundle.folder:
            logger.debug(f"Creating folder {path_name}")
            parent_id = self._parent_ids.resolve(destination_path, path_name)
            self.store.create_folder(parent_id, bundle.entry_template(), bundle.acl, comment)
            return BundleOutcome(path_name, ImportAction.FOLDER_CREATED, True)

        reason = self._copy_file(bundle, destination_path, path_name, None, comment)
        if reason is None:
            return BundleOutcome(path_name, ImportAction.FILE_CREATED, True)
        return BundleOutcome(path_name, ImportAction.FAILED, False, reason)

    def _copy_file(self, bundle: Bundle, destination_path: str, path_name: str,
                   existing: RepositoryEntry | None, comment: str | None) -> str | None:
        """Convert the bundle and write it to the store. Returns the failure reason, if any."""
        ext = get_extension(bundle.name)
        if not ext:
            logger.debug(f"Skipping file without extension: {path_name}")
            return "no extension"

        mime_type = bundle.mime_type
        if mime_type is None:
            logger.debug(f"Skipping file without mime-type: {path_name}")
            return "no mime type"

        match = self._converters.match(bundle.name)
        if match is None:
            logger.debug(f"Skipping file without converter: {path_name}")
            return "no converter"
        _, converter = match

        logger.debug(f"Copying file to repository: {path_name}")
        try:
            with bundle.open_stream() as stream:
                data = converter.convert(stream, bundle.charset, mime_type)
        except (OSError, ValueError, ConversionError) as e:
            logger.warning(f"Could not read content of {bundle.name}: {e}")
            return f"conversion failed: {e}"

        if existing is None:
            self._create_file(bundle, destination_path, path_name, ext, data, comment)
        else:
            self.store.update_file(existing, data, comment)
        return None

    def _create_file(self, bundle: Bundle, destination_path: str, path_name: str,
                     ext: str, data: Any, comment: str | None) -> RepositoryEntry:
        hidden = self._visibility.is_hidden(ext)
        logger.debug(f"Setting hidden={hidden} for file with extension {ext.lower()}")
        entry = bundle.entry_template().with_hidden(hidden)
        parent_id = self._parent_ids.resolve(destination_path, path_name)
        return self.store.create_file(parent_id, entry, data, bundle.acl, comment)


def run_import_chain(handlers: Sequence[ImportHandler], bundles: Iterable[Bundle], destination_path: str,
                     comment: str | None = None, overwrite: bool = False) -> ImportReport:
    """Run handlers in order, each one seeing only what the previous ones left unhandled."""
    if not handlers:
        raise InvalidImportArgument("at least one import handler is required")
    if bundles is None:
        raise InvalidImportArgument("bundles and destination_path are required")
    report: ImportReport | None = None
    remaining: list[Bundle] = list(bundles)
    for handler in handlers:
        logger.debug(f"Running import handler {handler.name} on {len(remaining)} bundles")
        step = handler.import_all(remaining, destination_path, comment, overwrite)
        report = step if report is None else report.merge(step)
        remaining = list(step.unhandled)
    assert report is not None
    return report


__all__ = [
    "BundleOutcome",
    "ImportAction",
    "ImportOrchestrator",
    "ImportReport",
    "run_import_chain",
]
