"""
This file is the entry point for the 'repoimport' command-line tool.
Run 'repoimport' in your shell to bulk import a folder or zip archive
into a content store.
"""
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from common.app_setup import setup_logging, monkeypatch_print, print_and_log, print_error
from connectors.bundle_sources import open_source
from connectors.connections_manager import get_store
from connectors.memory_store import StaticContentTypeRegistry
from orchestrator.converters import DEFAULT_REGISTRY
from orchestrator.errors import ImportFailure
from orchestrator.importer import ImportAction, ImportOrchestrator, ImportReport
from orchestrator.paths import get_extension, is_system_path, separators_to_repository
from orchestrator.settings import ImportSettings, load_settings
from orchestrator.visibility import VisibilityClassifier

app = typer.Typer(help="Bulk import files and folders into a hierarchical content store.")
monkeypatch_print()


def _settings(settings_file: Path | None, **overrides) -> ImportSettings:
    try:
        return load_settings(settings_file).merge(overrides)
    except (OSError, ValueError) as e:
        print_error(f"Invalid settings: {e}")
        raise typer.Exit(2)


def _print_report(report: ImportReport) -> None:
    table = Table(title="Import summary")
    table.add_column("Action")
    table.add_column("Bundles", justify="right")
    for action in ImportAction:
        count = report.count(action)
        if count:
            table.add_row(action.value, str(count))
    Console().print(table)
    for outcome in report.outcomes:
        if not outcome.handled:
            print_and_log(f"left unhandled: {outcome.path} ({outcome.reason})")


@app.command()
def run(
    source: Path = typer.Argument(..., exists=True, help="Directory or zip archive to import"),
    destination: str = typer.Argument(None, help="Repository folder to import into"),
    url: str = typer.Option(None, help="Base URL of the store"),
    user: str = typer.Option(None, help="Store user"),
    password: str = typer.Option(None, help="Store password"),
    comment: str = typer.Option(None, help="Version comment for created and updated files"),
    overwrite: bool = typer.Option(None, "--overwrite/--no-overwrite", help="Replace existing files"),
    settings_file: Path = typer.Option(None, "--settings", help="YAML or JSON settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo log records to the terminal"),
):
    """Import SOURCE into DESTINATION on the store."""
    settings = _settings(settings_file, destination=destination, store_url=url, user=user,
                         password=password, comment=comment, overwrite=overwrite)
    setup_logging(app_name="repoimport", loglevel=settings.log_level, logfile=settings.logfile, console=verbose)
    try:
        bundles = open_source(source, settings.default_charset)
    except (OSError, ValueError) as e:
        print_error(f"Cannot read {source}: {e}")
        raise typer.Exit(1)
    try:
        store = get_store("rest", settings.store_url, settings.user, settings.password)
    except (ConnectionError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    orchestrator = ImportOrchestrator(store, DEFAULT_REGISTRY, StaticContentTypeRegistry(settings.content_types))
    try:
        report = orchestrator.import_all(bundles, settings.destination, settings.comment, settings.overwrite)
    except (ImportFailure, httpx.HTTPError) as e:
        print_error(f"Import aborted: {e}")
        raise typer.Exit(1)
    _print_report(report)
    print_and_log(f"Imported {len(report.handled)} of {len(bundles)} bundles into {settings.destination}.")


@app.command()
def classify(
    path: str = typer.Argument(..., help="Repository-relative path of a file"),
    content_type: list[str] = typer.Option([], "--content-type", help="Executable type provided by a plugin"),
):
    """Show how a file at PATH would be treated by an import."""
    normalized = separators_to_repository(path).lstrip("/")
    name = normalized.rsplit("/", 1)[-1]
    if is_system_path(normalized):
        print_and_log(f"{normalized}: reserved, skipped")
        return
    match = DEFAULT_REGISTRY.match(name)
    if match is None:
        print_and_log(f"{normalized}: no converter, left unhandled")
        return
    hidden = VisibilityClassifier(StaticContentTypeRegistry(content_type)).is_hidden(get_extension(name))
    print_and_log(f"{normalized}: converter '{match[0]}', hidden={hidden}")


if __name__ == "__main__":
    app()
