import pytest
from typer.testing import CliRunner

import orchestrator.cli as cli
from connectors.memory_store import InMemoryStore

runner = CliRunner()


@pytest.fixture
def store(monkeypatch, tmp_path):
    store = InMemoryStore(folders=["/public"])
    monkeypatch.setattr(cli, "get_store", lambda *args: store)
    monkeypatch.setenv("HOME", str(tmp_path))
    return store


@pytest.fixture
def source(tmp_path):
    root = tmp_path / "content"
    (root / "reports" / "q1").mkdir(parents=True)
    (root / "reports" / "q1" / "summary.prpt").write_bytes(b"PK")
    (root / "reports" / "notes.txt").write_text("hello")
    (root / "system").mkdir()
    (root / "system" / "hidden.xml").write_text("<a/>")
    return root


def test_help():
    result = runner.invoke(cli.app, ["--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_run_imports_directory(store, source):
    result = runner.invoke(cli.app, ["run", str(source), "/public", "--comment", "bulk"])
    print(result.output)
    assert result.exit_code == 0
    assert store.read_file("/public/reports/q1/summary.prpt").data == b"PK"
    assert store.get_entry("/public/reports/notes.txt") is None
    assert store.get_entry("/public/system") is None
    assert "Imported 3 of 6 bundles" in result.output


def test_run_with_missing_parent_aborts(monkeypatch, tmp_path, source):
    empty = InMemoryStore()
    monkeypatch.setattr(cli, "get_store", lambda *args: empty)
    monkeypatch.setenv("HOME", str(tmp_path))
    result = runner.invoke(cli.app, ["run", str(source), "/public"])
    assert result.exit_code == 1


def test_run_rejects_missing_source(tmp_path):
    result = runner.invoke(cli.app, ["run", str(tmp_path / "nope"), "/public"])
    assert result.exit_code != 0


def test_classify():
    result = runner.invoke(cli.app, ["classify", "system/hidden.xml"])
    assert result.exit_code == 0
    assert "reserved" in result.output
    result = runner.invoke(cli.app, ["classify", "reports/run.xaction"])
    assert "hidden=False" in result.output
    result = runner.invoke(cli.app, ["classify", "reports/summary.prpt", "--content-type", "prpt"])
    assert "hidden=False" in result.output
    result = runner.invoke(cli.app, ["classify", "notes.txt"])
    assert "no converter" in result.output


def test_run_rejects_empty_destination(store, source):
    result = runner.invoke(cli.app, ["run", str(source), ""])
    assert result.exit_code == 2
    assert "Invalid settings" in result.output
    assert store.entry_count == 2
