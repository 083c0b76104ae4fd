import httpx
import pytest
from fastapi.testclient import TestClient

from connectors.rest_store_connector import RestStoreConnector, RestStoreSession
from connectors.store_interface import FileData
from mock_store.daemon import app
from orchestrator.importer import ImportOrchestrator
from orchestrator.models import AccessControlList, Bundle, RepositoryEntry


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def connector(client):
    session = RestStoreSession("http://testserver", "user", "pass", client=client)
    return RestStoreConnector(session)


@pytest.fixture
def folder(connector, request):
    """A fresh folder below /public for each test."""
    public = connector.get_entry("/public")
    return connector.create_folder(public.id, RepositoryEntry(name=f"t_{request.node.name}", folder=True))


def test_session_alive(connector):
    assert connector.session.is_alive
    connector.session.connect()
    assert connector.status.status == "ok"
    assert connector.info.type == "rest"


def test_get_missing_entry(connector):
    assert connector.get_entry("/public/does/not/exist") is None


def test_create_folder_and_file(connector, folder):
    assert folder.folder
    sub = connector.create_folder(folder.id, RepositoryEntry(name="reports"), AccessControlList(owner="joe"), "c")
    assert sub.path == f"{folder.path}/reports"
    data = FileData(data=b"\x00\x01binary", encoding=None, mime_type="application/zip")
    file = connector.create_file(sub.id, RepositoryEntry(name="a.prpt", hidden=True), data, None, "first")
    assert file.hidden
    assert not file.folder
    assert connector.get_entry(f"{sub.path}/a.prpt") == file
    assert [e.name for e in connector.list_children(sub.path)] == ["a.prpt"]


def test_update_file(connector, folder):
    file = connector.create_file(folder.id, RepositoryEntry(name="a.xml"), FileData(data=b"<a/>"))
    updated = connector.update_file(file, FileData(data=b"<b/>", mime_type="text/xml"), "second")
    assert updated.id == file.id


def test_update_requires_id(connector):
    with pytest.raises(ValueError):
        connector.update_file(RepositoryEntry(name="a.xml"), FileData(data=b""))


def test_duplicate_name_conflicts(connector, folder):
    connector.create_folder(folder.id, RepositoryEntry(name="dupe"))
    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        connector.create_folder(folder.id, RepositoryEntry(name="dupe"))
    assert excinfo.value.response.status_code == 409


def test_unknown_parent(connector):
    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        connector.create_folder("nope", RepositoryEntry(name="x"))
    assert excinfo.value.response.status_code == 404


def test_orchestrator_over_rest(connector, folder):
    bundles = [
        Bundle(path="", name="reports", folder=True),
        Bundle(path="reports", name="summary.prpt", content=b"PK", mime_type="application/zip"),
        Bundle(path="reports", name="notes.txt", content=b"hi", mime_type="text/plain"),
    ]
    report = ImportOrchestrator(connector).import_all(bundles, folder.path, "rest import")
    assert [b.name for b in report.unhandled] == ["notes.txt"]
    entry = connector.get_entry(f"{folder.path}/reports/summary.prpt")
    assert entry is not None
    assert entry.hidden
