import json

import pytest

from orchestrator.models import AccessControlList, Bundle, RepositoryEntry, coerce_acl
from orchestrator.settings import ImportSettings, load_settings


def test_bundle_reads_in_memory_content():
    bundle = Bundle(name="a.xml", content=b"<a/>")
    with bundle.open_stream() as stream:
        assert stream.read() == b"<a/>"


def test_bundle_reads_local_file(tmp_path):
    source = tmp_path / "a.xml"
    source.write_bytes(b"<file/>")
    bundle = Bundle(path="x", name="a.xml", source_file=source)
    with bundle.open_stream() as stream:
        assert stream.read() == b"<file/>"


def test_folder_bundle_has_no_stream():
    with pytest.raises(IsADirectoryError):
        Bundle(name="reports", folder=True).open_stream()


def test_entry_template():
    entry = Bundle(name="reports", folder=True).entry_template()
    assert entry == RepositoryEntry(name="reports", folder=True)
    assert entry.with_hidden(True).hidden
    assert not entry.hidden


def test_acl_from_yaml_and_json():
    from_yaml = coerce_acl("owner: joe\nentries:\n  - recipient: Admin\n    recipient_type: role\n")
    from_json = coerce_acl(json.dumps({"owner": "joe", "entries": [{"recipient": "Admin", "recipient_type": "role"}]}))
    assert from_yaml == from_json
    assert from_yaml.entries[0].permissions == ["read"]
    assert Bundle(name="a.xml", acl=from_yaml).acl is from_yaml


def test_invalid_acl():
    with pytest.raises(ValueError):
        coerce_acl({"entries": []})
    with pytest.raises(TypeError):
        coerce_acl(42)


def test_acl_from_file(tmp_path):
    path = tmp_path / "acl.yaml"
    path.write_text("owner: suzy\nentries_inheriting: false\n")
    acl = coerce_acl(path)
    assert isinstance(acl, AccessControlList)
    assert acl.owner == "suzy"
    assert not acl.entries_inheriting


def test_settings_defaults():
    settings = load_settings()
    assert settings.destination == "/public"
    assert not settings.overwrite
    assert settings.content_types == []


def test_settings_from_yaml_file(tmp_path):
    path = tmp_path / "import.yaml"
    path.write_text("destination: /home/joe\noverwrite: true\ncontent_types: [prpt, xcdf]\n")
    settings = load_settings(path)
    assert settings.destination == "/home/joe"
    assert settings.overwrite
    assert settings.content_types == ["prpt", "xcdf"]


def test_settings_merge_ignores_unset_options():
    settings = ImportSettings(destination="/home/joe").merge({"destination": None, "comment": "bulk"})
    assert settings.destination == "/home/joe"
    assert settings.comment == "bulk"


def test_invalid_settings():
    with pytest.raises(ValueError):
        load_settings({"destination": ""})
