import zipfile

import pytest

from connectors.bundle_sources import directory_bundles, guess_mime_type, open_source, zip_bundles


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "content"
    (root / "reports" / "q1").mkdir(parents=True)
    (root / "reports" / "q1" / "summary.prpt").write_bytes(b"PK")
    (root / "reports" / "run.xaction").write_text("<action/>")
    (root / "README").write_text("read me")
    return root


def test_directory_bundles_are_top_down(tree):
    bundles = list(directory_bundles(tree))
    assert [(b.path, b.name, b.folder) for b in bundles] == [
        ("", "README", False),
        ("", "reports", True),
        ("reports", "q1", True),
        ("reports/q1", "summary.prpt", False),
        ("reports", "run.xaction", False),
    ]
    xaction = bundles[-1]
    assert xaction.mime_type == "text/xml"
    assert xaction.charset == "UTF-8"
    with xaction.open_stream() as stream:
        assert stream.read() == b"<action/>"
    assert bundles[0].mime_type is None


def test_directory_bundles_require_a_directory(tmp_path):
    with pytest.raises(NotADirectoryError):
        list(directory_bundles(tmp_path / "missing"))


def test_zip_bundles_add_implicit_folders(tmp_path):
    archive = tmp_path / "content.zip"
    with zipfile.ZipFile(archive, "w") as z:
        z.writestr("reports/q1/summary.prpt", b"PK")
        z.writestr("__MACOSX/reports/._summary.prpt", b"junk")
        z.writestr("empty/", b"")
    bundles = list(zip_bundles(archive))
    assert [(b.path, b.name, b.folder) for b in bundles] == [
        ("", "empty", True),
        ("", "reports", True),
        ("reports", "q1", True),
        ("reports/q1", "summary.prpt", False),
    ]
    assert bundles[-1].content == b"PK"
    assert bundles[-1].mime_type == "application/zip"
    assert bundles[-1].charset is None


def test_zip_bundles_strip_absolute_member_names(tmp_path):
    archive = tmp_path / "absolute.zip"
    with zipfile.ZipFile(archive, "w") as z:
        z.writestr(zipfile.ZipInfo("/abs/a.xml"), b"<a/>")
    bundles = list(zip_bundles(archive))
    assert [(b.path, b.name, b.folder) for b in bundles] == [
        ("", "abs", True),
        ("abs", "a.xml", False),
    ]


def test_open_source(tree, tmp_path):
    assert len(open_source(tree)) == 5
    plain = tmp_path / "plain.txt"
    plain.write_text("not an archive")
    with pytest.raises(ValueError):
        open_source(plain)


def test_guess_mime_type():
    assert guess_mime_type("logo.png") == "image/png"
    assert guess_mime_type("query.SQL") == "text/plain"
    assert guess_mime_type("README") is None
