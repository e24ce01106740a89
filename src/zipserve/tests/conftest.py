import zipfile

import pytest

from zipserve.core.dispatcher import ContentDispatcher


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))

SITE_ENTRIES = {
    "index.md": "# Welcome\n\nHello *world*.\n",
    "notes.md": "# Notes\n\n- one\n- two\n",
    "about.html": "<h1>About</h1>\n<p>café naïve</p>\n",
    "legacy.htm": "<p>old page</p>",
    "todo.org": "* Tasks\n** First task\nSome text.\n",
    "logo.png": PNG_BYTES,
    "readme": b"plain readme",
    "x": b"literal x",
    "x.md": "# x as markdown\n",
    "docs/": b"",
    "docs/guide.md": "# Guide\n",
    "README.MD": "# Shouting\n",
    "style.css": "body { color: black; }\n",
    "broken.md": b"# Bad \xff\xfe bytes\n",
    "backup.tar.gz": b"\x1f\x8b\x08\x00 not really gzip",
}



def write_archive(path, entries, prefix=b""):
    path.write_bytes(prefix)
    # Mode "a" appends a fresh archive after whatever prefix is there.
    with zipfile.ZipFile(path, "a", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def archive_factory(tmp_path):
    def _factory(entries, name="site.zip", prefix=b""):
        return write_archive(tmp_path / name, entries, prefix=prefix)
    return _factory


@pytest.fixture
def site_archive(archive_factory):
    return archive_factory(SITE_ENTRIES)


@pytest.fixture
def not_an_archive(tmp_path):
    path = tmp_path / "not-a-zip"
    path.write_bytes(b"#!/bin/sh\necho just a script\n")
    return path


@pytest.fixture
def dispatcher(site_archive):
    with ContentDispatcher(site_archive, verbose=False) as d:
        yield d
