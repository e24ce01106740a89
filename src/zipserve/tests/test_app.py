import pytest

from zipserve.core.renderer import md_to_html
from zipserve.web.app import create_app
from zipserve.zipserve import zipserve

from conftest import PNG_BYTES, SITE_ENTRIES


@pytest.fixture
def client(dispatcher):
    app = create_app(dispatcher)
    app.testing = True
    return app.test_client()


def test_root_serves_default_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/html; charset=utf-8"
    assert response.data == md_to_html(SITE_ENTRIES["index.md"]).encode("utf-8")


def test_root_uses_configured_default_page(dispatcher):
    client = create_app(dispatcher, default_page="about").test_client()
    response = client.get("/")

    assert response.status_code == 200
    assert response.data == SITE_ENTRIES["about.html"].encode("utf-8")


def test_markdown_page(client):
    response = client.get("/notes")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/html; charset=utf-8"
    assert b"<li>one</li>" in response.data


def test_raw_entry_keeps_bytes_and_type(client):
    response = client.get("/logo.png")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "image/png"
    assert response.data == PNG_BYTES


def test_extensionless_entry_is_plain_text(client):
    response = client.get("/readme")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/plain"
    assert response.data == b"plain readme"


def test_missing_entry_is_empty_404(client):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.data == b""


def test_nested_paths_are_not_routed(client):
    # docs/guide.md exists, but only single-segment paths are served.
    assert client.get("/docs/guide").status_code == 404


def test_zipserve_builds_its_own_app(site_archive):
    with zipserve(site_archive, default_page="todo", verbose=False) as server:
        response = server.create_app().test_client().get("/")

    assert response.status_code == 200
    assert b"Tasks" in response.data
