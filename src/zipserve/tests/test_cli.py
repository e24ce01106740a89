import socket
import subprocess
import sys
import time
import urllib.error
import urllib.request
from pathlib import Path

import pytest

from zipserve.cli import cli_parser as cli_module
from zipserve.core.reader import ArchiveReader
from zipserve.utils.exceptions import ErrorCodes


@pytest.fixture
def served(monkeypatch):
    """Record run_server calls instead of binding a port."""
    calls = []
    monkeypatch.setattr(cli_module, "run_server", calls.append)
    return calls


def run_cli(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli_module.cli_parser(argv)
    return excinfo.value.code


def test_non_archive_exits_42_before_serving(not_an_archive, served, capsys):
    code = run_cli(["--archive", str(not_an_archive)])

    assert code == ErrorCodes.NOT_AN_ARCHIVE == 42
    assert served == []
    assert "There is no Zip archive here. Exiting." in capsys.readouterr().err


def test_own_file_is_the_default_archive(not_an_archive, site_archive, served, monkeypatch):
    monkeypatch.setattr(sys, "argv", [str(not_an_archive)])
    assert run_cli([]) == 42
    assert served == []

    monkeypatch.setattr(sys, "argv", [str(site_archive)])
    assert run_cli(["-q"]) == 0
    assert served[0].archive_file == site_archive


def test_serve_passes_configuration(site_archive, served):
    code = run_cli([
        "serve", "--archive", str(site_archive), "--port", "9123",
        "--defaultpage", "about", "--host", "127.0.0.1", "--reopen", "-q",
    ])

    assert code == 0
    (config,) = served
    assert config.archive_file == site_archive
    assert config.port == 9123
    assert config.default_page == "about"
    assert config.host == "127.0.0.1"
    assert config.reopen
    assert not config.verbose


def test_serve_defaults(site_archive, served):
    assert run_cli(["--archive", str(site_archive), "-q"]) == 0

    (config,) = served
    assert (config.host, config.port, config.default_page, config.reopen) == ("0.0.0.0", 8000, "index", False)


@pytest.mark.parametrize("argv", [["--port", "0"], ["--port", "70000"], ["--defaultpage", ""]])
def test_invalid_configuration_exits_with_config_error(site_archive, served, argv):
    assert run_cli(["--archive", str(site_archive), "-q", *argv]) == ErrorCodes.CONFIG_ERROR
    assert served == []


def test_list_prints_entry_names(site_archive, capsys):
    assert run_cli(["list", str(site_archive)]) == 0

    err = capsys.readouterr().err
    assert "notes.md" in err
    assert "logo.png" in err


def test_list_info_prints_metadata(site_archive, capsys):
    assert run_cli(["ls", "--info", str(site_archive)]) == 0
    assert "ArchiveMetadata" in capsys.readouterr().err


def test_list_non_archive(not_an_archive):
    assert run_cli(["list", str(not_an_archive)]) == ErrorCodes.NOT_AN_ARCHIVE


def test_bundle_command(tmp_path):
    content = tmp_path / "content"
    content.mkdir()
    (content / "index.md").write_text("# Home\n")
    output = tmp_path / "site.pyz"

    assert run_cli(["bundle", str(content), "-o", str(output), "-q"]) == 0
    with ArchiveReader(output) as archive:
        assert archive.list_names() == ["__main__.py", "index.md"]


def test_bundle_missing_content_dir(tmp_path):
    code = run_cli(["bundle", str(tmp_path / "nope"), "-o", str(tmp_path / "site.pyz"), "-q"])
    assert code == ErrorCodes.BUNDLE_ERROR


def test_process_exit_code_for_non_archive(not_an_archive):
    result = subprocess.run(
        [
            sys.executable, "-c",
            "from zipserve.cli.cli_parser import cli_parser; cli_parser()",
            "--archive", str(not_an_archive), "--port", "1",
        ],
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert result.returncode == 42
    assert "There is no Zip archive here. Exiting." in result.stderr


def free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def fetch(url, timeout=30.0):
    deadline = time.monotonic() + timeout
    while True:
        try:
            with urllib.request.urlopen(url, timeout=5) as response:
                return response.status, response.headers["Content-Type"], response.read()
        except urllib.error.HTTPError as e:
            return e.code, e.headers["Content-Type"], e.read()
        except (urllib.error.URLError, ConnectionError):
            if time.monotonic() > deadline:
                raise
            time.sleep(0.2)


def test_bundled_site_serves_itself(tmp_path):
    content = tmp_path / "content"
    content.mkdir()
    (content / "index.md").write_text("# Home\n")
    (content / "data.json").write_text('{"ok": true}')
    output = Path(tmp_path / "site.pyz")
    run_cli(["bundle", str(content), "-o", str(output), "-q"])

    port = free_port()
    process = subprocess.Popen(
        [sys.executable, str(output), "--port", str(port), "--host", "127.0.0.1", "-q"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        base = f"http://127.0.0.1:{port}"
        status, content_type, body = fetch(f"{base}/")
        assert status == 200
        assert content_type == "text/html; charset=utf-8"
        assert b"<h1>Home</h1>" in body

        assert fetch(f"{base}/data.json") == (200, "application/json", b'{"ok": true}')
        assert fetch(f"{base}/missing")[0] == 404
    finally:
        process.terminate()
        process.wait(timeout=30)
