import stat
from pathlib import Path

from ..utils.common import get_logger, quiet_logger, to_posix
from ..utils.exceptions import ErrorCodes
from .models import CoreZip


SHEBANG = b"#!/usr/bin/env python3\n"
MAIN_MODULE = "__main__.py"
MAIN_SOURCE = (
    "from zipserve.cli.cli_parser import cli_parser\n"
    "\n"
    "cli_parser()\n"
)



def is_hidden_path(path):
    return any(i.startswith(".") for i in path.split("/"))


def iter_content_files(content_dir):
    """Yield (file, arcname) pairs below ``content_dir``, hidden paths excluded."""
    content_dir = Path(content_dir)
    for path in sorted(content_dir.rglob("*")):
        if not path.is_file():
            continue

        arcname = path.relative_to(content_dir).as_posix()
        if is_hidden_path(arcname):
            continue
        yield path, arcname



def bundle_site(content_dir, output, base=None, compression=CoreZip.ZIP_DEFLATED, verbose=True):
    """Write a self-serving archive of ``content_dir`` to ``output``.

    Without ``base`` the result is a runnable ``.pyz``: a shebang line, a
    ``__main__.py`` that starts the server, and the content. With ``base``
    the content is appended as a zip to a copy of that binary instead.
    """
    logger = quiet_logger() if not verbose else get_logger()
    content_dir = Path(content_dir).expanduser()
    output = Path(output).expanduser()

    if not content_dir.is_dir():
        raise ErrorCodes.raise_error(
            ErrorCodes.BUNDLE_ERROR, f"Content directory {to_posix(content_dir)!r} does not exist."
        )

    if base is not None:
        base = Path(base).expanduser()
        if not base.is_file():
            raise ErrorCodes.raise_error(
                ErrorCodes.BUNDLE_ERROR, f"Base binary {to_posix(base)!r} does not exist."
            )
        prefix = base.read_bytes()
    else:
        prefix = SHEBANG

    files = [
        (path, arcname) for path, arcname in iter_content_files(content_dir)
        if path.resolve() != output.resolve()
    ]

    if not files:
        raise ErrorCodes.raise_error(
            ErrorCodes.BUNDLE_ERROR, f"No files to bundle in {to_posix(content_dir)!r}."
        )

    if base is None and any(arcname == MAIN_MODULE for _, arcname in files):
        raise ErrorCodes.raise_error(
            ErrorCodes.BUNDLE_ERROR,
            f"{MAIN_MODULE!r} is reserved for the server entry point; rename it or use a base binary."
        )

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(prefix)

    # Mode "a" on a file that is not a zip yet appends a new archive after it.
    with CoreZip.ZipFile(output, mode="a", compression=compression) as zf:
        if base is None:
            zf.writestr(MAIN_MODULE, MAIN_SOURCE)
        for path, arcname in files:
            zf.write(path, arcname)

    output.chmod(output.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(f"Bundled {len(files)} files into {to_posix(output)!r}")
    return output
