import zlib
from contextlib import contextmanager
from pathlib import Path

from ..utils.common import get_logger, quiet_logger, to_posix, unpack_error
from ..utils.exceptions import NotAnArchive
from .models import CoreZip, ServedContent
from .reader import ArchiveReader
from .renderer import ContentRenderer
from .resolver import PathResolver


# Failures of an archive that was valid at startup; each costs one request.
ARCHIVE_ERRORS = (NotAnArchive, CoreZip.BadZipFile, OSError, zlib.error, ValueError)



class ContentDispatcher:
    """Turn a requested logical path into a ``ServedContent``.

    By default one ``ArchiveReader`` is opened up front and shared by every
    call; it is never written to, so concurrent dispatches need no locking.
    With ``reopen=True`` each call opens and closes its own reader instead.
    """

    def __init__(self, archive_file, *, reopen=False, verbose=True, resolver=None, renderer=None):
        self.__logger = quiet_logger() if not verbose else get_logger()

        self._archive_file = Path(archive_file).expanduser()
        self._reopen = reopen
        self._resolver = resolver or PathResolver(verbose=verbose)
        self._renderer = renderer or ContentRenderer()
        self._shared = None if reopen else self.open_archive()

    def open_archive(self) -> ArchiveReader:
        return ArchiveReader(self._archive_file)

    @contextmanager
    def archive(self):
        if self._shared is not None:
            yield self._shared
            return

        with self.open_archive() as archive:
            yield archive

    def dispatch(self, requested_path: str) -> ServedContent:
        try:
            with self.archive() as archive:
                entry = self._resolver.resolve(requested_path, archive)

                if entry is None:
                    self.__logger.debug(f"No entry for {requested_path!r}")
                    return ServedContent.not_found()

                data = archive.read_entry(entry.name)
        except ARCHIVE_ERRORS as e:
            self.__logger.exception(
                f"Could not serve {requested_path!r} from {to_posix(self._archive_file)!r}: "
                f"{unpack_error(e)}"
            )
            return ServedContent.server_error()

        rendered = self._renderer.render(data, entry.extension)
        return ServedContent.ok(rendered)

    @property
    def archive_file(self) -> Path:
        return self._archive_file

    @property
    def reopen(self) -> bool:
        return self._reopen

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    def close(self):
        if self._shared is not None:
            self._shared.close()

    def __enter__(self):
        return self

    def __exit__(self, *args, **kwargs):
        self.close()
