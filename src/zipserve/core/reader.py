from functools import wraps
from pathlib import Path

from ..core.models import ArchiveMetadata, CoreZip
from ..utils.exceptions import EntryNotFound, NotAnArchive



def must_be_open(func):
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        if self._zip is None:
            raise ValueError(f"Archive {self._archive_file.as_posix()!r} is closed")
        return func(self, *args, **kwargs)
    return wrapper





class ArchiveReader(CoreZip):
    """Read-only view over a zip archive, possibly with data prepended to it.

    The central directory is parsed once, when the reader is created. Entry
    names are indexed in archive order; directory entries are left out.
    """

    def __init__(self, archive_file):
        self._archive_file: Path = Path(archive_file).expanduser()
        self._zip = self.read_zip()
        self._entries = {
            info.filename: info
            for info in self._zip.infolist()
            if not info.is_dir()
        }

    def read_zip(self):
        archive = self._archive_file

        if not archive.is_file():
            raise NotAnArchive(f"{archive.as_posix()!r} does not exist or is not a file")

        try:
            return self.ZipFile(archive, mode="r")
        except (self.BadZipFile, OSError) as e:
            raise NotAnArchive(f"{archive.as_posix()!r} is not a valid zip archive") from e

    @property
    def archive_file(self) -> Path:
        return self._archive_file

    @property
    def closed(self) -> bool:
        return self._zip is None

    def __contains__(self, name):
        return name in self._entries

    def __len__(self):
        return len(self._entries)

    def list_names(self) -> list[str]:
        return list(self._entries)

    def get_info(self, name):
        return self._entries.get(name)

    @must_be_open
    def open_entry(self, name):
        info = self.get_info(name)
        if info is None:
            raise EntryNotFound(
                f"There is no item named {name!r} in the archive {self._archive_file.as_posix()!r}"
            )
        return self._zip.open(info)

    def read_entry(self, name) -> bytes:
        with self.open_entry(name) as f:
            return f.read()

    def metadata(self) -> ArchiveMetadata:
        def _get_stat(attr):
            return sum(getattr(i, attr) for i in infolist)

        infolist = self._entries.values()
        archive_stat = self._archive_file.stat()

        return ArchiveMetadata(
            archive_file=self._archive_file,
            time_modified=archive_stat.st_mtime,
            size=archive_stat.st_size,
            total_files=len(self),
            total_uncompressed=_get_stat("file_size"),
            total_compressed=_get_stat("compress_size"),
        )

    def close(self):
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self):
        return self

    def __exit__(self, *args, **kwargs):
        self.close()

    def __repr__(self):
        return f"{type(self).__name__}({self._archive_file.as_posix()!r})"
