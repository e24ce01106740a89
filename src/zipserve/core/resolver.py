from typing import Iterable, Optional

from ..utils.common import get_extension, get_logger, is_safe_logical_path, quiet_logger
from .models import ResolvedEntry


MARKUP_SUFFIXES = ("md", "org", "htm", "html")




class PathResolver:
    """Map a requested logical path onto an archive entry.

    The literal path is tried first, then the path with each markup suffix
    appended. The first candidate that names an entry wins, so with both
    ``x`` and ``x.md`` in the archive a request for ``x`` gets ``x``.
    """

    def __init__(self, suffixes: Iterable[str]=MARKUP_SUFFIXES, verbose=True):
        self.__logger = quiet_logger() if not verbose else get_logger()
        self._suffixes = tuple(suffixes)

    @property
    def suffixes(self) -> tuple[str, ...]:
        return self._suffixes

    def candidates(self, requested_path: str) -> tuple[str, ...]:
        return (
            requested_path,
            *(f"{requested_path}.{suffix}" for suffix in self._suffixes)
        )

    def resolve(self, requested_path: str, archive) -> Optional[ResolvedEntry]:
        if not is_safe_logical_path(requested_path):
            self.__logger.debug(f"Refusing unsafe path {requested_path!r}")
            return None

        # Candidates are textually distinct, so a membership test per
        # candidate matches the first entry a full scan would find.
        for candidate in self.candidates(requested_path):
            if candidate in archive:
                return ResolvedEntry(candidate, get_extension(candidate))
        return None
