import statistics
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from http import HTTPStatus
from pathlib import Path
from typing import ClassVar, Optional

from ..utils.common import (
    PathLike,
    calculate_ratio,
    fromtimestamp,
    validate_port,
)
from ..utils.exceptions import ErrorCodes


HTML_CONTENT_TYPE = "text/html; charset=utf-8"
DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_PORT = 8000
DEFAULT_PAGE = "index"
DEFAULT_HOST = "0.0.0.0"


class CoreZip:
    ZipFile: ClassVar[type[zipfile.ZipFile]] = zipfile.ZipFile
    BadZipFile: ClassVar[type[Exception]] = zipfile.BadZipFile
    ZIP_DEFLATED: ClassVar[int] = zipfile.ZIP_DEFLATED
    is_zipfile: staticmethod = staticmethod(zipfile.is_zipfile)




@dataclass(
    kw_only=True,
    unsafe_hash=True,
    slots=True,
    weakref_slot=True
)
class ArchiveMetadata:
    archive_file: PathLike
    time_modified: Optional[float | datetime] = None
    size: Optional[int] = None
    total_files: Optional[int] = None
    total_uncompressed: Optional[int | float] = None
    total_compressed: Optional[int | float] = None

    ratio: int | float = field(default=None, init=False)
    time_modified_dt: datetime = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.ratio = calculate_ratio(self.total_compressed, self.total_uncompressed)
        self.time_modified_dt = fromtimestamp(self.time_modified)




class MarkupKind(Enum):
    """How an entry is turned into a response body."""

    MARKDOWN = "md"
    ORG = "org"
    HTML_PASSTHROUGH = "html"
    OTHER = ""

    @classmethod
    def from_extension(cls, extension: str) -> "MarkupKind":
        match (extension or "").lower():
            case "md":
                return cls.MARKDOWN
            case "org":
                return cls.ORG
            case "htm" | "html":
                return cls.HTML_PASSTHROUGH
            case _:
                return cls.OTHER

    @property
    def is_markup(self) -> bool:
        return self is not MarkupKind.OTHER




@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    name: str

    # Lowercased suffix of the entry name, "" when there is none.
    extension: str = ""

    @property
    def kind(self) -> MarkupKind:
        return MarkupKind.from_extension(self.extension)




@dataclass(frozen=True, slots=True)
class Html:
    text: str
    content_type: ClassVar[str] = HTML_CONTENT_TYPE

    @property
    def body(self) -> bytes:
        return self.text.encode("utf-8")



@dataclass(frozen=True, slots=True)
class Raw:
    data: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def body(self) -> bytes:
        return self.data


RenderedContent = Html | Raw




@dataclass(frozen=True, slots=True)
class ServedContent:
    status: HTTPStatus
    body: bytes = b""
    content_type: Optional[str] = None

    @classmethod
    def ok(cls, rendered: RenderedContent):
        return cls(HTTPStatus.OK, rendered.body, rendered.content_type)

    @classmethod
    def not_found(cls):
        return cls(HTTPStatus.NOT_FOUND)

    @classmethod
    def server_error(cls):
        return cls(HTTPStatus.INTERNAL_SERVER_ERROR)

    def __bool__(self):
        return self.status == HTTPStatus.OK




@dataclass(kw_only=True, slots=True)
class ServerConfig:
    archive_file: PathLike
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    default_page: str = DEFAULT_PAGE
    reopen: bool = False
    verbose: bool = True

    def __post_init__(self):
        validate_port(self.port)

        if not self.default_page:
            raise ErrorCodes.raise_error(
                ErrorCodes.CONFIG_ERROR, "The default page must not be empty."
            )

        if not self.host:
            raise ErrorCodes.raise_error(
                ErrorCodes.CONFIG_ERROR, "The host must not be empty."
            )

        self.archive_file = Path(self.archive_file).expanduser()




@dataclass(
    unsafe_hash=True,
    slots=True,
    weakref_slot=True
)
class Benchmarks:
    strategy: str
    timings: list[float]
    requests: int = 1
    mean: float = field(default=None, init=False)
    stdev: float = field(default=None, init=False)
    min_timings: float = field(default=None, init=False)
    max_timings: float = field(default=None, init=False)
    cold_start_duration: float = field(default=None, init=False)
    throughput: float = field(default=None, init=False)

    def __post_init__(self):
        if self.timings and len(self.timings) > 1:
            self.cold_start_duration = self.to_ms(self.timings.pop(0))
            self.mean = self.to_ms(statistics.mean(self.timings))
            self.stdev = self.to_ms(statistics.stdev(self.timings)) if len(self.timings) > 1 else 0
            self.min_timings = self.to_ms(min(self.timings))
            self.max_timings = self.to_ms(max(self.timings))
            self.throughput = self.requests * 1000 / self.mean if self.mean else float("inf")

    def __repr__(self):
        try:
            return f"""
{self.strategy.upper()}:
  ~~> Mean: {self.mean:.2f} ms
  ~~> Std:  {self.stdev:.2f} ms
  ~~> Min:  {self.min_timings:.2f} ms
  ~~> Max:  {self.max_timings:.2f} ms
  ~~> Cold Start:  {self.cold_start_duration:.2f} ms
  ~~> Throughput:  {self.throughput:.2f} requests/sec
"""
        except TypeError:
            return f"Benchmarks(strategy={self.strategy!r}, timings={self.timings!r})"

    def __truediv__(self, other):
        if not isinstance(other, Benchmarks):
            return NotImplemented
        return self.mean / other.mean

    def __bool__(self):
        return bool(self.timings)

    def is_faster(self, other):
        if not isinstance(other, Benchmarks):
            return NotImplemented
        return self.mean <= other.mean

    @staticmethod
    def to_ms(number):
        return number * 1000
