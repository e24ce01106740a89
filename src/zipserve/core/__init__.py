from .bundler import bundle_site
from .dispatcher import ContentDispatcher
from .reader import ArchiveReader
from .renderer import ContentRenderer
from .resolver import PathResolver
from .models import (
    ArchiveMetadata,
    Benchmarks,
    CoreZip,
    Html,
    MarkupKind,
    Raw,
    ResolvedEntry,
    ServedContent,
    ServerConfig,
)
