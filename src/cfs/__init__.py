"""Content-addressed file distribution.

Resolve a tag to a bucket manifest, then fetch, verify or materialize the
bucket's files through a local hash-keyed cache.
"""

from importlib.metadata import PackageNotFoundError, version

from .bucket import Bucket, Content, parse_bucket
from .cache import LocalCache
from .config import Config, cache_dir_or_default
from .downloader import Downloader
from .errors import (
    CFSError,
    FetchError,
    FilterError,
    FormatError,
    InvalidHashError,
    ParseError,
    ResolutionError,
    TransformError,
)
from .fetcher import Fetcher
from .filter import filter_bucket, filter_pack_file
from .hashes import is_hash
from .pack import PackEntry, PackFile
from .resolver import TagResolver
from .tagfile import TagFile, tag_file_from_file
from .transform import DEFAULT_CONTENT_ATTRIBUTE, ContentAttribute

try:
    __version__ = version("cfs-client")
except PackageNotFoundError:  # pragma: no cover - running from a checkout
    __version__ = "0.0.0"

__all__ = [
    "Bucket",
    "CFSError",
    "Config",
    "Content",
    "ContentAttribute",
    "DEFAULT_CONTENT_ATTRIBUTE",
    "Downloader",
    "FetchError",
    "Fetcher",
    "FilterError",
    "FormatError",
    "InvalidHashError",
    "LocalCache",
    "PackEntry",
    "PackFile",
    "ParseError",
    "ResolutionError",
    "TagFile",
    "TagResolver",
    "TransformError",
    "cache_dir_or_default",
    "filter_bucket",
    "filter_pack_file",
    "is_hash",
    "parse_bucket",
    "tag_file_from_file",
    "__version__",
]
