"""
Bucket manifest model.

A bucket is one revision of a distributed file tree. Its manifest is a
JSON document stored as a blob on the remote:

{
  "v": 0,
  "hash_type": "md5",
  "contents": [
    {"path": "dir/a.txt", "hash": "0123...", "size": 5, "attr": 0}
  ]
}

The `attr` field is optional and defaults to DEFAULT_CONTENT_ATTRIBUTE.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

from dacite import Config as DaciteConfig
from dacite import from_dict
from dacite.exceptions import DaciteError

from .errors import ParseError
from .hashes import DEFAULT_HASH_TYPE, HASH_HEX_LENGTHS, is_hash
from .transform import DEFAULT_CONTENT_ATTRIBUTE, ContentAttribute, unknown_bits

MANIFEST_VERSION: Final[int] = 0


@dataclass(frozen=True, kw_only=True)
class Content:
    """Descriptor of a single file inside a bucket."""

    path: str
    hash: str
    size: int
    attr: ContentAttribute = DEFAULT_CONTENT_ATTRIBUTE


@dataclass(frozen=True, kw_only=True)
class _ManifestDocument:
    v: int
    hash_type: str = DEFAULT_HASH_TYPE
    contents: list[Content] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class Bucket:
    """
    Named content set mapping relative paths to Content descriptors.

    Attributes:
        hash_type: algorithm used to name the blobs.
        tag: the tag that resolved to this bucket, empty if loaded by hash.
        contents: read-only mapping from path to Content.
    """

    hash_type: str = DEFAULT_HASH_TYPE
    tag: str = ""
    contents: Mapping[str, Content] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "contents", MappingProxyType(dict(self.contents)))

    def __iter__(self) -> Iterator[Content]:
        return iter(self.contents.values())

    def __len__(self) -> int:
        return len(self.contents)

    def paths(self) -> list[str]:
        return list(self.contents)

    def select(self, paths: Iterable[str]) -> Bucket:
        """Return a new bucket containing only the given paths."""
        keep = set(paths)
        return Bucket(
            hash_type=self.hash_type,
            tag=self.tag,
            contents={path: c for path, c in self.contents.items() if path in keep},
        )

    def total_size(self) -> int:
        return sum(c.size for c in self.contents.values())

    def dumps(self) -> bytes:
        """Serialize the bucket back to the manifest encoding."""
        document = {
            "v": MANIFEST_VERSION,
            "hash_type": self.hash_type,
            "contents": [
                {"path": c.path, "hash": c.hash, "size": c.size, "attr": int(c.attr)}
                for c in self.contents.values()
            ],
        }
        return json.dumps(document, indent=2).encode("utf-8")


def parse_bucket(data: bytes, *, tag: str = "") -> Bucket:
    """
    Parse the manifest encoding into a Bucket.

    Raises:
        ParseError: if data is not a well-formed manifest.
    """
    try:
        raw: Any = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError(f"manifest is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ParseError("manifest must be a JSON object")

    try:
        document = from_dict(
            _ManifestDocument,
            raw,
            config=DaciteConfig(cast=[ContentAttribute], strict=True),
        )
    except (DaciteError, ValueError) as exc:
        raise ParseError(f"malformed manifest: {exc}") from exc

    # bool is an int subclass and passes the dacite type check
    if type(document.v) is not int or document.v != MANIFEST_VERSION:
        raise ParseError(f"Unsupported manifest version: {document.v}")
    if document.hash_type not in HASH_HEX_LENGTHS:
        raise ParseError(f"Unsupported hash type: {document.hash_type}")

    contents: dict[str, Content] = {}
    for content in document.contents:
        if not content.path:
            raise ParseError("manifest entry with empty path")
        if content.path in contents:
            raise ParseError(f"duplicate path in manifest: {content.path}")
        if not is_hash(content.hash, document.hash_type):
            raise ParseError(f"invalid hash for {content.path}: {content.hash!r}")
        if type(content.size) is not int:
            raise ParseError(f"invalid size for {content.path}: {content.size!r}")
        if content.size < 0:
            raise ParseError(f"negative size for {content.path}: {content.size}")
        if unknown_bits(content.attr):
            raise ParseError(f"unknown attr for {content.path}: {int(content.attr)}")
        contents[content.path] = content

    return Bucket(hash_type=document.hash_type, tag=tag, contents=contents)
