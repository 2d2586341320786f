"""
Binary pack-file codec.

A pack file bundles many small files into a single blob. The pack file
itself only describes the entries; the payload of each entry lives at
`pos` (for `size` bytes) inside the bundled blob.

Layout (big-endian):

    magic      4 bytes   b"CFSP"
    version    u16
    count      u32
    count times:
        path_len   u16, followed by the UTF-8 path
        hash_len   u8, followed by the ASCII hash
        pos        u64
        size       u64
"""

from __future__ import annotations

import io
import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO, Final

from .errors import FormatError
from .hashes import DEFAULT_HASH_TYPE, compute_hash

PACK_FILE_MAGIC: Final[bytes] = b"CFSP"
PACK_FILE_VERSION: Final[int] = 1

_HEADER = struct.Struct(">4sHI")
_PATH_LEN = struct.Struct(">H")
_HASH_LEN = struct.Struct(">B")
_POS_SIZE = struct.Struct(">QQ")


@dataclass(frozen=True, kw_only=True)
class PackEntry:
    """Single file bundled inside a pack."""

    path: str
    hash: str
    pos: int
    size: int


@dataclass(frozen=True, kw_only=True)
class PackFile:
    """Versioned, ordered list of pack entries."""

    version: int = PACK_FILE_VERSION
    entries: list[PackEntry] = field(default_factory=list)

    def read(self, payload: bytes, entry: PackEntry) -> bytes:
        """Return the bytes of entry from the bundled payload."""
        end = entry.pos + entry.size
        if entry.pos < 0 or end > len(payload):
            raise FormatError(
                f"entry {entry.path} [{entry.pos}, {end}) exceeds payload of {len(payload)} bytes"
            )
        return payload[entry.pos : end]

    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]


def write(fp: BinaryIO, pack: PackFile) -> None:
    """Serialize pack into the binary stream fp."""
    fp.write(_HEADER.pack(PACK_FILE_MAGIC, pack.version, len(pack.entries)))
    for entry in pack.entries:
        try:
            path = entry.path.encode("utf-8")
            hash_ = entry.hash.encode("ascii")
        except UnicodeEncodeError as exc:
            raise FormatError(f"invalid encoding for entry {entry.path!r}: {exc}") from exc
        if len(path) > 0xFFFF:
            raise FormatError(f"path too long: {entry.path[:64]}...")
        if len(hash_) > 0xFF:
            raise FormatError(f"hash too long for {entry.path}")
        if entry.pos < 0 or entry.size < 0:
            raise FormatError(f"negative pos or size for {entry.path}")
        fp.write(_PATH_LEN.pack(len(path)))
        fp.write(path)
        fp.write(_HASH_LEN.pack(len(hash_)))
        fp.write(hash_)
        fp.write(_POS_SIZE.pack(entry.pos, entry.size))


def _read_exactly(fp: BinaryIO, size: int, what: str) -> bytes:
    data = fp.read(size)
    if len(data) != size:
        raise FormatError(f"truncated pack file while reading {what}")
    return data


def parse(fp: BinaryIO) -> PackFile:
    """
    Parse a pack file from the binary stream fp.

    Raises:
        FormatError: bad magic, unsupported version, or truncated stream.
    """
    magic, version, count = _HEADER.unpack(_read_exactly(fp, _HEADER.size, "header"))
    if magic != PACK_FILE_MAGIC:
        raise FormatError(f"not a pack file (magic {magic!r})")
    if version != PACK_FILE_VERSION:
        raise FormatError(f"Unsupported pack file version: {version}")

    entries: list[PackEntry] = []
    for index in range(count):
        what = f"entry #{index}"
        (path_len,) = _PATH_LEN.unpack(_read_exactly(fp, _PATH_LEN.size, what))
        raw_path = _read_exactly(fp, path_len, what)
        (hash_len,) = _HASH_LEN.unpack(_read_exactly(fp, _HASH_LEN.size, what))
        raw_hash = _read_exactly(fp, hash_len, what)
        pos, size = _POS_SIZE.unpack(_read_exactly(fp, _POS_SIZE.size, what))
        try:
            path = raw_path.decode("utf-8")
            hash_ = raw_hash.decode("ascii")
        except UnicodeDecodeError as exc:
            raise FormatError(f"invalid encoding in {what}: {exc}") from exc
        entries.append(PackEntry(path=path, hash=hash_, pos=pos, size=size))
    return PackFile(version=version, entries=entries)


def encode(entries: Sequence[PackEntry], version: int = PACK_FILE_VERSION) -> bytes:
    """Encode entries into the pack-file byte representation."""
    buf = io.BytesIO()
    write(buf, PackFile(version=version, entries=list(entries)))
    return buf.getvalue()


def decode(data: bytes) -> PackFile:
    """Decode bytes produced by encode(), rejecting trailing garbage."""
    buf = io.BytesIO(data)
    pack = parse(buf)
    if buf.tell() != len(data):
        raise FormatError(f"{len(data) - buf.tell()} trailing bytes after pack file")
    return pack


def build(
    files: Iterable[tuple[str, bytes]],
    hash_type: str = DEFAULT_HASH_TYPE,
) -> tuple[PackFile, bytes]:
    """
    Bundle (path, content) pairs into a pack and its payload.

    Contents are laid out back to back in iteration order.
    """
    entries: list[PackEntry] = []
    payload = io.BytesIO()
    for path, content in files:
        entries.append(
            PackEntry(
                path=path,
                hash=compute_hash(content, hash_type),
                pos=payload.tell(),
                size=len(content),
            )
        )
        payload.write(content)
    return PackFile(entries=entries), payload.getvalue()
