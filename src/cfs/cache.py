"""Local on-disk cache of raw blobs keyed by hash."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from tempfile import TemporaryDirectory

log = logging.getLogger("cfs/cache")


def atomic_write(dest_path: Path, data: bytes) -> None:
    """
    Write data to dest_path so that readers either see the previous
    content or the complete new content, never a partial file.
    """
    # Operate inside a temporary directory in the destination directory so
    # `os.replace()` is atomic and we avoid cross-filesystem moves.
    with TemporaryDirectory(dir=dest_path.parent, prefix=".tmp-") as tmp_dir:
        tmp_file = Path(tmp_dir) / dest_path.name
        tmp_file.write_bytes(data)
        os.replace(tmp_file, dest_path)


class LocalCache:
    """
    Flat directory of raw (pre-transform) blobs named by their hash.

    Entries are created lazily and never invalidated. Concurrent writers of
    the same hash are safe because writes are atomic and the content for a
    given hash is the same by construction.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)

    def path(self, hash_: str) -> Path:
        return self.cache_dir / hash_

    def exists(self, hash_: str) -> bool:
        return self.path(hash_).is_file()

    def read(self, hash_: str) -> bytes:
        return self.path(hash_).read_bytes()

    def write(self, hash_: str, data: bytes) -> Path:
        """Atomically store data under hash_ and return its path."""
        path = self.path(hash_)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        atomic_write(path, data)
        log.debug("cached %s (%d bytes)", hash_, len(data))
        return path

    def touch(self, hash_: str) -> Path:
        """Create an empty entry for hash_ unless it already exists."""
        path = self.path(hash_)
        if not path.exists():
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            path.touch()
        return path
