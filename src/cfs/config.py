"""Configuration shared by the fetcher and the downloader."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from .hashes import DEFAULT_HASH_TYPE, HASH_HEX_LENGTHS

if TYPE_CHECKING:
    from .tagfile import TagFile


def cache_dir_or_default(cache_dir: str | Path | None) -> Path:
    """
    Return cache_dir as a Path if not empty. Otherwise return the
    default value for the cache_dir (i.e., `~/.cfs/cache`).
    """
    return Path.home() / ".cfs" / "cache" if cache_dir is None else Path(cache_dir)


def _parse_hex(value: str | None, *, descr: str) -> bytes | None:
    if not value:
        return None
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {descr}: expected a hex string") from exc


def _parse_bool(value: str | None) -> bool:
    return value is not None and value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, kw_only=True)
class Config:
    """
    Immutable configuration for a cfs client.

    Attributes:
        base_url: URL of the remote store containing `tag/` and `data/`.
        cache_dir: directory containing the local blob cache.
        encrypt_key: AES key, required only to decode crypted entries.
        encrypt_iv: AES IV, required only to decode crypted entries.
        verbose: log one line per entry processed (no behavioral effect).
        verify: check that downloaded bytes match their hash before caching.
        hash_type: algorithm used to name blobs.
    """

    base_url: str
    cache_dir: Path
    encrypt_key: bytes | None = None
    encrypt_iv: bytes | None = None
    verbose: bool = False
    verify: bool = False
    hash_type: str = DEFAULT_HASH_TYPE

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.hash_type not in HASH_HEX_LENGTHS:
            raise ValueError(f"Unsupported hash type: {self.hash_type}")
        # Normalize so that relative lookups stay below the base path
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))

    @classmethod
    def from_env(cls, **overrides) -> Config:
        """
        Build a Config from the CFS_* environment variables.

        Keyword arguments whose value is not None take precedence over
        the environment.
        """
        values = {
            "base_url": os.getenv("CFS_BASE_URL", ""),
            "cache_dir": cache_dir_or_default(os.getenv("CFS_CACHE_DIR")),
            "encrypt_key": _parse_hex(os.getenv("CFS_ENCRYPT_KEY"), descr="CFS_ENCRYPT_KEY"),
            "encrypt_iv": _parse_hex(os.getenv("CFS_ENCRYPT_IV"), descr="CFS_ENCRYPT_IV"),
            "verify": _parse_bool(os.getenv("CFS_VERIFY")),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def with_tag_file(self, tag_file: TagFile) -> Config:
        """Return a copy using the encryption key and IV of the given tag file."""
        return replace(
            self,
            encrypt_key=tag_file.key_bytes() or self.encrypt_key,
            encrypt_iv=tag_file.iv_bytes() or self.encrypt_iv,
        )
