"""Fetch blobs by hash through the local cache."""

from __future__ import annotations

import logging
from pathlib import Path

from .cache import LocalCache
from .config import Config
from .errors import FetchError, InvalidHashError
from .hashes import compute_hash, is_hash
from .remote import RemoteStore
from .transform import ContentAttribute, decode

log = logging.getLogger("cfs/fetcher")


class Fetcher:
    """
    Return the transformed bytes of a blob given its hash.

    The local cache is consulted first. On a miss we download the raw
    bytes, store them in the cache, and then transform them. Caching raw
    rather than transformed bytes keeps the cache purely content-addressed.
    """

    def __init__(self, config: Config, remote: RemoteStore | None = None) -> None:
        self.config = config
        self.remote = remote if remote is not None else RemoteStore(config.base_url)
        self.cache = LocalCache(config.cache_dir)

    def fetch(
        self,
        hash_: str,
        attr: ContentAttribute,
        *,
        hash_type: str | None = None,
    ) -> bytes:
        """
        Return the content for hash_ transformed according to attr.

        Raises:
            InvalidHashError: if hash_ is not a hash.
            FetchError: if the blob is not cached and cannot be downloaded.
            TransformError: if the raw bytes cannot be decoded.
            OSError: if the cache cannot be read or written.
        """
        raw = self._raw(hash_, hash_type or self.config.hash_type)
        return decode(
            raw,
            attr,
            key=self.config.encrypt_key,
            iv=self.config.encrypt_iv,
        )

    def ensure_cached(self, hash_: str, *, hash_type: str | None = None) -> Path:
        """Make sure the raw blob for hash_ is cached and return its path."""
        hash_type = hash_type or self.config.hash_type
        self._check_hash(hash_, hash_type)
        if not self.cache.exists(hash_):
            self._download(hash_, hash_type)
        return self.cache.path(hash_)

    def _raw(self, hash_: str, hash_type: str) -> bytes:
        self._check_hash(hash_, hash_type)
        if self.cache.exists(hash_):
            log.debug("fetching %s... cached", hash_)
            return self.cache.read(hash_)
        return self._download(hash_, hash_type)

    def _check_hash(self, hash_: str, hash_type: str) -> None:
        if not is_hash(hash_, hash_type):
            raise InvalidHashError(hash_)

    def _download(self, hash_: str, hash_type: str) -> bytes:
        url = self.remote.data_url(hash_)
        log.debug("fetching %s... start", hash_)
        data = self.remote.get(url)
        if self.config.verify:
            got = compute_hash(data, hash_type)
            if got != hash_:
                raise FetchError(
                    f"{hash_type} mismatch for {url}: expected {hash_}, got {got}",
                    url=url,
                )
        self.cache.write(hash_, data)
        log.debug("fetching %s... ok", hash_)
        return data
