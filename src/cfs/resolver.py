"""Resolve tags to bucket manifest hashes."""

from __future__ import annotations

import logging

from .errors import FetchError, ResolutionError
from .hashes import DEFAULT_HASH_TYPE, is_hash
from .remote import RemoteStore

log = logging.getLogger("cfs/resolver")


class TagResolver:
    """Map a symbolic tag to the immutable hash of a bucket manifest."""

    def __init__(self, remote: RemoteStore, hash_type: str = DEFAULT_HASH_TYPE) -> None:
        self.remote = remote
        self.hash_type = hash_type

    def fetch_tag(self, tag: str) -> bytes:
        """Return the raw body stored under `tag/<tag>`."""
        return self.remote.get(self.remote.tag_url(tag))

    def resolve(self, location: str) -> str:
        """
        Return location itself when it is a hash, otherwise the hash it names.

        Raises:
            ResolutionError: if the lookup fails or does not yield a hash.
        """
        if is_hash(location, self.hash_type):
            return location
        if not location:
            raise ResolutionError("cannot resolve an empty tag")
        log.info("resolving %s... start", location)
        try:
            body = self.fetch_tag(location)
        except FetchError as exc:
            log.warning("resolving %s... failure: %s", location, exc)
            raise ResolutionError(f"cannot resolve tag {location}: {exc}") from exc
        # The body is the hash as is; whitespace is not trimmed
        value = body.decode("utf-8", errors="replace")
        if not is_hash(value, self.hash_type):
            log.warning("resolving %s... failure: not a hash", location)
            raise ResolutionError(f"{value!r} is not hash (resolving tag {location})")
        log.info("resolving %s... ok: %s", location, value)
        return value
