"""Bulk distribution operations over a bucket."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePosixPath
from typing import Final

import requests

from .bucket import Bucket, Content, parse_bucket
from .cache import atomic_write
from .config import Config
from .errors import CFSError
from .fetcher import Fetcher
from .remote import RemoteStore
from .resolver import TagResolver
from .transform import DEFAULT_CONTENT_ATTRIBUTE

log = logging.getLogger("cfs/downloader")

EXISTS_WORKERS: Final[int] = 32
FETCH_WORKERS: Final[int] = 8
RETRY_LIMIT: Final[int] = 3


class Downloader:
    """
    Drive bulk operations over a bucket.

    Three regimes coexist:

    - exists_all checks every entry with a fixed pool of 32 threads and
      never fails because of a single entry;
    - fetch_all populates the cache with 8 threads, retrying each entry
      and cancelling the remaining work on the first unrecoverable error;
    - sync materializes files sequentially and stops at the first error.
    """

    def __init__(
        self,
        config: Config,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.remote = RemoteStore(config.base_url, session=session)
        self.resolver = TagResolver(self.remote, hash_type=config.hash_type)
        self.fetcher = Fetcher(config, remote=self.remote)

    def resolve(self, location: str) -> str:
        return self.resolver.resolve(location)

    def load_bucket(self, location: str) -> Bucket:
        """
        Load the bucket named by location (a tag or a manifest hash).

        Raises:
            ResolutionError: if location is a tag that cannot be resolved.
            FetchError: if the manifest blob cannot be fetched.
            ParseError: if the manifest is malformed.
        """
        hash_ = self.resolver.resolve(location)
        tag = "" if hash_ == location else location
        log.info("loading bucket %s... start", hash_)
        body = self.fetcher.fetch(hash_, DEFAULT_CONTENT_ATTRIBUTE)
        bucket = parse_bucket(body, tag=tag)
        log.info("loading bucket %s... ok (%d entries)", hash_, len(bucket))
        return bucket

    def exists_all(self, bucket: Bucket) -> dict[str, bool]:
        """
        Return whether the raw blob of every entry exists on the remote.

        Uses HEAD requests against the data location, ignoring the local
        cache and the content attributes. Every entry is queued up front;
        only the number of requests in flight is bounded by the pool.
        """
        result: dict[str, bool] = {}
        mutex = threading.Lock()

        def verify(content: Content) -> None:
            if self.config.verbose:
                log.info("verifying %s (%s)", content.path, content.hash)
            try:
                exists = self.remote.head(self.remote.data_url(content.hash)) == 200
            except requests.RequestException as exc:
                log.debug("verifying %s... failure: %s", content.path, exc)
                exists = False
            with mutex:
                result[content.path] = exists

        with ThreadPoolExecutor(max_workers=EXISTS_WORKERS) as pool:
            # Consume the iterator so worker exceptions surface here
            list(pool.map(verify, bucket))
        return result

    def sync(
        self,
        bucket: Bucket,
        target_dir: str | Path,
        *,
        on_done: Callable[[Content], None] | None = None,
    ) -> None:
        """
        Write every entry of bucket below target_dir.

        Entries are processed one at a time and each file is written
        atomically. The first error aborts the operation; files already
        written are left in place.

        on_done, if given, is called after each entry is written.
        """
        target = Path(target_dir)
        for content in bucket:
            dest = _destination(target, content.path)
            if self.config.verbose:
                log.info("downloading %s", content.path)
            # The remote never stores empty blobs
            data = b""
            if content.size > 0:
                data = self.fetcher.fetch(content.hash, content.attr, hash_type=bucket.hash_type)
            dest.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(dest, data)
            if on_done is not None:
                on_done(content)

    def fetch_all(
        self,
        bucket: Bucket,
        *,
        on_done: Callable[[Content], None] | None = None,
    ) -> None:
        """
        Populate the local cache with the raw blob of every entry.

        Raises the first unrecoverable error after all in-flight work has
        finished; work that had not started yet is skipped.

        on_done, if given, is called from the worker thread after each
        entry is cached.
        """
        cancelled = threading.Event()
        errors: list[Exception] = []
        errors_lock = threading.Lock()

        def task(content: Content) -> None:
            if cancelled.is_set():
                return
            try:
                self._fetch_with_retry(content, bucket.hash_type)
            except Exception as exc:
                with errors_lock:
                    errors.append(exc)
                cancelled.set()
                return
            if on_done is not None:
                on_done(content)

        with ThreadPoolExecutor(max_workers=FETCH_WORKERS) as pool:
            list(pool.map(task, bucket))

        if errors:
            raise errors[0]

    def _fetch_with_retry(self, content: Content, hash_type: str) -> None:
        if self.config.verbose:
            log.info("downloading %s", content.path)
        if content.size == 0:
            self.fetcher.cache.touch(content.hash)
            return
        retry_count = 0
        while True:
            try:
                self.fetcher.ensure_cached(content.hash, hash_type=hash_type)
                return
            except (CFSError, OSError) as exc:
                if retry_count >= RETRY_LIMIT:
                    log.error("downloading %s... failure: %s", content.path, exc)
                    raise
                retry_count += 1
                log.warning("retry for %s, retry count %d", exc, retry_count)


def _destination(target: Path, path: str) -> Path:
    """Map a manifest path below target, refusing paths that escape it."""
    rel = PurePosixPath(path)
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        raise CFSError(f"refusing to write outside the target directory: {path}")
    return target.joinpath(*rel.parts)
