"""Shared pytest fixtures for cfs tests."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cfs.config import Config
from cfs.downloader import Downloader
from cfs.transform import ContentAttribute, encode

BASE_URL = "https://files.example.com/cfs/"
KEY = bytes(range(32))
IV = bytes(range(16))


def md5(data: bytes) -> str:
    """Compute the MD5 hex digest for test data."""
    return hashlib.md5(data).hexdigest()


def response(status: int, content: bytes = b"") -> MagicMock:
    """Create a mock requests response."""
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    return resp


class FakeStore:
    """
    In-memory remote store behind a mocked requests.Session.

    Blobs live at data/<h[0:2]>/<h[2:]> and tags at tag/<name>, like the
    real remote layout.
    """

    def __init__(self, base_url: str = BASE_URL) -> None:
        self.base_url = base_url
        self.objects: dict[str, bytes] = {}
        self.failures: dict[str, list[Exception | int]] = {}
        self.moved: set[str] = set()
        self.session = MagicMock()
        self.session.get.side_effect = self._get
        self.session.head.side_effect = self._head

    def data_url(self, hash_: str) -> str:
        return f"{self.base_url}data/{hash_[0:2]}/{hash_[2:]}"

    def put_blob(
        self,
        content: bytes,
        attr: ContentAttribute = ContentAttribute.NONE,
    ) -> str:
        """Store content encoded for attr and return the raw blob hash."""
        raw = encode(content, attr, key=KEY, iv=IV)
        hash_ = md5(raw)
        self.objects[self.data_url(hash_)] = raw
        return hash_

    def put_manifest(self, contents: list[dict], hash_type: str = "md5") -> str:
        document = {"v": 0, "hash_type": hash_type, "contents": contents}
        return self.put_blob(json.dumps(document).encode())

    def put_tag(self, name: str, value: str) -> None:
        self.objects[f"{self.base_url}tag/{name}"] = value.encode()

    def fail(self, url: str, *outcomes: Exception | int) -> None:
        """Make the next GETs of url fail with the given errors or statuses."""
        self.failures.setdefault(url, []).extend(outcomes)

    def move(self, url: str) -> None:
        """Serve url behind a 302 redirect, which requests follows only on request."""
        self.moved.add(url)

    def get_count(self, url: str) -> int:
        return sum(1 for call in self.session.get.call_args_list if call.args[0] == url)

    def _get(self, url: str, **kwargs) -> MagicMock:
        pending = self.failures.get(url)
        if pending:
            outcome = pending.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return response(outcome)
        if url not in self.objects:
            return response(404)
        return response(200, self.objects[url])

    def _head(self, url: str, **kwargs) -> MagicMock:
        if url in self.moved and not kwargs.get("allow_redirects", False):
            return response(302)
        pending = self.failures.get(url)
        if pending:
            outcome = pending.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return response(outcome)
        return response(200 if url in self.objects else 404)


@pytest.fixture
def store() -> FakeStore:
    """Return an empty fake remote store."""
    return FakeStore()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Return a Config using a temporary cache directory."""
    return Config(
        base_url=BASE_URL,
        cache_dir=tmp_path / "cache",
        encrypt_key=KEY,
        encrypt_iv=IV,
    )


@pytest.fixture
def downloader(config: Config, store: FakeStore) -> Downloader:
    """Return a Downloader talking to the fake store."""
    return Downloader(config, session=store.session)
