"""Tests for the cfs.resolver module."""

import pytest

from cfs.errors import ResolutionError
from cfs.remote import RemoteStore
from cfs.resolver import TagResolver

_HASH = "0123456789abcdef0123456789abcdef"


def _resolver(store) -> TagResolver:
    return TagResolver(RemoteStore(store.base_url, session=store.session))


class TestTagResolver:
    """Tags resolve through tag/<name>, hashes resolve to themselves."""

    def test_hash_needs_no_network(self, store):
        assert _resolver(store).resolve(_HASH) == _HASH
        store.session.get.assert_not_called()

    def test_tag_lookup(self, store):
        store.put_tag("latest", _HASH)
        assert _resolver(store).resolve("latest") == _HASH
        store.session.get.assert_called_once_with(f"{store.base_url}tag/latest")

    def test_fetch_tag_returns_raw_body(self, store):
        store.put_tag("latest", f"{_HASH}\n")
        assert _resolver(store).fetch_tag("latest") == f"{_HASH}\n".encode()

    def test_sha256_resolver(self, store):
        sha = "ab" * 32
        store.put_tag("latest", sha)
        resolver = TagResolver(RemoteStore(store.base_url, session=store.session), "sha256")
        assert resolver.resolve("latest") == sha


class TestTagResolverErrors:
    """Resolution failures raise ResolutionError."""

    def test_value_is_not_a_hash(self, store):
        store.put_tag("latest", "another-tag")
        with pytest.raises(ResolutionError, match="'another-tag' is not hash"):
            _resolver(store).resolve("latest")

    @pytest.mark.parametrize("body", [f"{_HASH}\n", f" {_HASH}", f"{_HASH}\r\n"])
    def test_surrounding_whitespace_is_rejected(self, store, body: str):
        store.put_tag("latest", body)
        with pytest.raises(ResolutionError, match="is not hash"):
            _resolver(store).resolve("latest")

    def test_missing_tag(self, store):
        with pytest.raises(ResolutionError, match="cannot resolve tag missing"):
            _resolver(store).resolve("missing")

    def test_empty_tag(self, store):
        with pytest.raises(ResolutionError, match="empty tag"):
            _resolver(store).resolve("")
        store.session.get.assert_not_called()

    def test_no_retry(self, store):
        store.fail(f"{store.base_url}tag/latest", 500)
        store.put_tag("latest", _HASH)
        with pytest.raises(ResolutionError):
            _resolver(store).resolve("latest")
        assert store.session.get.call_count == 1
