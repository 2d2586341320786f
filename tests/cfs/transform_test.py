"""Tests for the cfs.transform module."""

import zlib

import pytest

from cfs.errors import TransformError
from cfs.transform import DEFAULT_CONTENT_ATTRIBUTE, ContentAttribute, decode, encode

_KEY = bytes(range(16))
_IV = bytes(range(16, 32))
_DATA = b"the quick brown fox jumps over the lazy dog" * 10


class TestDecode:
    """decode() undoes encode() for every attribute combination."""

    def test_default_is_identity(self):
        assert DEFAULT_CONTENT_ATTRIBUTE == ContentAttribute.NONE
        assert decode(_DATA, DEFAULT_CONTENT_ATTRIBUTE) == _DATA

    @pytest.mark.parametrize(
        "attr",
        [
            ContentAttribute.COMPRESSED,
            ContentAttribute.CRYPTED,
            ContentAttribute.COMPRESSED | ContentAttribute.CRYPTED,
        ],
    )
    def test_reverses_encode(self, attr: ContentAttribute):
        raw = encode(_DATA, attr, key=_KEY, iv=_IV)
        assert raw != _DATA
        assert decode(raw, attr, key=_KEY, iv=_IV) == _DATA

    def test_compressed_is_zlib(self):
        assert decode(zlib.compress(b"abc"), ContentAttribute.COMPRESSED) == b"abc"

    def test_accepts_plain_int(self):
        raw = encode(_DATA, ContentAttribute.COMPRESSED)
        assert decode(raw, 1) == _DATA

    def test_empty_content(self):
        attr = ContentAttribute.COMPRESSED | ContentAttribute.CRYPTED
        raw = encode(b"", attr, key=_KEY, iv=_IV)
        assert decode(raw, attr, key=_KEY, iv=_IV) == b""


class TestDecodeErrors:
    """Failures while decoding raise TransformError."""

    def test_crypted_without_key(self):
        raw = encode(_DATA, ContentAttribute.CRYPTED, key=_KEY, iv=_IV)
        with pytest.raises(TransformError, match="requires an encryption key"):
            decode(raw, ContentAttribute.CRYPTED)

    def test_invalid_key_size(self):
        with pytest.raises(TransformError, match="invalid encryption key"):
            decode(b"x" * 16, ContentAttribute.CRYPTED, key=b"short", iv=_IV)

    def test_wrong_key(self):
        raw = encode(_DATA, ContentAttribute.CRYPTED, key=_KEY, iv=_IV)
        other = bytes(reversed(_KEY))
        try:
            result = decode(raw, ContentAttribute.CRYPTED, key=other, iv=_IV)
        except TransformError:
            return
        # PKCS7 padding may validate by chance; content never matches
        assert result != _DATA

    def test_not_block_aligned(self):
        with pytest.raises(TransformError, match="cannot decrypt"):
            decode(b"abc", ContentAttribute.CRYPTED, key=_KEY, iv=_IV)

    def test_corrupt_compressed(self):
        with pytest.raises(TransformError, match="cannot decompress"):
            decode(b"not zlib", ContentAttribute.COMPRESSED)

    def test_unknown_attribute(self):
        with pytest.raises(TransformError, match="unsupported content attribute: 64"):
            decode(_DATA, ContentAttribute(64))
