"""
Reversible per-entry content transform.

Raw blobs are stored on the remote exactly as published. The publisher
compresses (zlib) and then encrypts (AES-CBC, PKCS7 padding) according to
the entry's ContentAttribute; decode() undoes both in reverse order.
"""

from __future__ import annotations

import zlib
from enum import IntFlag

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import TransformError


class ContentAttribute(IntFlag):
    """Flags describing how the raw bytes of an entry were transformed."""

    NONE = 0
    COMPRESSED = 1
    CRYPTED = 2


DEFAULT_CONTENT_ATTRIBUTE = ContentAttribute.NONE
"""Attribute used for entries not mentioning a transform (and manifests)."""

KNOWN_ATTRIBUTES = ContentAttribute.COMPRESSED | ContentAttribute.CRYPTED


def unknown_bits(attr: int) -> int:
    """Return the bits of attr that no transform understands."""
    return int(attr) & ~int(KNOWN_ATTRIBUTES)


def _cipher(key: bytes | None, iv: bytes | None) -> Cipher:
    if not key or not iv:
        raise TransformError("crypted content requires an encryption key and IV")
    try:
        return Cipher(algorithms.AES(key), modes.CBC(iv))
    except ValueError as exc:
        raise TransformError(f"invalid encryption key or IV: {exc}") from exc


def decode(
    data: bytes,
    attr: ContentAttribute,
    *,
    key: bytes | None = None,
    iv: bytes | None = None,
) -> bytes:
    """
    Turn raw fetched bytes into the final content for attr.

    Raises:
        TransformError: if attr is unknown or decryption or decompression fails.
    """
    if unknown_bits(attr):
        raise TransformError(f"unsupported content attribute: {int(attr)}")
    attr = ContentAttribute(attr)
    if attr & ContentAttribute.CRYPTED:
        decryptor = _cipher(key, iv).decryptor()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            padded = decryptor.update(data) + decryptor.finalize()
            data = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise TransformError(f"cannot decrypt content: {exc}") from exc
    if attr & ContentAttribute.COMPRESSED:
        try:
            data = zlib.decompress(data)
        except zlib.error as exc:
            raise TransformError(f"cannot decompress content: {exc}") from exc
    return data


def encode(
    data: bytes,
    attr: ContentAttribute,
    *,
    key: bytes | None = None,
    iv: bytes | None = None,
) -> bytes:
    """Inverse of decode(): produce the raw bytes a publisher uploads."""
    attr = ContentAttribute(attr)
    if attr & ContentAttribute.COMPRESSED:
        data = zlib.compress(data)
    if attr & ContentAttribute.CRYPTED:
        encryptor = _cipher(key, iv).encryptor()
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(data) + padder.finalize()
        data = encryptor.update(padded) + encryptor.finalize()
    return data
