"""Hash format checks shared by every cfs component."""

from __future__ import annotations

import hashlib
import re
from typing import Final

DEFAULT_HASH_TYPE: Final[str] = "md5"

# Number of hex digits produced by each supported algorithm.
HASH_HEX_LENGTHS: Final[dict[str, int]] = {
    "md5": 32,
    "sha1": 40,
    "sha256": 64,
}

_PATTERNS = {name: re.compile(rf"[0-9a-f]{{{size}}}") for name, size in HASH_HEX_LENGTHS.items()}


def _pattern(hash_type: str) -> re.Pattern[str]:
    try:
        return _PATTERNS[hash_type]
    except KeyError as exc:
        raise ValueError(f"Unsupported hash type: {hash_type}") from exc


def is_hash(value: str, hash_type: str = DEFAULT_HASH_TYPE) -> bool:
    """
    Return whether value is a hash for the given algorithm.

    Only lowercase hex strings of the exact algorithm length are hashes;
    everything else (including the empty string) is a tag.
    """
    return _pattern(hash_type).fullmatch(value) is not None


def compute_hash(data: bytes, hash_type: str = DEFAULT_HASH_TYPE) -> str:
    """Compute the lowercase hex digest of data using hash_type."""
    _pattern(hash_type)
    return hashlib.new(hash_type, data).hexdigest()
