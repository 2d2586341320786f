"""Tag files: local JSON documents describing a published tag."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO

from dacite import Config as DaciteConfig
from dacite import from_dict
from dacite.exceptions import DaciteError

from .errors import ParseError
from .transform import DEFAULT_CONTENT_ATTRIBUTE, ContentAttribute

# JSON keys use camelCase, our fields use snake_case.
_JSON_KEYS = {
    "name": "name",
    "createdAt": "created_at",
    "encryptKey": "encrypt_key",
    "encryptIv": "encrypt_iv",
    "attr": "attr",
    "hash": "hash",
}


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"createdAt must be a string, got {value!r}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True, kw_only=True)
class TagFile:
    """
    Description of a tag as written by the publisher.

    Attributes:
        name: the tag name.
        created_at: when the tag was published.
        encrypt_key: hex-encoded AES key (may be empty).
        encrypt_iv: hex-encoded AES IV (may be empty).
        attr: default attribute of the tagged bucket.
        hash: hash of the bucket manifest.
    """

    name: str
    created_at: datetime
    encrypt_key: str = ""
    encrypt_iv: str = ""
    attr: ContentAttribute = DEFAULT_CONTENT_ATTRIBUTE
    hash: str = ""

    def key_bytes(self) -> bytes | None:
        return _hex_or_none(self.encrypt_key, "encryptKey")

    def iv_bytes(self) -> bytes | None:
        return _hex_or_none(self.encrypt_iv, "encryptIv")


def _hex_or_none(value: str, descr: str) -> bytes | None:
    if not value:
        return None
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ParseError(f"tag file {descr} is not a hex string") from exc


def tag_file_from_bytes(data: bytes) -> TagFile:
    """Parse a tag file document, raising ParseError if malformed."""
    try:
        raw: Any = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError(f"tag file is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ParseError("tag file must be a JSON object")
    renamed = {_JSON_KEYS.get(key, key): value for key, value in raw.items()}
    try:
        return from_dict(
            TagFile,
            renamed,
            config=DaciteConfig(
                cast=[ContentAttribute],
                type_hooks={datetime: _parse_time},
            ),
        )
    except (DaciteError, ValueError) as exc:
        raise ParseError(f"malformed tag file: {exc}") from exc


def tag_file_from_reader(reader: BinaryIO) -> TagFile:
    return tag_file_from_bytes(reader.read())


def tag_file_from_file(path: str | Path) -> TagFile:
    with open(path, "rb") as filep:
        return tag_file_from_reader(filep)
