"""Errors raised by the cfs library."""

from __future__ import annotations


class CFSError(RuntimeError):
    """Base class for all the errors emitted by cfs."""


class InvalidHashError(CFSError, ValueError):
    """A string was used where a hash was required but it is not a hash."""

    def __init__(self, value: str) -> None:
        super().__init__(f"cannot fetch data, {value!r} is not a hash")
        self.value = value


class ResolutionError(CFSError):
    """A tag did not resolve to a valid hash."""


class FetchError(CFSError):
    """
    Fetching from the remote store failed.

    Attributes:
        url: the URL we were fetching.
        status: the HTTP status code, or None on transport errors.
    """

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class ParseError(CFSError):
    """A bucket manifest or tag file is malformed."""


class FormatError(CFSError):
    """A pack file is malformed or uses an unsupported version."""


class TransformError(CFSError):
    """The content transform could not decode the raw bytes."""


class FilterError(CFSError):
    """The external filter command failed."""
