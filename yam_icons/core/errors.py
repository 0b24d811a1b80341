"""Exception hierarchy shared by the icon container codecs."""
from __future__ import annotations


class IconSetError(Exception):
    """Base class for every failure raised by :mod:`yam_icons`."""


class FormatError(IconSetError, ValueError):
    """Raised when a container header or record is structurally invalid."""


class TruncatedStreamError(IconSetError, EOFError):
    """Raised when a stream ends before a declared length is satisfied."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Stream ended after {received} of {expected} expected bytes"
        )
        self.expected = expected
        self.received = received


class DecodeError(IconSetError):
    """Raised when a single embedded image cannot be decoded."""


class EncodeError(IconSetError):
    """Raised when a bitmap cannot be encoded while writing a container."""


__all__ = [
    "IconSetError",
    "FormatError",
    "TruncatedStreamError",
    "DecodeError",
    "EncodeError",
]
