"""Helpers for reading exact byte counts from binary streams."""
from __future__ import annotations

import contextlib
import io
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Union
import urllib.request

from ..core.errors import FormatError, TruncatedStreamError


_SKIP_CHUNK = 64 * 1024
_URL_SCHEMES = ("http://", "https://", "file://")

Source = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]", BinaryIO]


def read_fully(stream: BinaryIO, length: int) -> bytes:
    """Read exactly ``length`` bytes from ``stream``."""

    if length < 0:
        raise FormatError(f"Negative read length: {length}")
    chunks = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            raise TruncatedStreamError(length, length - remaining)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def skip_fully(stream: BinaryIO, length: int) -> None:
    """Discard exactly ``length`` bytes from ``stream``."""

    if length < 0:
        raise FormatError(f"Negative skip length: {length}")
    remaining = length
    while remaining > 0:
        chunk = stream.read(min(remaining, _SKIP_CHUNK))
        if not chunk:
            raise TruncatedStreamError(length, length - remaining)
        remaining -= len(chunk)


def _is_url(value: str) -> bool:
    return value.lower().startswith(_URL_SCHEMES)


@contextlib.contextmanager
def open_source(source: Source) -> Iterator[BinaryIO]:
    """Yield a binary stream for ``source``.

    ``source`` may be raw bytes, an already open binary stream, a filesystem
    path or an ``http(s)://``/``file://`` URL. Streams passed in by the caller
    are left open.
    """

    if isinstance(source, (bytes, bytearray, memoryview)):
        yield io.BytesIO(bytes(source))
        return
    if hasattr(source, "read"):
        yield source  # type: ignore[misc]
        return
    if isinstance(source, str) and _is_url(source):
        with urllib.request.urlopen(source) as response:
            yield response
        return
    path = Path(os.fspath(source))
    with path.open("rb") as fh:
        yield fh
