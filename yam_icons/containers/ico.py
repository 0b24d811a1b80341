"""Reader for Windows icon containers (``.ico``).

Only containers embedding PNG images are supported. Entries holding legacy
headerless bitmaps fail to decode and are skipped like any other undecodable
entry.

See https://en.wikipedia.org/wiki/ICO_(file_format) for the layout.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from struct import Struct
from typing import BinaryIO, List, Optional

from ..core.errors import DecodeError, FormatError
from ..data.image_codec import Bitmap, ImageCodec, default_codec
from ..data.streams import read_fully, skip_fully

HEADER = Struct("<HHH")
DIRECTORY_ENTRY = Struct("<BBBBHHII")

ICO_TYPE_ICON = 1
ICO_TYPE_CURSOR = 2

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """Location of one embedded image. Declared sizes are not trusted."""

    index: int
    length: int
    offset: int


def read_directory(stream: BinaryIO) -> List[DirectoryEntry]:
    """Read the header and directory, returning entries in file-offset order."""

    reserved, kind, count = HEADER.unpack(read_fully(stream, HEADER.size))
    if reserved != 0 or kind != ICO_TYPE_ICON:
        raise FormatError("Invalid ICO")
    table = read_fully(stream, count * DIRECTORY_ENTRY.size)
    entries = []
    for index in range(count):
        *_declared, length, offset = DIRECTORY_ENTRY.unpack_from(table, index * DIRECTORY_ENTRY.size)
        entries.append(DirectoryEntry(index=index, length=length, offset=offset))
    # Entries are not guaranteed to be stored in file order.
    entries.sort(key=lambda entry: entry.offset)
    return entries


def read_ico(stream: BinaryIO, *, codec: Optional[ImageCodec] = None) -> List[Bitmap]:
    """Decode every embedded image of an ICO stream, in file-offset order.

    Raises :class:`FormatError` for a bad header or overlapping entries and
    :class:`TruncatedStreamError` when the stream ends early.
    """

    codec = codec if codec is not None else default_codec()
    entries = read_directory(stream)
    pos = HEADER.size + len(entries) * DIRECTORY_ENTRY.size
    images: List[Bitmap] = []
    for entry in entries:
        if entry.offset < pos:
            raise FormatError(
                f"ICO entry {entry.index} at offset {entry.offset} overlaps data ending at {pos}"
            )
        if entry.offset > pos:
            skip_fully(stream, entry.offset - pos)
            pos = entry.offset
        data = read_fully(stream, entry.length)
        pos += entry.length
        try:
            images.append(codec.decode(data))
        except DecodeError as exc:
            _logger.debug(
                "Skipping undecodable icon entry",
                extra={"component": "ico", "entry": entry.index, "error": str(exc)},
            )
    return images
