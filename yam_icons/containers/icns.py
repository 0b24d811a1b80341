"""Reader and writer for Apple icon containers (``.icns``).

The container is an 8 byte header (``icns`` magic, big-endian total length)
followed by chunks. Every chunk starts with a big-endian type tag and a
big-endian length that includes the 8 byte chunk header. Only chunks whose
tag denotes an embedded PNG/JPEG 2000 image are decoded; anything else is
skipped without interpretation.

See https://en.wikipedia.org/wiki/Apple_Icon_Image for the tag table.
"""

from __future__ import annotations

import logging
from struct import Struct
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple

from ..core.errors import DecodeError, FormatError
from ..data.image_codec import Bitmap, ImageCodec, default_codec
from ..data.streams import read_fully, skip_fully

ICNS_MAGIC = b"icns"
HEADER = Struct(">4sI")

# Tags holding an embedded image, mapped to their nominal square size.
IMAGE_TYPES: Dict[bytes, int] = {
    b"icp4": 16,
    b"icp5": 32,
    b"icp6": 64,
    b"ic07": 128,
    b"ic08": 256,
    b"ic09": 512,
    b"ic10": 1024,
    b"ic11": 32,
    b"ic12": 64,
    b"ic13": 256,
    b"ic14": 512,
}

# Tags used when writing, one per canonical size.
WRITE_TYPES: Dict[int, bytes] = {
    16: b"icp4",
    32: b"icp5",
    64: b"icp6",
    128: b"ic07",
    256: b"ic08",
    512: b"ic09",
    1024: b"ic10",
}

CANONICAL_SIZES: Tuple[int, ...] = tuple(sorted(WRITE_TYPES))

_logger = logging.getLogger(__name__)


def _decode_into(
    codec: ImageCodec, data: bytes, images: List[Bitmap], *, tag: bytes
) -> None:
    try:
        bitmap = codec.decode(data)
    except DecodeError as exc:
        _logger.debug(
            "Skipping undecodable icon chunk",
            extra={"component": "icns", "tag": tag.decode("latin-1"), "error": str(exc)},
        )
        return
    images.append(bitmap)


def read_icns(stream: BinaryIO, *, codec: Optional[ImageCodec] = None) -> List[Bitmap]:
    """Decode every embedded image of an ICNS stream, in file order.

    Raises :class:`FormatError` for a bad magic tag or chunk length and
    :class:`TruncatedStreamError` when the stream ends early. Chunks whose
    payload cannot be decoded are dropped.
    """

    codec = codec if codec is not None else default_codec()
    magic, end = HEADER.unpack(read_fully(stream, HEADER.size))
    if magic != ICNS_MAGIC:
        raise FormatError("Invalid ICNS")
    images: List[Bitmap] = []
    pos = HEADER.size
    while pos < end:
        tag, length = HEADER.unpack(read_fully(stream, HEADER.size))
        if length < HEADER.size:
            raise FormatError(f"Invalid ICNS chunk length {length} at offset {pos}")
        pos += length
        payload_length = length - HEADER.size
        if tag in IMAGE_TYPES:
            _decode_into(codec, read_fully(stream, payload_length), images, tag=tag)
        else:
            skip_fully(stream, payload_length)
    return images


def _chunk_type(bitmap: Bitmap) -> Optional[bytes]:
    # Only square icons at the canonical sizes are written.
    if bitmap.width != bitmap.height:
        return None
    return WRITE_TYPES.get(bitmap.width)


def encode_icns(
    bitmaps: Iterable[Bitmap], *, codec: Optional[ImageCodec] = None, dpi: Optional[int] = None
) -> bytes:
    """Return an ICNS container holding the writable members of ``bitmaps``.

    Bitmaps are written in the order given. Raises :class:`EncodeError` if
    any PNG encoding fails.
    """

    codec = codec if codec is not None else default_codec()
    chunks: List[Tuple[bytes, bytes]] = []
    size = HEADER.size
    for bitmap in bitmaps:
        tag = _chunk_type(bitmap)
        if tag is None:
            continue
        data = codec.encode(bitmap, dpi)
        chunks.append((tag, data))
        size += HEADER.size + len(data)
    parts = [HEADER.pack(ICNS_MAGIC, size)]
    for tag, data in chunks:
        parts.append(HEADER.pack(tag, HEADER.size + len(data)))
        parts.append(data)
    return b"".join(parts)


def write_icns(
    bitmaps: Iterable[Bitmap],
    out: BinaryIO,
    *,
    codec: Optional[ImageCodec] = None,
    dpi: Optional[int] = None,
) -> int:
    """Write :func:`encode_icns` output to ``out`` and return its length.

    Nothing is written when encoding fails.
    """

    data = encode_icns(bitmaps, codec=codec, dpi=dpi)
    out.write(data)
    return len(data)
