"""Load icon containers into registered :class:`IconSet` instances."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .containers.icns import ICNS_MAGIC, read_icns
from .containers.ico import read_ico
from .core.errors import FormatError
from .data.image_cache import icon_cache_key
from .data.image_codec import Bitmap, ImageCodec
from .data.streams import Source, open_source
from .icon_set import IconSet, Scaler
from .registry import IconSetRegistry, default_registry

ICO_MAGIC = b"\x00\x00\x01\x00"

FORMAT_ICNS = "icns"
FORMAT_ICO = "ico"

_READERS: Dict[str, Callable[..., List[Bitmap]]] = {
    FORMAT_ICNS: read_icns,
    FORMAT_ICO: read_ico,
}

_logger = logging.getLogger(__name__)


def detect_format(header: bytes) -> Optional[str]:
    """Identify a container from its leading bytes."""

    if header[:4] == ICNS_MAGIC:
        return FORMAT_ICNS
    if header[:4] == ICO_MAGIC:
        return FORMAT_ICO
    return None


def format_for_path(path: "str | os.PathLike[str]") -> Optional[str]:
    """Identify a container from its file extension."""

    suffix = Path(os.fspath(path)).suffix.lower().lstrip(".")
    return suffix if suffix in _READERS else None


def _build_icon_set(
    name: str,
    images: List[Bitmap],
    registry: Optional[IconSetRegistry],
    scaler: Optional[Scaler],
) -> Optional[IconSet]:
    if not images:
        _logger.info(
            "Container held no usable images",
            extra={"component": "loader", "icon_set": name},
        )
        return None
    registry = registry if registry is not None else default_registry()
    for bitmap in images:
        registry.image_cache.put(icon_cache_key(name, bitmap.width, bitmap.height), bitmap)
    return IconSet(name, images, registry=registry, scaler=scaler)


def _load(
    fmt: str,
    name: str,
    source: Source,
    registry: Optional[IconSetRegistry],
    codec: Optional[ImageCodec],
    scaler: Optional[Scaler],
) -> Optional[IconSet]:
    with open_source(source) as stream:
        images = _READERS[fmt](stream, codec=codec)
    return _build_icon_set(name, images, registry, scaler)


def load_icns(
    name: str,
    source: Source,
    *,
    registry: Optional[IconSetRegistry] = None,
    codec: Optional[ImageCodec] = None,
    scaler: Optional[Scaler] = None,
) -> Optional[IconSet]:
    """Load a Mac OS X icon set file (``.icns``).

    ``name`` should be unique, as the new set replaces any set already
    registered under it. Returns ``None`` when the container holds no
    decodable image.
    """

    return _load(FORMAT_ICNS, name, source, registry, codec, scaler)


def load_ico(
    name: str,
    source: Source,
    *,
    registry: Optional[IconSetRegistry] = None,
    codec: Optional[ImageCodec] = None,
    scaler: Optional[Scaler] = None,
) -> Optional[IconSet]:
    """Load a Windows icon file (``.ico``) whose entries embed PNG images.

    ``name`` should be unique, as the new set replaces any set already
    registered under it. Returns ``None`` when the container holds no
    decodable image.
    """

    return _load(FORMAT_ICO, name, source, registry, codec, scaler)


def load_icon_set(
    name: str,
    source: Source,
    *,
    fmt: Optional[str] = None,
    registry: Optional[IconSetRegistry] = None,
    codec: Optional[ImageCodec] = None,
    scaler: Optional[Scaler] = None,
) -> Optional[IconSet]:
    """Load either container format.

    The format is taken from ``fmt`` when given, otherwise sniffed from the
    leading bytes, otherwise derived from the file extension of ``source``.
    """

    if fmt is not None:
        fmt = fmt.lower().lstrip(".")
        if fmt not in _READERS:
            raise FormatError(f"Unsupported icon container format: {fmt}")
        return _load(fmt, name, source, registry, codec, scaler)

    with open_source(source) as stream:
        data = stream.read()
    detected = detect_format(data)
    if detected is None and isinstance(source, (str, os.PathLike)):
        detected = format_for_path(source)
    if detected is None:
        raise FormatError("Unrecognised icon container")
    return _load(detected, name, io.BytesIO(data), registry, codec, scaler)


def read_bitmaps(source: Source, *, fmt: str, codec: Optional[ImageCodec] = None) -> List[Bitmap]:
    """Decode ``source`` without building or registering an icon set."""

    fmt = fmt.lower().lstrip(".")
    if fmt not in _READERS:
        raise FormatError(f"Unsupported icon container format: {fmt}")
    with open_source(source) as stream:
        return _READERS[fmt](stream, codec=codec)


__all__ = [
    "FORMAT_ICNS",
    "FORMAT_ICO",
    "ICO_MAGIC",
    "detect_format",
    "format_for_path",
    "load_icns",
    "load_ico",
    "load_icon_set",
    "read_bitmaps",
]
