"""Multi-resolution icon sets loaded from ICNS and ICO containers."""

from __future__ import annotations

from importlib import metadata as _importlib_metadata


def _resolve_distribution_version() -> str:
    """Best-effort retrieval of the installed package version."""

    candidates = ("yam-icons", "yam_icons")
    for name in candidates:
        try:
            return _importlib_metadata.version(name)
        except _importlib_metadata.PackageNotFoundError:  # pragma: no cover - metadata lookup
            continue
    return "0.0.0"


__version__ = _resolve_distribution_version()


def get_version() -> str:
    """Return the discovered package version."""

    return __version__


from .core.errors import DecodeError, EncodeError, FormatError, IconSetError, TruncatedStreamError  # noqa: E402
from .data.image_cache import ImageCache, icon_cache_key  # noqa: E402
from .data.image_codec import Bitmap, ImageCodec  # noqa: E402
from .containers.icns import encode_icns, read_icns, write_icns  # noqa: E402
from .containers.ico import read_ico  # noqa: E402
from .icon_set import IconSet, select_best_fit  # noqa: E402
from .loader import detect_format, load_icns, load_ico, load_icon_set  # noqa: E402
from .registry import IconSetRegistry, default_registry, get  # noqa: E402

__all__ = [
    "Bitmap",
    "DecodeError",
    "EncodeError",
    "FormatError",
    "IconSet",
    "IconSetError",
    "IconSetRegistry",
    "ImageCache",
    "ImageCodec",
    "TruncatedStreamError",
    "__version__",
    "default_registry",
    "detect_format",
    "encode_icns",
    "get",
    "get_version",
    "icon_cache_key",
    "load_icns",
    "load_ico",
    "load_icon_set",
    "read_icns",
    "read_ico",
    "select_best_fit",
    "write_icns",
]
