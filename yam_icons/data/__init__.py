"""Data layer utilities for decoding, caching and streaming icon images."""

from . import image_codec
from .image_cache import ICON_KEY_PREFIX, ImageCache, icon_cache_key
from .image_codec import Bitmap, ImageCodec, default_codec
from .streams import open_source, read_fully, skip_fully

__all__ = [
    "Bitmap",
    "ImageCodec",
    "default_codec",
    "ImageCache",
    "ICON_KEY_PREFIX",
    "icon_cache_key",
    "open_source",
    "read_fully",
    "skip_fully",
    "image_codec",
]
