"""Bitmap container and Pillow backed codec used by the icon containers.

Embedded icon images are decoded through :mod:`Pillow` and wrapped in a
:class:`Bitmap`, which couples the decoded :class:`PIL.Image.Image` with a
free-form ``dict`` of metadata in the same way the pixel records elsewhere in
the toolkit do. Pixels can be materialised as a :class:`numpy.ndarray` via
:meth:`Bitmap.to_array` and new bitmaps can be built from arrays with
:meth:`Bitmap.from_array`.

:class:`ImageCodec` groups the three operations the containers need from the
outside world: decoding a byte buffer, encoding a bitmap as PNG with a DPI
hint, and scaling a bitmap to an exact size.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import io
import logging
import threading
from typing import Any, Dict, Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import DecodeError, EncodeError
from ..core.settings_manager import SettingsManager


DEFAULT_PNG_DPI = 72
DEFAULT_RESAMPLE = "LANCZOS"

_logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class Bitmap:
    """A decoded image with known dimensions.

    Bitmaps compare by identity: two instances sharing dimensions and pixels
    are still distinct entries.
    """

    image: Image.Image
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return int(self.image.size[0])

    @property
    def height(self) -> int:
        return int(self.image.size[1])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def to_array(self) -> np.ndarray:
        """Return the pixels as a concrete :class:`numpy.ndarray`."""

        return np.array(self.image)

    @classmethod
    def from_array(cls, array: np.ndarray, **metadata: Any) -> "Bitmap":
        """Build a bitmap from a ``(height, width[, channels])`` array."""

        array = np.asarray(array)
        if array.ndim not in (2, 3) or array.shape[0] <= 0 or array.shape[1] <= 0:
            raise ValueError(f"Cannot build a bitmap from an array of shape {array.shape}")
        return cls(image=Image.fromarray(array), metadata=dict(metadata))

    @classmethod
    def from_image(cls, image: Image.Image, **metadata: Any) -> "Bitmap":
        return cls(image=image, metadata=dict(metadata))

    def __repr__(self) -> str:
        return f"Bitmap({self.width}x{self.height}, mode={self.image.mode!r})"


def _resolve_resample(name: str) -> Image.Resampling:
    try:
        return Image.Resampling[name.upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown resampling filter: {name}") from exc


class ImageCodec:
    """Decode, encode and scale single images."""

    def __init__(self, *, resample: str = DEFAULT_RESAMPLE, png_dpi: int = DEFAULT_PNG_DPI) -> None:
        self.resample = _resolve_resample(resample)
        self.png_dpi = int(png_dpi)

    @classmethod
    def from_settings(cls, settings: SettingsManager) -> "ImageCodec":
        return cls(
            resample=str(settings.get("icons/resample", DEFAULT_RESAMPLE)),
            png_dpi=int(settings.get("icons/png_dpi", DEFAULT_PNG_DPI)),
        )

    def decode(self, data: bytes) -> Bitmap:
        """Decode ``data`` into a :class:`Bitmap`.

        The image is loaded eagerly so that truncated or corrupt payloads fail
        here rather than on first pixel access.
        """

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            EOFError,
            ValueError,
            SyntaxError,
        ) as exc:
            raise DecodeError(f"Unable to decode {len(data)} byte image") from exc
        width, height = image.size
        if width <= 0 or height <= 0:
            raise DecodeError(f"Decoded image has invalid size {width}x{height}")
        return Bitmap(image=image, metadata={"format": image.format, "mode": image.mode})

    def encode(self, bitmap: Bitmap, dpi: Optional[int] = None) -> bytes:
        """Encode ``bitmap`` as PNG carrying ``dpi`` resolution metadata."""

        resolution = self.png_dpi if dpi is None else int(dpi)
        buffer = io.BytesIO()
        try:
            bitmap.image.save(buffer, format="PNG", dpi=(resolution, resolution))
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(
                f"Unable to create PNG for {bitmap.width}x{bitmap.height} bitmap"
            ) from exc
        return buffer.getvalue()

    def scale(self, bitmap: Bitmap, width: int, height: int) -> Bitmap:
        """Return a new bitmap resized to exactly ``width`` x ``height``."""

        if width <= 0 or height <= 0:
            raise ValueError(f"Target size must be positive, got {width}x{height}")
        source = bitmap.image
        if source.mode not in ("RGB", "RGBA", "L", "LA", "I", "F"):
            source = source.convert("RGBA")
        scaled = source.resize((int(width), int(height)), resample=self.resample)
        _logger.debug(
            "Scaled bitmap",
            extra={"component": "ImageCodec", "source": bitmap.size, "target": (width, height)},
        )
        return Bitmap(image=scaled, metadata={"mode": scaled.mode, "scaled_from": bitmap.size})


_DEFAULT_CODEC: Optional[ImageCodec] = None
_DEFAULT_CODEC_LOCK = threading.Lock()


def default_codec() -> ImageCodec:
    """Return the shared codec instance built from the default settings."""

    global _DEFAULT_CODEC
    with _DEFAULT_CODEC_LOCK:
        if _DEFAULT_CODEC is None:
            _DEFAULT_CODEC = ImageCodec.from_settings(SettingsManager())
        return _DEFAULT_CODEC
