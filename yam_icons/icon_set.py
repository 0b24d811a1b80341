"""A named set of bitmaps of the same logical icon at different resolutions.

Members are kept ordered by width descending, then height descending, then
insertion order. Looking up a size that is not present scales the closest
member to the requested size, caches the result and adds it to the set, so
repeated requests for the same size only scale once.

The sequence number is assigned once at construction from the registry's
counter. Sizes synthesised by :meth:`IconSet.get_icon` do not change it: it
identifies the loaded set, not the resizes derived from it.
"""

from __future__ import annotations

import itertools
import logging
import os
import threading
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .containers.icns import encode_icns, write_icns
from .data.image_cache import icon_cache_key
from .data.image_codec import Bitmap, ImageCodec, default_codec
from .registry import IconSetRegistry, default_registry

Scaler = Callable[[Bitmap, int, int], Bitmap]

_logger = logging.getLogger(__name__)


def best_fit_score(bitmap: Bitmap, width: int, height: int) -> int:
    """Return ``(w - width) * (h - height)`` for ``bitmap``."""

    return (bitmap.width - width) * (bitmap.height - height)


def select_best_fit(candidates: Iterable[Bitmap], width: int, height: int) -> Optional[Bitmap]:
    """Pick the bitmap to scale when no member is exactly ``width`` x ``height``.

    A positive score means both dimensions deviate in the same direction; the
    smallest positive score wins. Only when no candidate scores positive is the
    largest non-positive score used instead. Ties keep the earliest candidate.
    """

    best: Optional[Bitmap] = None
    best_score = 0
    fallback: Optional[Bitmap] = None
    fallback_score = 0
    for bitmap in candidates:
        score = best_fit_score(bitmap, width, height)
        if score > 0:
            if best is None or score < best_score:
                best = bitmap
                best_score = score
        elif best is None and (fallback is None or score > fallback_score):
            fallback = bitmap
            fallback_score = score
    return best if best is not None else fallback


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Icon dimensions must be positive, got {width}x{height}")


class IconSet:
    """Provides a set of icons at different resolutions."""

    def __init__(
        self,
        name: str,
        images: Iterable[Bitmap],
        *,
        registry: Optional[IconSetRegistry] = None,
        scaler: Optional[Scaler] = None,
    ) -> None:
        """Create the set and register it under ``name``.

        Any set already registered under ``name`` is replaced.
        """

        self._name = name
        self._registry = registry if registry is not None else default_registry()
        self._scaler: Scaler = scaler if scaler is not None else default_codec().scale
        self._lock = threading.RLock()
        self._insertion = itertools.count()
        self._entries: List[Tuple[int, Bitmap]] = [(next(self._insertion), image) for image in images]
        self._sort()
        self._sequence = 0
        self._registry.register_new(self)
        _logger.debug(
            "Created icon set",
            extra={
                "component": "IconSet",
                "icon_set": name,
                "sequence": self._sequence,
                "count": len(self._entries),
            },
        )

    def _bind_sequence(self, sequence: int) -> None:
        self._sequence = sequence

    def _sort(self) -> None:
        self._entries.sort(key=lambda entry: (-entry[1].width, -entry[1].height, entry[0]))

    @property
    def name(self) -> str:
        return self._name

    @property
    def sequence(self) -> int:
        """Token that is unique across all sets built against the same registry.

        Compare it with a previously seen value to detect that the set has been
        replaced by a newly loaded one.
        """

        return self._sequence

    @property
    def registry(self) -> IconSetRegistry:
        return self._registry

    def has_icon(self, width: int, height: Optional[int] = None) -> bool:
        return self.get_icon_no_create(width, height) is not None

    def get_icon_no_create(self, width: int, height: Optional[int] = None) -> Optional[Bitmap]:
        """Return the member that is exactly ``width`` x ``height``, if any.

        ``height`` defaults to ``width``.
        """

        if height is None:
            height = width
        with self._lock:
            for _, bitmap in self._entries:
                if bitmap.width == width and bitmap.height == height:
                    return bitmap
        return None

    def get_icon(self, width: int, height: Optional[int] = None) -> Bitmap:
        """Return a member of exactly ``width`` x ``height``, scaling one if needed.

        The scaled bitmap is stored in the image cache and added to the set.
        Raises :class:`LookupError` when the set is empty.
        """

        if height is None:
            height = width
        _check_size(width, height)
        with self._lock:
            match = self.get_icon_no_create(width, height)
            if match is not None:
                return match
            source = select_best_fit((bitmap for _, bitmap in self._entries), width, height)
            if source is None:
                raise LookupError(f"Icon set '{self._name}' has no icons to scale")
            scaled = self._scaler(source, width, height)
            self._registry.image_cache.put(icon_cache_key(self._name, width, height), scaled)
            self._entries.append((next(self._insertion), scaled))
            self._sort()
        _logger.debug(
            "Synthesised icon size",
            extra={
                "component": "IconSet",
                "icon_set": self._name,
                "source": source.size,
                "target": (width, height),
            },
        )
        return scaled

    def to_list(self) -> List[Bitmap]:
        """Return a copy of the members in their sorted order."""

        with self._lock:
            return [bitmap for _, bitmap in self._entries]

    def sizes(self) -> List[Tuple[int, int]]:
        return [bitmap.size for bitmap in self.to_list()]

    def save_as_icns(
        self,
        destination: Union[BinaryIO, str, "os.PathLike[str]"],
        *,
        codec: Optional[ImageCodec] = None,
    ) -> int:
        """Write the square, canonically sized members as an ICNS container.

        Returns the number of bytes written.
        """

        bitmaps: Sequence[Bitmap] = self.to_list()
        if hasattr(destination, "write"):
            return write_icns(bitmaps, destination, codec=codec)  # type: ignore[arg-type]
        data = encode_icns(bitmaps, codec=codec)
        path = Path(os.fspath(destination))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return len(data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Bitmap]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        sizes = ", ".join(f"{w}x{h}" for w, h in self.sizes())
        return f"IconSet(name={self._name!r}, sequence={self._sequence}, sizes=[{sizes}])"
