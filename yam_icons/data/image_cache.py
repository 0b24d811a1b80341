"""In-memory image cache keyed by string identifiers."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Optional

from .image_codec import Bitmap


ICON_KEY_PREFIX = "is:"


def icon_cache_key(name: str, width: int, height: int) -> str:
    """Return the cache id used for an icon set member of the given size."""

    return f"{ICON_KEY_PREFIX}{name}_{int(width)}x{int(height)}"


class ImageCache:
    """Store bitmaps under arbitrary string ids.

    ``put`` is last-write-wins; all operations are guarded by a single lock so
    loaders running on different threads can share one cache.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.ImageCache")
        self._entries: Dict[str, Bitmap] = {}
        self._lock = threading.Lock()

    def put(self, key: str, bitmap: Bitmap) -> None:
        with self._lock:
            replaced = key in self._entries
            self._entries[key] = bitmap
        self._logger.debug(
            "Cached image",
            extra={"component": "ImageCache", "key": key, "replaced": replaced},
        )

    def get(self, key: str) -> Optional[Bitmap]:
        with self._lock:
            return self._entries.get(key)

    def remove(self, key: str) -> Optional[Bitmap]:
        with self._lock:
            return self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
