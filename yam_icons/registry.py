"""Process-wide registry mapping icon set names to their current instance."""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, List, Optional

from .data.image_cache import ImageCache

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .icon_set import IconSet


class IconSetRegistry:
    """Own the name to :class:`IconSet` mapping and the shared sequence counter.

    Registration is last-write-wins. Instances displaced by a newer
    registration stay usable by whoever already holds them, they simply stop
    being reachable through :meth:`get`.

    The sequence counter only ever moves forward, so every icon set built
    against the same registry receives a number greater than all earlier ones
    regardless of its name.
    """

    def __init__(self, image_cache: Optional[ImageCache] = None) -> None:
        self._logger = logging.getLogger(f"{__name__}.IconSetRegistry")
        self._lock = threading.Lock()
        self._sets: Dict[str, "IconSet"] = {}
        self._sequence = 0
        self.image_cache = image_cache if image_cache is not None else ImageCache()

    def next_sequence(self) -> int:
        """Return the next value of the monotonically increasing counter."""

        with self._lock:
            self._sequence += 1
            return self._sequence

    @property
    def last_sequence(self) -> int:
        with self._lock:
            return self._sequence

    def register(self, icon_set: "IconSet") -> Optional["IconSet"]:
        """Make ``icon_set`` the current instance for its name.

        Returns the instance that was displaced, if any.
        """

        with self._lock:
            previous = self._sets.get(icon_set.name)
            self._sets[icon_set.name] = icon_set
        self._log_replaced(icon_set, previous)
        return previous

    def register_new(self, icon_set: "IconSet") -> int:
        """Draw the next sequence number and register ``icon_set`` atomically.

        The number is bound to ``icon_set`` before it becomes reachable through
        :meth:`get`, and sets built concurrently under the same name end with
        the highest-numbered one registered.
        """

        with self._lock:
            self._sequence += 1
            sequence = self._sequence
            icon_set._bind_sequence(sequence)
            previous = self._sets.get(icon_set.name)
            self._sets[icon_set.name] = icon_set
        self._log_replaced(icon_set, previous)
        return sequence

    def _log_replaced(self, icon_set: "IconSet", previous: Optional["IconSet"]) -> None:
        if previous is None or previous is icon_set:
            return
        self._logger.debug(
            "Replaced icon set",
            extra={
                "component": "IconSetRegistry",
                "icon_set": icon_set.name,
                "previous_sequence": previous.sequence,
            },
        )

    def get(self, name: str) -> Optional["IconSet"]:
        with self._lock:
            return self._sets.get(name)

    def unregister(self, name: str) -> Optional["IconSet"]:
        with self._lock:
            return self._sets.pop(name, None)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._sets)

    def clear(self) -> None:
        """Forget every registered set. The sequence counter is preserved."""

        with self._lock:
            self._sets.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._sets

    def __len__(self) -> int:
        with self._lock:
            return len(self._sets)


_DEFAULT_REGISTRY: Optional[IconSetRegistry] = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def default_registry() -> IconSetRegistry:
    """Return the process-wide registry, creating it on first use."""

    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = IconSetRegistry()
        return _DEFAULT_REGISTRY


def get(name: str) -> Optional["IconSet"]:
    """Look up ``name`` in the process-wide registry."""

    return default_registry().get(name)
