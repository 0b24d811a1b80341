"""Tests for the icon set registry and image cache."""
from __future__ import annotations

import logging
import threading

import pytest

from tests._icon_helpers import make_bitmap
from yam_icons import registry as registry_module
from yam_icons.data.image_cache import ImageCache, icon_cache_key
from yam_icons.icon_set import IconSet
from yam_icons.registry import IconSetRegistry


def test_registry_get_unknown_returns_none(registry: IconSetRegistry) -> None:
    assert registry.get("missing") is None
    assert "missing" not in registry
    assert len(registry) == 0


def test_register_is_last_write_wins(registry: IconSetRegistry, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="yam_icons.registry")
    first = IconSet("app", [make_bitmap(16, 16)], registry=registry)
    second = IconSet("app", [make_bitmap(32, 32)], registry=registry)

    assert registry.get("app") is second
    assert registry.names() == ["app"]
    assert first.sizes() == [(16, 16)]
    assert any("Replaced icon set" in record.getMessage() for record in caplog.records)


def test_unregister_and_clear_keep_counter(registry: IconSetRegistry) -> None:
    IconSet("one", [], registry=registry)
    IconSet("two", [], registry=registry)

    removed = registry.unregister("one")
    assert removed is not None and removed.name == "one"
    registry.clear()

    assert len(registry) == 0
    assert IconSet("three", [], registry=registry).sequence == 3


def test_registries_are_isolated() -> None:
    left = IconSetRegistry()
    right = IconSetRegistry()

    IconSet("same", [], registry=left)

    assert right.get("same") is None
    assert right.next_sequence() == 1


def test_concurrent_same_name_keeps_highest_sequence(registry: IconSetRegistry) -> None:
    start = threading.Barrier(8)

    def _build() -> None:
        start.wait()
        for _ in range(50):
            IconSet("contended", [], registry=registry)

    threads = [threading.Thread(target=_build) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    current = registry.get("contended")
    assert current is not None
    assert current.sequence == registry.last_sequence == 400


def test_default_registry_is_shared() -> None:
    default = registry_module.default_registry()
    icon_set = IconSet("yam-icons-test-default", [make_bitmap(16, 16)])

    assert registry_module.default_registry() is default
    assert registry_module.get("yam-icons-test-default") is icon_set
    assert icon_set.registry is default
    default.unregister("yam-icons-test-default")


def test_icon_cache_key_format() -> None:
    assert icon_cache_key("toolbar", 16, 32) == "is:toolbar_16x32"


def test_image_cache_put_replaces() -> None:
    cache = ImageCache()
    first = make_bitmap(16, 16)
    second = make_bitmap(16, 16)

    cache.put("key", first)
    cache.put("key", second)

    assert cache.get("key") is second
    assert len(cache) == 1
    assert list(cache) == ["key"]
    assert cache.remove("key") is second
    assert "key" not in cache
