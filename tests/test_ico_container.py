"""Tests for the ICO reader."""
from __future__ import annotations

import io
import struct

import pytest

from tests._icon_helpers import RecordingCodec, build_ico, oversized_png_bytes, png_bytes
from yam_icons.containers import ico
from yam_icons.core.errors import FormatError, TruncatedStreamError
from yam_icons.loader import load_ico


def test_read_ico_decodes_png_entries() -> None:
    first = png_bytes(16, 16)
    second = png_bytes(32, 32)
    data = build_ico([(38, first), (38 + len(first), second)])

    images = ico.read_ico(io.BytesIO(data))

    assert [image.size for image in images] == [(16, 16), (32, 32)]


def test_read_ico_reads_entries_in_offset_order() -> None:
    codec = RecordingCodec()
    # Directory lists the later entry first.
    data = build_ico([(90, b"48x48-late"), (60, b"16x16-early")], fill=b"\xaa")

    images = ico.read_ico(io.BytesIO(data), codec=codec)

    assert codec.payloads == [b"16x16-early", b"48x48-late"]
    assert [image.size for image in images] == [(16, 16), (48, 48)]


def test_read_ico_discards_gap_bytes() -> None:
    codec = RecordingCodec()
    data = build_ico([(120, b"32x32"), (50, b"16x16")], fill=b"\xaa")

    ico.read_ico(io.BytesIO(data), codec=codec)

    assert all(b"\xaa" not in payload for payload in codec.payloads)
    assert codec.payloads == [b"16x16", b"32x32"]


def test_read_directory_ignores_declared_dimensions() -> None:
    header = struct.pack("<HHH", 0, 1, 1)
    entry = struct.pack("<BBBBHHII", 99, 77, 0, 0, 1, 32, 5, 22)
    data = header + entry + b"16x16"

    entries = ico.read_directory(io.BytesIO(data))

    assert entries == [ico.DirectoryEntry(index=0, length=5, offset=22)]


@pytest.mark.parametrize("reserved, kind", [(1, 1), (0, 2), (0, 0)])
def test_read_ico_rejects_bad_header(reserved: int, kind: int) -> None:
    data = build_ico([(22, png_bytes(16, 16))], reserved=reserved, kind=kind)

    with pytest.raises(FormatError):
        ico.read_ico(io.BytesIO(data))


def test_read_ico_truncated_directory_raises() -> None:
    data = build_ico([(38, b"16x16"), (43, b"32x32")])

    with pytest.raises(TruncatedStreamError):
        ico.read_ico(io.BytesIO(data[:20]))


def test_read_ico_truncated_payload_raises() -> None:
    data = build_ico([(22, png_bytes(16, 16))])

    with pytest.raises(TruncatedStreamError):
        ico.read_ico(io.BytesIO(data[:-1]))


def test_read_ico_overlapping_entry_raises() -> None:
    header = struct.pack("<HHH", 0, 1, 1)
    entry = struct.pack("<BBBBHHII", 0, 0, 0, 0, 1, 32, 5, 10)
    data = header + entry + b"16x16"

    with pytest.raises(FormatError):
        ico.read_ico(io.BytesIO(data), codec=RecordingCodec())


def test_read_ico_skips_legacy_bitmap_entries() -> None:
    # A headerless DIB entry as stored by legacy icons.
    legacy = struct.pack("<IiiHH", 40, 16, 32, 1, 32) + b"\x00" * 24
    modern = png_bytes(32, 32)
    data = build_ico([(38, legacy), (38 + len(legacy), modern)])

    images = ico.read_ico(io.BytesIO(data))

    assert [image.size for image in images] == [(32, 32)]


def test_read_ico_skips_image_over_pixel_limit() -> None:
    huge = oversized_png_bytes()
    small = png_bytes(16, 16)
    data = build_ico([(38, huge), (38 + len(huge), small)])

    images = ico.read_ico(io.BytesIO(data))

    assert [image.size for image in images] == [(16, 16)]


def test_load_ico_builds_sorted_icon_set(registry) -> None:
    small = png_bytes(16, 16)
    large = png_bytes(48, 48)
    data = build_ico([(38 + len(small), large), (38, small)])

    icon_set = load_ico("win", data, registry=registry)

    assert icon_set is not None
    assert icon_set.sizes() == [(48, 48), (16, 16)]
    assert registry.get("win") is icon_set


def test_load_ico_without_usable_images_returns_none(registry) -> None:
    data = build_ico([(22, b"bad")])

    assert load_ico("nothing", data, registry=registry, codec=RecordingCodec()) is None
    assert "nothing" not in registry


def test_load_ico_empty_directory_returns_none(registry) -> None:
    assert load_ico("zero", struct.pack("<HHH", 0, 1, 0), registry=registry) is None
