"""Binary codecs for multi-resolution icon containers."""

from .icns import CANONICAL_SIZES, ICNS_MAGIC, IMAGE_TYPES, WRITE_TYPES, encode_icns, read_icns, write_icns
from .ico import DirectoryEntry, read_directory, read_ico

__all__ = [
    "CANONICAL_SIZES",
    "ICNS_MAGIC",
    "IMAGE_TYPES",
    "WRITE_TYPES",
    "encode_icns",
    "read_icns",
    "write_icns",
    "DirectoryEntry",
    "read_directory",
    "read_ico",
]
