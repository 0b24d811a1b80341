"""Core services for the icon toolkit."""
from .errors import DecodeError, EncodeError, FormatError, IconSetError, TruncatedStreamError
from .logging_config import LoggingConfigurator, LoggingOptions
from .settings_manager import DEFAULT_SETTINGS, SettingsManager

__all__ = [
    "IconSetError",
    "FormatError",
    "TruncatedStreamError",
    "DecodeError",
    "EncodeError",
    "LoggingConfigurator",
    "LoggingOptions",
    "DEFAULT_SETTINGS",
    "SettingsManager",
]
