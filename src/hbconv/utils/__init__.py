"""
Constants, logging and small system and file helpers shared by the
preset translation and the batch converter.
"""

from .constants import (
    ANALYZE_DURATION,
    CONVERTED_FOLDER,
    DEFAULT_IGNORE_FLAG,
    FORCED_EXTENSION,
    MEDIA_EXTENSIONS,
    PROBE_SIZE,
    STATUS_DRY_RUN,
    STATUS_FAIL,
    STATUS_OK,
    STATUS_PREVIEW,
    STATUS_SKIP,
)
from .logger import Console, LogLevel, open_console

__all__ = [
    "ANALYZE_DURATION",
    "CONVERTED_FOLDER",
    "DEFAULT_IGNORE_FLAG",
    "FORCED_EXTENSION",
    "MEDIA_EXTENSIONS",
    "PROBE_SIZE",
    "STATUS_OK",
    "STATUS_SKIP",
    "STATUS_FAIL",
    "STATUS_DRY_RUN",
    "STATUS_PREVIEW",
    "Console",
    "LogLevel",
    "open_console",
]
