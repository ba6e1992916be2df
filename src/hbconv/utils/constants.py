"""
Constants and configuration settings for preset conversion.

This module contains the default media extensions searched for, the ffmpeg
analysis parameters, the marker file name that disables conversion for a
directory, and the status codes used to report per-file results. A few
values can be overridden from the environment (or a ``.env`` file).
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# External tools
FFMPEG_BIN = "ffmpeg"
FFPROBE_BIN = "ffprobe"
REQUIRED_BINARIES = (FFMPEG_BIN, FFPROBE_BIN)

# Accepted media file extensions (lower-case, no dot)
MEDIA_EXTENSIONS = ("mp4", "mkv", "avi", "mov", "wmv", "flv", "webm", "m4v", "mpg", "mpeg", "ts")

# Marker file that disables conversion for every file in its directory
DEFAULT_IGNORE_FLAG = os.getenv("HBCONV_IGNORE_FLAG") or ".noconvert"

# Extended ffmpeg analysis settings (100MB)
ANALYZE_DURATION = _env_int("HBCONV_ANALYZE_DURATION", 100000000)
PROBE_SIZE = _env_int("HBCONV_PROBE_SIZE", 100000000)

# Optional default for --log
LOG_FILE = os.getenv("HBCONV_LOG_FILE")

# Folder and extension conventions
CONVERTED_FOLDER = "converted"
FORCED_EXTENSION = "m4v"
DEFAULT_CONTAINER = "mkv"

# Seconds between ffmpeg progress log lines
PROGRESS_INTERVAL = 60

# Processing status codes
STATUS_OK = "OK"
STATUS_SKIP = "SKIP"
STATUS_FAIL = "FAIL"
STATUS_DRY_RUN = "DRY-RUN"
STATUS_PREVIEW = "PREVIEW"
