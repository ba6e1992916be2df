"""HandBrake preset handling.

- extract: load the preset JSON and flatten the first preset into ``Settings``
- translate: map ``Settings`` onto ffmpeg options (``FFmpegParams``)
- display: the ``--show-preset`` report
"""

from .extract import (
    PresetError,
    Settings,
    extract_settings,
    load_preset_file,
)
from .translate import (
    FFmpegParams,
    parse_audio_copy,
    to_ffmpeg_params,
)
from .display import format_preset_summary

__all__ = [
    "PresetError",
    "Settings",
    "extract_settings",
    "load_preset_file",
    "FFmpegParams",
    "parse_audio_copy",
    "to_ffmpeg_params",
    "format_preset_summary",
]
