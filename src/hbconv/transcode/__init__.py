"""ffmpeg command building and batch conversion.

This package provides two levels of functionality:
- core: Low-level ffmpeg utilities (command building, display quoting, execution, probing)
- batch: High-level orchestration (file discovery, per-file processing, run summary)
"""

from .core import (
    build_ffmpeg_cmd,
    build_multipass_cmds,
    build_cmds,
    format_cmd,
    format_cmds,
    execute_cmd,
    print_file_info,
)
from .batch import (
    BatchOptions,
    RunCounters,
    iter_media_files,
    process_file,
    run_batch,
)

__all__ = [
    # Commands
    "build_ffmpeg_cmd",
    "build_multipass_cmds",
    "build_cmds",
    "format_cmd",
    "format_cmds",
    "execute_cmd",
    "print_file_info",
    # Batch
    "BatchOptions",
    "RunCounters",
    "iter_media_files",
    "process_file",
    "run_batch",
]
