"""
Functions to build ffmpeg command lines from a translated preset and run them.

Commands are kept as argument vectors and executed without a shell. The
quoted, space-joined form produced by ``format_cmd`` is only for showing a
command to the user.
"""
import os
import re
import subprocess
import time
from pathlib import Path
from typing import List, Union

from hbconv.preset import FFmpegParams
from hbconv.utils import system_util, LogLevel
from hbconv.utils.constants import FFMPEG_BIN, FFPROBE_BIN, PROGRESS_INTERVAL
from hbconv.utils.logger import Console

PathLike = Union[str, Path]


def _tokens(fragment: str) -> List[str]:
    """Split a rendered option fragment such as '-c:a aac -b:a 160k'."""
    return [t for t in fragment.split(" ") if t]


def _has_value(value: str) -> bool:
    return bool(value) and value != "auto"


def get_null_device() -> str:
    return os.devnull


def build_ffmpeg_cmd(src: PathLike, dst: PathLike, params: FFmpegParams, analyze_duration: int,
                     probe_size: int, verbose: bool = False) -> List[str]:
    """Build the single-pass ffmpeg command for one file."""
    cmd = [
        FFMPEG_BIN,
        "-analyzeduration", str(analyze_duration),
        "-probesize", str(probe_size),
        "-i", str(src),
        "-c:v", params.vcodec,
    ]
    cmd += _tokens(params.quality)
    cmd += ["-preset", params.preset]

    if _has_value(params.framerate):
        cmd += ["-r", params.framerate]

    cmd += ["-s", params.resolution]
    cmd += _tokens(params.acodec)

    if params.audio_channels:
        cmd += _tokens(params.audio_channels)

    if _has_value(params.profile):
        cmd += ["-profile:v", params.profile]

    if not verbose:
        cmd += ["-v", "error", "-stats"]

    # Always copy all streams from input
    cmd += ["-map", "0", str(dst)]
    return cmd


def build_multipass_cmds(src: PathLike, dst: PathLike, params: FFmpegParams, analyze_duration: int,
                         probe_size: int, verbose: bool = False) -> List[List[str]]:
    """Build the two ffmpeg passes; the first writes only statistics."""
    null_device = get_null_device()

    pass1 = build_ffmpeg_cmd(src, null_device, params, analyze_duration, probe_size, verbose)
    pass1.pop()
    pass1 += ["-pass", "1", "-f", "null", null_device]

    pass2 = build_ffmpeg_cmd(src, dst, params, analyze_duration, probe_size, verbose)
    pass2 += ["-pass", "2"]

    return [pass1, pass2]


def build_cmds(src: PathLike, dst: PathLike, params: FFmpegParams, analyze_duration: int,
               probe_size: int, verbose: bool = False) -> List[List[str]]:
    """Return one command, or two when the preset asks for two-pass bitrate encoding."""
    if params.is_multipass:
        return build_multipass_cmds(src, dst, params, analyze_duration, probe_size, verbose)
    return [build_ffmpeg_cmd(src, dst, params, analyze_duration, probe_size, verbose)]


def escape_arg(arg: str) -> str:
    """Quote an argument containing spaces for display."""
    if " " in arg:
        return f'"{arg}"'
    return arg


def format_cmd(cmd: List[str]) -> str:
    return " ".join(escape_arg(a) for a in cmd)


def format_cmds(cmds: List[List[str]]) -> str:
    return " && ".join(format_cmd(c) for c in cmds)


def _progress_fields(line: str) -> dict:
    """Extract time and speed from an ffmpeg stats line, if present."""
    # Example: frame= 1234 fps=18 q=-0.0 size=  10240KiB time=00:01:23.45 bitrate=1234.5kbits/s speed=0.75x
    time_match = re.search(r'time=(\S+)', line)
    speed_match = re.search(r'speed=\s*(\S+)', line)
    if not (time_match and speed_match):
        return {}
    return {"time": time_match.group(1), "speed": speed_match.group(1)}


def execute_cmd(cmd: List[str], console: Console, verbose: bool = False, label: str = "") -> int:
    """
    Run one ffmpeg command and wait for it.

    stderr is relayed to the console; progress lines are condensed into a
    ``transcode.progress`` event at most every PROGRESS_INTERVAL seconds.

    Returns:
        The process exit code.
    """
    if verbose:
        console.echo(f"Executing: {format_cmd(cmd)}")

    last_progress_log = time.time()
    # No stdin: an overwrite prompt makes ffmpeg exit instead of waiting
    with subprocess.Popen(cmd, stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE,
                          text=True, errors="replace") as process:
        for line in process.stderr:
            line = line.rstrip()
            if not line:
                continue
            fields = _progress_fields(line)
            if fields:
                now = time.time()
                if now - last_progress_log >= PROGRESS_INTERVAL:
                    console.log("transcode.progress", LogLevel.INFO, file=label, **fields)
                    last_progress_log = now
            else:
                console.echo(line)
        process.wait()

    return process.returncode


def print_file_info(path: PathLike, console: Console) -> None:
    """Relay ffprobe's view of a file; used after a failed conversion."""
    console.echo(f"File information for {path}:")
    code, out, err = system_util.run_cmd(
        [FFPROBE_BIN, "-hide_banner", "-v", "error", "-show_format", "-show_streams", str(path)]
    )
    for text in (out, err):
        if text:
            console.echo(text.rstrip("\n"))
    console.log("probe.complete", LogLevel.DEBUG, file=str(path), exit_code=code)
