"""Human-readable report of a translated preset (``--show-preset``)."""
from typing import List

from .translate import FFmpegParams

_RULE = "============================================"


def _has_value(value: str) -> bool:
    return bool(value) and value != "auto"


def format_preset_summary(params: FFmpegParams, output_format: str, analyze_duration: int,
                          probe_size: int, audio_passthrough: str = "") -> List[str]:
    """Return the summary lines for a translated preset."""
    lines = [
        _RULE,
        f"Handbrake Preset: {params.preset_name}",
        "FFmpeg Equivalent Parameters:",
        _RULE,
        f"Video codec:      -c:v {params.vcodec}",
        f"Quality:          {params.quality}",
        f"Preset:           -preset {params.preset}",
    ]
    if _has_value(params.framerate):
        lines.append(f"Framerate:        -r {params.framerate}")
    lines.append(f"Resolution:       -s {params.resolution}")
    lines.append(f"Audio:            {params.acodec} {params.audio_channels}")
    if audio_passthrough:
        lines.append(f"Audio source:     {audio_passthrough} (copied as-is)")
    if _has_value(params.profile):
        lines.append(f"Profile:          -profile:v {params.profile}")
    lines.append(f"Output format:    {output_format}")

    if params.is_multipass:
        lines.append("Multipass:        Enabled (two-pass encoding)")
    else:
        lines.append("Multipass:        Disabled (single-pass encoding)")

    lines += [
        f"Analyze duration: {analyze_duration}",
        f"Probe size:       {probe_size}",
        _RULE,
        "Example usage:",
        f"ffmpeg -analyzeduration {analyze_duration} -probesize {probe_size} -i input.mp4 "
        f"-c:v {params.vcodec} {params.quality} -preset {params.preset} -s {params.resolution} "
        f"{params.acodec} {params.audio_channels} output.{output_format}",
        _RULE,
    ]
    return lines
