"""Shared test fixtures for hb-ffmpeg-conv."""

import io
import json
from pathlib import Path

import pytest

from hbconv.preset import FFmpegParams
from hbconv.utils.logger import Console, LogLevel


@pytest.fixture
def console_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_stream: io.StringIO) -> Console:
    """A console that records everything it writes."""
    return Console(console_stream, LogLevel.DEBUG)


@pytest.fixture
def crf_params() -> FFmpegParams:
    """Parameters of a typical CRF (constant quality) preset."""
    return FFmpegParams(
        vcodec="libx265",
        acodec="-c:a aac -b:a 160k",
        audio_channels="-ac 2",
        quality="-crf 20",
        format="mkv",
        preset="medium",
        profile="main",
        framerate="24",
        resolution="1920x1080",
        multipass=False,
        preset_name="HEVC 1080p",
    )


@pytest.fixture
def bitrate_params() -> FFmpegParams:
    """Parameters of a two-pass average-bitrate preset."""
    return FFmpegParams(
        vcodec="libx264",
        acodec="-c:a copy",
        audio_channels="",
        quality="-b:v 4000k",
        format="mp4",
        preset="slow",
        profile="auto",
        framerate="auto",
        resolution="1280x720",
        multipass=True,
        preset_name="H.264 720p 2-pass",
    )


def _make_preset(**fields) -> dict:
    """Build a preset document whose first preset holds ``fields``."""
    audio = fields.pop("AudioList", None)
    preset = dict(fields)
    if audio is not None:
        preset["AudioList"] = audio
    return {"PresetList": [preset], "VersionMajor": 47}


@pytest.fixture
def make_preset():
    """Factory for preset documents."""
    return _make_preset


@pytest.fixture
def preset_file(tmp_path: Path) -> Path:
    """Write a HEVC CRF preset next to a media directory."""
    path = tmp_path / "preset.json"
    path.write_text(json.dumps(_make_preset(
        PresetName="HEVC 1080p",
        VideoEncoder="x265",
        VideoQualityType=2,
        VideoQualitySlider=20.0,
        VideoPreset="medium",
        VideoProfile="main",
        VideoFramerate="auto",
        PictureWidth=1920,
        PictureHeight=1080,
        FileFormat="av_mkv",
        AudioList=[{"AudioEncoder": "av_aac", "AudioBitrate": 160, "AudioMixdown": "stereo"}],
    )))
    return path
