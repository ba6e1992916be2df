"""
Load a saved HandBrake preset and flatten it into a ``Settings`` record.

Only the first preset of ``PresetList`` and the first entry of its
``AudioList`` are read. Every field is optional; numeric fields are carried
as decimal text so that ``24`` and ``"24"`` produce the same command.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union


class PresetError(Exception):
    """Raised when a preset document cannot be loaded or has no preset."""


@dataclass(frozen=True)
class Settings:
    preset_name: str = ""
    video_encoder: str = ""
    video_bitrate: str = "0"
    video_preset: str = ""
    video_profile: str = ""
    video_framerate: str = ""
    video_quality: str = "0"
    video_quality_type: str = ""
    video_multipass: bool = False
    picture_width: str = "0"
    picture_height: str = "0"
    audio_encoder: str = ""
    audio_bitrate: str = "0"
    audio_mixdown: str = ""
    container: str = ""


def load_preset_file(path: Union[str, Path]) -> dict:
    """Read and parse a preset JSON file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise PresetError(f"JSON file '{path}' does not exist.")
    except OSError as e:
        raise PresetError(f"JSON file '{path}' could not be read: {e}")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PresetError(f"Failed to parse '{path}' as valid JSON: {e}")


def _decimal_str(value: Any, default: str) -> str:
    """Render a number (or numeric string) as decimal text."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    return default


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def extract_settings(document: dict) -> Settings:
    """
    Build the settings record from a parsed preset document.

    Raises:
        PresetError: when the document has no ``PresetList`` entry.
    """
    presets = document.get("PresetList") if isinstance(document, dict) else None
    if not isinstance(presets, list) or not presets or not isinstance(presets[0], dict):
        raise PresetError("Preset document has no entries in 'PresetList'.")
    preset = presets[0]

    audio_list = preset.get("AudioList")
    audio = audio_list[0] if isinstance(audio_list, list) and audio_list else {}
    if not isinstance(audio, dict):
        audio = {}

    return Settings(
        preset_name=_text(preset.get("PresetName")),
        video_encoder=_text(preset.get("VideoEncoder")),
        video_bitrate=_decimal_str(preset.get("VideoAvgBitrate"), "0"),
        video_preset=_text(preset.get("VideoPreset")),
        video_profile=_text(preset.get("VideoProfile")),
        video_framerate=_decimal_str(preset.get("VideoFramerate"), ""),
        video_quality=_decimal_str(preset.get("VideoQualitySlider"), "0"),
        video_quality_type=_decimal_str(preset.get("VideoQualityType"), ""),
        video_multipass=preset.get("VideoMultiPass") is True,
        picture_width=_decimal_str(preset.get("PictureWidth"), "0"),
        picture_height=_decimal_str(preset.get("PictureHeight"), "0"),
        audio_encoder=_text(audio.get("AudioEncoder")),
        audio_bitrate=_decimal_str(audio.get("AudioBitrate"), "0"),
        audio_mixdown=_text(audio.get("AudioMixdown")),
        container=_text(preset.get("FileFormat")),
    )
