"""
Map HandBrake settings onto the ffmpeg options that reproduce them.
"""
from dataclasses import dataclass

from hbconv.utils.constants import DEFAULT_CONTAINER
from .extract import Settings

VIDEO_ENCODERS = {
    "x265": "libx265",
    "x264": "libx264",
}

AUDIO_MIXDOWNS = {
    "5point1": "-ac 6",
    "stereo": "-ac 2",
    "mono": "-ac 1",
}

CONTAINERS = {
    "av_mkv": "mkv",
    "av_mp4": "mp4",
}

# HandBrake's "constant quality" rate control
QUALITY_TYPE_CRF = "2"

AUDIO_COPY_PREFIX = "copy:"


@dataclass(frozen=True)
class FFmpegParams:
    vcodec: str
    acodec: str
    audio_channels: str
    quality: str
    format: str
    preset: str
    profile: str
    framerate: str
    resolution: str
    multipass: bool
    preset_name: str

    @property
    def is_multipass(self) -> bool:
        """Two-pass only applies to bitrate mode; CRF ignores the flag."""
        return self.multipass and "-crf" not in self.quality


def parse_audio_copy(audio_encoder: str) -> str:
    """Return the codec named after ``copy:`` (e.g. ``aac`` for ``copy:aac``).

    ffmpeg is always told to copy every audio stream, so the name is not used
    when building commands.
    """
    if audio_encoder.startswith(AUDIO_COPY_PREFIX):
        return audio_encoder[len(AUDIO_COPY_PREFIX):]
    return ""


def to_ffmpeg_params(settings: Settings) -> FFmpegParams:
    """Translate a settings record. Unknown values fall back to defaults."""
    vcodec = VIDEO_ENCODERS.get(settings.video_encoder, settings.video_encoder)

    if settings.audio_encoder.startswith(AUDIO_COPY_PREFIX):
        acodec = "-c:a copy"
    else:
        acodec = f"-c:a aac -b:a {settings.audio_bitrate}k"

    if settings.video_quality_type == QUALITY_TYPE_CRF:
        quality = f"-crf {settings.video_quality}"
    else:
        quality = f"-b:v {settings.video_bitrate}k"

    return FFmpegParams(
        vcodec=vcodec,
        acodec=acodec,
        audio_channels=AUDIO_MIXDOWNS.get(settings.audio_mixdown, ""),
        quality=quality,
        format=CONTAINERS.get(settings.container, DEFAULT_CONTAINER),
        preset=settings.video_preset,
        profile=settings.video_profile,
        framerate=settings.video_framerate,
        resolution=f"{settings.picture_width}x{settings.picture_height}",
        multipass=settings.video_multipass,
        preset_name=settings.preset_name,
    )
