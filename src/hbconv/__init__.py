"""
Convert saved HandBrake presets into ffmpeg command lines.

The preset's video, audio, quality, resolution and container choices are
translated into the equivalent ffmpeg options, which can be shown on their
own or applied to every media file in a directory.

The package is organized into:
- preset: loading the preset JSON and translating it to ffmpeg options.
- transcode: building ffmpeg commands, discovering media files and running
  the batch.
- utils: constants, logging and small system/file helpers.
- cli: the ``hb-ffmpeg-conv`` command.
"""

__version__ = "0.9"

__all__ = ["__version__"]
