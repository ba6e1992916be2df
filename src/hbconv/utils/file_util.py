"""
Output naming and filesystem checks used while converting a batch.

These helpers decide how an output file is named, whether a directory has
been marked to be left alone, and whether an output location can actually
be written before ffmpeg is started on it.
"""
import os
from pathlib import Path

from hbconv.utils.constants import CONVERTED_FOLDER
from hbconv.utils.logger import Console


def format_filename(basename: str, replace_underscores: bool) -> str:
    """Replace underscores with spaces when enabled."""
    if replace_underscores:
        return basename.replace("_", " ")
    return basename


def should_ignore_file(path: Path, ignore_flag: str) -> bool:
    """Check whether the file's directory holds the ignore marker."""
    return (Path(path).parent / ignore_flag).exists()


def collapse_converted(path: Path) -> Path:
    """Collapse an accidental ``converted/converted`` into a single segment."""
    parts = list(Path(path).parts)
    for i in range(len(parts) - 1):
        if parts[i] == CONVERTED_FOLDER and parts[i + 1] == CONVERTED_FOLDER:
            del parts[i + 1]
            return Path(*parts)
    return Path(path)


def check_file_access(path: Path, console: Console) -> bool:
    """
    Verify that ``path`` can be written.

    The parent must be an existing directory, an existing target must be
    writable and the directory must accept a throwaway probe file.
    """
    path = Path(path)
    dir_path = path.parent

    if not dir_path.is_dir():
        console.echo(f"Error: Output directory '{dir_path}' does not exist.")
        return False

    if path.exists() and not os.access(path, os.W_OK):
        console.echo(f"Error: Output file '{path}' exists but is not writable.")
        return False

    probe = dir_path / ".write_test_temp"
    try:
        probe.write_bytes(b"")
        probe.unlink()
    except OSError:
        console.echo(f"Error: Output directory '{dir_path}' is not writable.")
        return False

    return True
