"""
This module provides discovery of media files and the batch driver that
converts each of them with a translated preset.

Every file ends in exactly one of: skipped (marker file present), failed,
converted, or reported (dry-run / preview). A failure on one file is
reported and counted, and the batch moves on to the next file.
"""
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from tqdm import tqdm

from hbconv.preset import FFmpegParams
from hbconv.utils import (
    ANALYZE_DURATION,
    DEFAULT_IGNORE_FLAG,
    FORCED_EXTENSION,
    MEDIA_EXTENSIONS,
    PROBE_SIZE,
    STATUS_DRY_RUN,
    STATUS_FAIL,
    STATUS_OK,
    STATUS_PREVIEW,
    STATUS_SKIP,
    LogLevel,
)
from hbconv.utils.file_util import check_file_access, format_filename, should_ignore_file
from hbconv.utils.logger import Console
from hbconv.utils.time_util import format_runtime
from . import core


@dataclass
class BatchOptions:
    input_dir: Path
    output_dir: Path
    preset_file: Optional[Path] = None
    execute: bool = False
    dry_run: bool = False
    force_m4v: bool = False
    replace_underscores: bool = True
    recursive: bool = False
    ignore_flag: str = DEFAULT_IGNORE_FLAG
    analyze_duration: int = ANALYZE_DURATION
    probe_size: int = PROBE_SIZE
    verbose: bool = False
    extensions: Sequence[str] = MEDIA_EXTENSIONS


@dataclass
class RunCounters:
    processed: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


def _has_allowed_ext(name: str, allowed: set) -> bool:
    suffix = os.path.splitext(name)[1]
    return bool(suffix) and suffix[1:].lower() in allowed


def iter_media_files(root: Path, recursive: bool = False, extensions: Sequence[str] = MEDIA_EXTENSIONS,
                     on_error: Optional[Callable[[OSError], None]] = None) -> List[Path]:
    """
    Find media files under ``root``.

    Only direct children are inspected unless ``recursive`` is set. A
    directory that cannot be read is passed to ``on_error`` and the files
    found so far are still returned.
    """
    root = Path(root).absolute()
    allowed = {e.lower().lstrip(".") for e in extensions}
    files = []

    if recursive:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=on_error):
            for name in filenames:
                path = Path(dirpath) / name
                if _has_allowed_ext(name, allowed) and path.is_file():
                    files.append(path)
        return files

    try:
        with os.scandir(root) as entries:
            for entry in entries:
                if _has_allowed_ext(entry.name, allowed) and entry.is_file():
                    files.append(Path(entry.path))
    except OSError as e:
        if on_error:
            on_error(e)
    return files


def output_target(src: Path, options: BatchOptions, params: FFmpegParams) -> Path:
    """Compute the output path, mirroring the input's subdirectory."""
    rel_dir = Path(os.path.relpath(src, options.input_dir)).parent
    out_dir = Path(options.output_dir)
    if str(rel_dir) != ".":
        out_dir = out_dir / rel_dir

    # Executing with force_m4v converts to the real container first and renames afterwards
    if options.force_m4v and not options.execute:
        extension = FORCED_EXTENSION
    else:
        extension = params.format

    basename = format_filename(src.stem, options.replace_underscores)
    return out_dir / f"{basename}.{extension}"


def rename_to_forced_ext(path: Path, console: Console, dry_run: bool = False) -> Optional[Path]:
    """Rename a converted file to the forced extension. Returns the new path, or None on failure."""
    target = path.with_name(f"{path.stem}.{FORCED_EXTENSION}")

    if dry_run:
        console.echo(f"[DRY RUN] Would rename {path} to {target}")
        return target

    console.echo(f"Renaming {path} to {target}")
    if not path.exists():
        console.echo(f"Error: File {path} not found for renaming")
        return None
    try:
        path.rename(target)
    except OSError as e:
        console.echo(f"Error renaming file to .{FORCED_EXTENSION}: {e}")
        return None
    return target


def _convert(src: Path, dst: Path, cmds: List[List[str]], options: BatchOptions,
             console: Console) -> Tuple[Path, Optional[Path], str]:
    """Run the command(s) for one file and handle the outcome."""
    console.echo(f"Processing: {src}")
    console.echo(f"Output: {dst}")
    console.echo(f"Command: {core.format_cmds(cmds)}")
    console.log("transcode.start", LogLevel.DEBUG, file=src.name, dst=dst.name, passes=len(cmds))

    code = 0
    for i, cmd in enumerate(cmds, start=1):
        if len(cmds) > 1:
            console.echo(f"Running pass {i} of {len(cmds)}...")
        code = core.execute_cmd(cmd, console, verbose=options.verbose, label=src.name)
        if code != 0:
            break

    if code != 0:
        console.echo(f"Error: FFmpeg command failed with return code {code}")
        console.log("transcode.failed", LogLevel.ERROR, file=src.name, exit_code=code)
        console.echo("Checking input file...")
        core.print_file_info(src, console)
        return src, None, f"{STATUS_FAIL} (ffmpeg code {code})"

    console.echo("Conversion successful")
    final = dst
    if options.force_m4v:
        renamed = rename_to_forced_ext(dst, console)
        if renamed is None:
            console.echo(f"Warning: Failed to rename file to .{FORCED_EXTENSION}")
            console.log("transcode.rename_failed", LogLevel.WARN, file=dst.name)
        else:
            final = renamed
    console.log("transcode.complete", LogLevel.INFO, file=src.name, dst=final.name)
    return src, final, STATUS_OK


def process_file(src: Path, options: BatchOptions, params: FFmpegParams,
                 console: Console) -> Tuple[Path, Optional[Path], str]:
    """
    Convert (or show the conversion of) a single file.

    Files in a directory holding the ignore flag are left alone and come
    back as SKIP.

    Never raises: filesystem and process errors are reported and returned as
    a FAIL status so the rest of the batch continues.

    Returns:
        Tuple of (source, destination or None, status)
    """
    if should_ignore_file(src, options.ignore_flag):
        console.echo(f"Skipping: {src} (ignore flag found)")
        console.log("batch.skip", LogLevel.DEBUG, file=str(src), reason="ignore flag")
        return src, None, STATUS_SKIP

    try:
        dst = output_target(src, options, params)
        out_dir = dst.parent

        if not out_dir.exists():
            if options.dry_run:
                console.echo(f"[DRY RUN] Would create directory: {out_dir}")
            else:
                console.echo(f"Creating output directory: {out_dir}")
                out_dir.mkdir(parents=True, exist_ok=True)

        if options.execute and not options.dry_run and not check_file_access(dst, console):
            console.echo(f"Skipping {src} due to output file access issues.")
            return src, None, f"{STATUS_FAIL} (output not writable)"

        cmds = core.build_cmds(src, dst, params, options.analyze_duration, options.probe_size,
                               options.verbose)

        if options.dry_run:
            console.echo("[DRY RUN] Would execute:")
            console.echo(core.format_cmds(cmds))
            if options.force_m4v and dst.suffix != f".{FORCED_EXTENSION}":
                rename_to_forced_ext(dst, console, dry_run=True)
            return src, dst, STATUS_DRY_RUN

        if not options.execute:
            console.echo(f"Generated command for {src}:")
            console.echo(core.format_cmds(cmds))
            if options.force_m4v:
                console.echo(f"Note: If executed, the file will be converted to {params.format} "
                             f"then renamed to .{FORCED_EXTENSION}")
            return src, dst, STATUS_PREVIEW

        return _convert(src, dst, cmds, options, console)

    except (OSError, subprocess.SubprocessError, ValueError) as e:
        console.echo(f"Error processing {src}: {e}")
        console.log("batch.error", LogLevel.ERROR, file=str(src), error=str(e))
        return src, None, f"{STATUS_FAIL} ({e})"


def _is_preset_file(path: Path, preset_file: Optional[Path]) -> bool:
    if preset_file is None:
        return False
    try:
        return os.path.samefile(path, preset_file)
    except OSError:
        return False


def run_batch(options: BatchOptions, params: FFmpegParams, console: Console) -> RunCounters:
    """Discover media files under the input directory and process each one."""
    start_time = time.time()

    def _report(error: OSError) -> None:
        console.echo(f"Error accessing directory: {error}")
        console.log("discovery.error", LogLevel.WARN, error=str(error))

    media_files = iter_media_files(options.input_dir, options.recursive, options.extensions, on_error=_report)
    console.log("batch.start", LogLevel.DEBUG, files_found=len(media_files), source=str(options.input_dir),
                output=str(options.output_dir), dry_run=options.dry_run, execute=options.execute)

    counters = RunCounters()
    show_progress = options.execute and not options.dry_run
    for src in tqdm(media_files, desc="Converting files", unit="file", disable=not show_progress):
        if _is_preset_file(src, options.preset_file):
            continue

        _, _, status = process_file(src, options, params, console)
        if status == STATUS_SKIP:
            counters.skipped += 1
        elif status.startswith(STATUS_FAIL):
            counters.failed += 1
            console.echo(f"Failed to process: {src}")
        else:
            counters.processed += 1

    console.echo("Processing complete:")
    console.echo(f"  - Successfully processed: {counters.processed} files")
    console.echo(f"  - Skipped: {counters.skipped} files")
    console.echo(f"  - Failed: {counters.failed} files")
    if counters.processed == 0 and counters.skipped == 0 and counters.failed == 0:
        console.echo("No media files found in the specified directory.")

    console.log("batch.end", LogLevel.INFO,
                runtime=format_runtime(time.time() - start_time),
                processed=counters.processed,
                skipped=counters.skipped,
                failed=counters.failed)
    return counters
