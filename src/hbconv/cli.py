"""
hb-ffmpeg-conv: apply a saved HandBrake preset to media files with ffmpeg.

The preset JSON is translated into ffmpeg options, which are then either
shown (``--show-preset``), printed per file (default), simulated
(``--dry-run``) or executed (``--execute``) for every media file found in
the input directory.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import hbconv as hbconv_module
from hbconv.preset import (
    PresetError,
    extract_settings,
    format_preset_summary,
    load_preset_file,
    parse_audio_copy,
    to_ffmpeg_params,
)
from hbconv.transcode import BatchOptions, run_batch
from hbconv.utils import LogLevel, open_console, system_util
from hbconv.utils.constants import (
    ANALYZE_DURATION,
    CONVERTED_FOLDER,
    DEFAULT_IGNORE_FLAG,
    FORCED_EXTENSION,
    LOG_FILE,
    PROBE_SIZE,
    REQUIRED_BINARIES,
)
from hbconv.utils.file_util import collapse_converted
from hbconv.utils.logger import Console


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="hb-ffmpeg-conv",
        description="Convert a saved HandBrake JSON preset to ffmpeg syntax and apply it to media files.",
        epilog="Files are skipped if the ignore flag file (default: .noconvert) exists in the same directory. "
               "By default, underscores in filenames are replaced with spaces.",
    )
    parser.add_argument("preset_file", help="HandBrake preset JSON file")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Process media files recursively in subdirectories")
    parser.add_argument("-e", "--execute", action="store_true", help="Execute the generated ffmpeg commands")
    parser.add_argument("-d", "--dry-run", action="store_true",
                        help="Show what would be done without actually doing it")
    parser.add_argument("-p", "--show-preset", action="store_true",
                        help="Show only the ffmpeg equivalent of the preset")
    parser.add_argument("-i", "--input-dir", help="Input directory (default: same as JSON file)")
    parser.add_argument("-o", "--output-dir", help="Output directory (default: input_dir/converted)")
    parser.add_argument("-m", "--force-m4v", action="store_true",
                        help="Force output extension to .m4v regardless of container")
    parser.add_argument("-u", "--no-underscore-replace", action="store_true",
                        help="Don't replace underscores with spaces in output filenames")
    parser.add_argument("--ignore-flag", default=DEFAULT_IGNORE_FLAG,
                        help=f"Custom ignore flag file (default: {DEFAULT_IGNORE_FLAG})")
    parser.add_argument("--verbose", action="store_true", help="Show verbose output and ffmpeg logs")
    parser.add_argument("-l", "--log", default=LOG_FILE,
                        help="Write all output to this file instead of the console (default: $HBCONV_LOG_FILE)")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {hbconv_module.__version__}")
    return parser


def _run(args: argparse.Namespace, console: Console) -> int:
    try:
        settings = extract_settings(load_preset_file(args.preset_file))
    except PresetError as e:
        print(f"Error: {e}", file=sys.stderr, flush=True)
        console.log("startup.error", LogLevel.ERROR, msg=str(e), preset=args.preset_file)
        return 1

    params = to_ffmpeg_params(settings)
    output_format = params.format
    if args.force_m4v and not args.execute:
        output_format = FORCED_EXTENSION
        console.echo(f"Forcing output extension to .{FORCED_EXTENSION}")
    elif args.force_m4v:
        console.echo(f"Force m4v is enabled. Files will be converted to {params.format} first, "
                     f"then renamed to .{FORCED_EXTENSION}")

    if args.show_preset:
        for line in format_preset_summary(params, output_format, ANALYZE_DURATION, PROBE_SIZE,
                                          audio_passthrough=parse_audio_copy(settings.audio_encoder)):
            console.echo(line)
        return 0

    preset_file = Path(args.preset_file)
    if args.input_dir:
        input_dir = Path(args.input_dir)
    else:
        input_dir = preset_file.parent
        console.echo(f"Using media directory: {input_dir}")

    if args.output_dir:
        output_dir = Path(args.output_dir)
    else:
        output_dir = input_dir / CONVERTED_FOLDER
        console.echo(f"Using output directory: {output_dir}")
    output_dir = collapse_converted(output_dir)

    if not output_dir.exists() and not args.dry_run:
        console.echo(f"Creating output directory: {output_dir}")
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Error creating output directory: {e}", file=sys.stderr, flush=True)
            return 1

    console.echo(f"Searching for media files in {input_dir}")
    console.echo(f"Files with the '{args.ignore_flag}' file in their directory will be skipped")
    console.echo(f"Output directory set to: {output_dir}")
    console.echo(f"Using analyzeduration: {ANALYZE_DURATION}, probesize: {PROBE_SIZE}")
    if not args.no_underscore_replace:
        console.echo("Underscores in filenames will be replaced with spaces in output files")
    else:
        console.echo("Output filenames will maintain the same format as input filenames")
    console.echo("Recursive search enabled" if args.recursive else "Non-recursive search")
    if args.verbose:
        console.echo("Verbose output enabled")

    options = BatchOptions(
        input_dir=input_dir,
        output_dir=output_dir,
        preset_file=preset_file,
        execute=args.execute,
        dry_run=args.dry_run,
        force_m4v=args.force_m4v,
        replace_underscores=not args.no_underscore_replace,
        recursive=args.recursive,
        ignore_flag=args.ignore_flag,
        analyze_duration=ANALYZE_DURATION,
        probe_size=PROBE_SIZE,
        verbose=args.verbose,
    )
    counters = run_batch(options, params, console)
    return 0 if counters.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    tools = system_util.check_required_tools(REQUIRED_BINARIES)
    if not tools.ok:
        for binary in tools.missing:
            print(f"Error: {binary} is required but not installed. Please install {binary}.",
                  file=sys.stderr, flush=True)
        return 1

    level = LogLevel.DEBUG if args.verbose else LogLevel.INFO

    with open_console(args.log, level) as console:
        return _run(args, console)


if __name__ == "__main__":
    sys.exit(main())
