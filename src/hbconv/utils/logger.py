"""
Provides structured logging with log levels and an explicit output sink.

Log lines carry a UTC timestamp, the level and an event name followed by
key-value pairs, which keeps them easy to grep. Plain text (generated
commands, preset summaries) is written verbatim. All output of a run goes
through one ``Console`` so it can be redirected to a log file without
touching ``sys.stdout``.
"""
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, TextIO

from tqdm import tqdm

_separator = " | "


class LogLevel(Enum):
    """Log level enumeration."""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


def _format_kv(data: Dict[str, Any]) -> str:
    """Format key-value pairs for logging."""
    parts = []
    for key, value in data.items():
        if isinstance(value, str):
            # Escape quotes and newlines to keep log entries single-line.
            escaped = value.replace("\r", "\\r").replace("\n", "\\n")
            escaped = escaped.replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        elif value is None:
            parts.append(f'{key}=null')
        elif isinstance(value, bool):
            parts.append(f'{key}={str(value).lower()}')
        else:
            parts.append(f'{key}={value}')
    return _separator.join(parts)


class Console:
    """Writes log events and plain lines to a single text stream."""

    def __init__(self, stream: Optional[TextIO] = None, level: LogLevel = LogLevel.INFO):
        self.stream = stream if stream is not None else sys.stdout
        self.level = level

    def _write_line(self, text: str) -> None:
        tqdm.write(text, file=self.stream)
        self.stream.flush()

    def should_log(self, level: LogLevel) -> bool:
        """Check if a message at the given level should be logged."""
        return level.value >= self.level.value

    def log(self, event: str, level: LogLevel = LogLevel.INFO, **kwargs) -> None:
        """
        Structured logging function.

        Args:
            event: Event name (e.g., 'batch.skip', 'transcode.complete')
            level: Log level (TRACE, DEBUG, INFO, WARN, ERROR)
            **kwargs: Key-value pairs to log
        """
        if not self.should_log(level):
            return

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        header = f"{timestamp}{_separator}[{level.name}]{_separator}{event}"
        kv_str = _format_kv(kwargs) if kwargs else ""
        if kv_str:
            self._write_line(f"{header}{_separator}{kv_str}")
        else:
            self._write_line(header)

    def echo(self, *parts: Any) -> None:
        """Write a plain line, like print()."""
        self._write_line(" ".join(str(p) for p in parts))


@contextmanager
def open_console(log_file: Optional[str] = None, level: LogLevel = LogLevel.INFO) -> Iterator[Console]:
    """
    Acquire the output sink for a run.

    With ``log_file`` every line of the run is written to that file, which is
    closed again however the block exits. Without it the console writes to
    stdout. A log file that cannot be opened is reported on stderr and the
    run continues on stdout.
    """
    if not log_file:
        yield Console(sys.stdout, level)
        return

    log_path = Path(log_file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(log_path, "w", encoding="utf-8", buffering=1)
    except OSError as e:
        print(f"Error: Could not open log file: {log_file} ({e})", file=sys.stderr, flush=True)
        yield Console(sys.stdout, level)
        return

    try:
        yield Console(handle, level)
    finally:
        handle.close()
