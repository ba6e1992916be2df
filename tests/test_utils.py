"""Unit tests for logging, file and system helpers."""

import io
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from hbconv.utils import system_util
from hbconv.utils.file_util import check_file_access, collapse_converted, format_filename, should_ignore_file
from hbconv.utils.logger import Console, LogLevel, open_console
from hbconv.utils.time_util import format_runtime


class TestConsole:
    """Tests for the Console sink."""

    def test_log_format(self) -> None:
        stream = io.StringIO()
        Console(stream).log("batch.end", LogLevel.INFO, processed=2, name='a "b"', flag=True, none=None)
        line = stream.getvalue().strip()
        assert "| [INFO] | batch.end | " in line
        assert "processed=2" in line
        assert 'name="a \\"b\\""' in line
        assert "flag=true" in line
        assert "none=null" in line

    def test_level_filtering(self) -> None:
        stream = io.StringIO()
        console = Console(stream, LogLevel.INFO)
        console.log("hidden", LogLevel.DEBUG)
        console.log("shown", LogLevel.WARN)
        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_echo_writes_plain_line(self) -> None:
        stream = io.StringIO()
        Console(stream).echo("Skipping:", "a.mkv")
        assert stream.getvalue() == "Skipping: a.mkv\n"


class TestOpenConsole:
    """Tests for open_console."""

    def test_defaults_to_stdout(self) -> None:
        with open_console() as console:
            assert console.stream is sys.stdout

    def test_log_file_is_closed_on_exit(self, tmp_path: Path) -> None:
        log_path = tmp_path / "logs" / "run.log"
        with open_console(str(log_path)) as console:
            console.echo("hello")
            stream = console.stream
        assert stream.closed
        assert log_path.read_text() == "hello\n"

    def test_log_file_is_closed_on_error(self, tmp_path: Path) -> None:
        log_path = tmp_path / "run.log"
        with pytest.raises(RuntimeError):
            with open_console(str(log_path)) as console:
                stream = console.stream
                raise RuntimeError("boom")
        assert stream.closed

    def test_unopenable_log_file_falls_back_to_stdout(self, tmp_path: Path, capsys) -> None:
        blocker = tmp_path / "file"
        blocker.touch()
        with open_console(str(blocker / "run.log")) as console:
            assert console.stream is sys.stdout
        assert "Could not open log file" in capsys.readouterr().err


class TestFileUtil:
    """Tests for file_util helpers."""

    def test_format_filename(self) -> None:
        assert format_filename("my_home_video", True) == "my home video"
        assert format_filename("my_home_video", False) == "my_home_video"

    def test_should_ignore_file(self, tmp_path: Path) -> None:
        media = tmp_path / "a.mkv"
        assert not should_ignore_file(media, ".noconvert")
        (tmp_path / ".noconvert").touch()
        assert should_ignore_file(media, ".noconvert")
        assert not should_ignore_file(media, ".other")

    def test_collapse_converted(self) -> None:
        assert collapse_converted(Path("/m/converted/converted")) == Path("/m/converted")
        assert collapse_converted(Path("/m/converted/converted/x")) == Path("/m/converted/x")
        assert collapse_converted(Path("/m/converted")) == Path("/m/converted")

    def test_check_file_access_ok(self, tmp_path: Path, console) -> None:
        assert check_file_access(tmp_path / "out.mkv", console)
        assert not (tmp_path / ".write_test_temp").exists()

    def test_check_file_access_missing_dir(self, tmp_path: Path, console, console_stream) -> None:
        assert not check_file_access(tmp_path / "missing" / "out.mkv", console)
        assert "does not exist" in console_stream.getvalue()

    def test_check_file_access_read_only_target(self, tmp_path: Path, console, console_stream) -> None:
        target = tmp_path / "out.mkv"
        target.touch()
        with patch("hbconv.utils.file_util.os.access", return_value=False):
            assert not check_file_access(target, console)
        assert "is not writable" in console_stream.getvalue()

    def test_check_file_access_unwritable_dir(self, tmp_path: Path, console, console_stream) -> None:
        with patch.object(Path, "write_bytes", side_effect=PermissionError("denied")):
            assert not check_file_access(tmp_path / "out.mkv", console)
        assert f"Output directory '{tmp_path}' is not writable." in console_stream.getvalue()


class TestSystemUtil:
    """Tests for system_util helpers."""

    def test_all_tools_present(self) -> None:
        with patch("shutil.which", return_value="/usr/bin/tool"):
            result = system_util.check_required_tools(["ffmpeg", "ffprobe"])
        assert result.ok
        assert result.missing == ()

    def test_missing_tools_reported(self) -> None:
        with patch("shutil.which", side_effect=lambda b: None if b == "ffprobe" else "/usr/bin/ffmpeg"):
            result = system_util.check_required_tools(["ffmpeg", "ffprobe"])
        assert not result.ok
        assert result.missing == ("ffprobe",)

    def test_run_cmd_returns_output(self) -> None:
        code, out, err = system_util.run_cmd([sys.executable, "-c", "print('hi')"])
        assert code == 0
        assert out.strip() == "hi"

    def test_run_cmd_replaces_undecodable_bytes(self) -> None:
        script = "import sys; sys.stdout.buffer.write(b'TAG:title=Am\\xe9lie\\n')"
        code, out, _ = system_util.run_cmd([sys.executable, "-c", script])
        assert code == 0
        assert out.startswith("TAG:title=Am")


def test_format_runtime() -> None:
    assert format_runtime(3725.9) == "01:02:05"
    assert format_runtime(0) == "00:00:00"


def test_env_overrides_constants(monkeypatch) -> None:
    import importlib

    from hbconv.utils import constants

    monkeypatch.setenv("HBCONV_PROBE_SIZE", "5000")
    monkeypatch.setenv("HBCONV_ANALYZE_DURATION", "not-a-number")
    try:
        reloaded = importlib.reload(constants)
        assert reloaded.PROBE_SIZE == 5000
        assert reloaded.ANALYZE_DURATION == 100000000
    finally:
        monkeypatch.delenv("HBCONV_PROBE_SIZE")
        monkeypatch.delenv("HBCONV_ANALYZE_DURATION")
        importlib.reload(constants)
