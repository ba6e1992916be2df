"""
Utility functions for running system commands and verifying binary availability.

Functions:
    - run_cmd: Executes a system command and returns its exit code along with its
      standard output and error streams.
    - check_required_tools: Checks which of the given binaries are missing from
      the system's PATH.
"""
import shutil
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class ToolCheck:
    """Result of looking up the external tools on PATH."""
    missing: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing


def run_cmd(cmd: List[str]) -> Tuple[int, str, str]:
    """Run a command and return (code, stdout, stderr)."""
    p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, errors="replace")
    return p.returncode, p.stdout, p.stderr


def check_required_tools(binaries: Iterable[str]) -> ToolCheck:
    """Check that every binary exists on PATH."""
    return ToolCheck(missing=tuple(b for b in binaries if shutil.which(b) is None))
