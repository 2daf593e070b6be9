"""External converter invocation (LibreOffice, poppler), via WSL on Windows."""

import logging
import re
import shlex
import shutil
import subprocess
import sys
from pathlib import Path
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("soffice", "pdftoppm")

INSTALL_HINTS = {
    "wsl": ["sudo apt update", "sudo apt install -y libreoffice poppler-utils"],
    "Ubuntu/Debian": ["sudo apt install -y libreoffice poppler-utils"],
    "macOS (Homebrew)": ["brew install libreoffice poppler"],
}

_DRIVE_PATH = re.compile(r"^([A-Za-z]):(.*)")


class AssetToolError(Exception):
    """A required external converter is unavailable."""
    pass


class CommandResult(NamedTuple):
    success: bool
    stdout: str
    stderr: str


def is_windows() -> bool:
    return sys.platform == "win32"


def to_wsl_path(windows_path) -> str:
    """Convert a Windows path to its WSL mount path (E:\\Dev -> /mnt/e/Dev)."""
    normalized = str(windows_path).replace("\\", "/")
    match = _DRIVE_PATH.match(normalized)
    if match:
        return f"/mnt/{match.group(1).lower()}{match.group(2)}"
    return normalized


def command_exists(cmd: str) -> bool:
    if not is_windows():
        return shutil.which(cmd) is not None
    try:
        result = subprocess.run(["wsl", "which", cmd], capture_output=True, text=True)
    except OSError:
        return False
    return result.returncode == 0


def missing_tools(tools=REQUIRED_TOOLS) -> list[str]:
    return [tool for tool in tools if not command_exists(tool)]


def run_command(cmd: str, args: list[str], cwd: Optional[Path] = None) -> CommandResult:
    """Run a converter, through ``wsl bash -c`` on Windows.

    Path arguments must already be in the form the target shell expects.
    """
    if is_windows():
        command_line = shlex.join([cmd, *args])
        if cwd is not None:
            command_line = f"cd {shlex.quote(to_wsl_path(cwd))} && {command_line}"
        argv = ["wsl", "bash", "-c", command_line]
        run_cwd = None
    else:
        argv = [cmd, *args]
        run_cwd = cwd

    logger.debug(f"Running: {' '.join(argv)}")
    try:
        result = subprocess.run(argv, capture_output=True, text=True, cwd=run_cwd)
    except OSError as e:
        return CommandResult(False, "", str(e))

    return CommandResult(result.returncode == 0, result.stdout, result.stderr)


def native_path(path: Path) -> str:
    """Path as seen by the converter process."""
    return to_wsl_path(path) if is_windows() else str(path)
