"""
User-Agent construction for outbound Render API requests.

Format: ``render-mcp-server/<version> (<os> - <os version>)``, optionally
followed by the MCP client's own User-Agent.
"""

from __future__ import annotations

import platform
import re
import subprocess
import threading
from pathlib import Path
from typing import Callable, Optional

from render_mcp import __version__
from render_mcp.logging_utils import get_logger

logger = get_logger(__name__)

PRODUCT = "render-mcp-server"

# "Microsoft Windows [Version 10.0.19044.2604]"
_WINDOWS_VERSION_RE = re.compile(r"\[Version ([.\d]+)")

_OS_RELEASE = Path("/etc/os-release")


def _run(cmd: list[str]) -> Optional[str]:
    try:
        return subprocess.run(
            cmd, capture_output=True, text=True, timeout=2.0, check=True
        ).stdout
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Platform lookup {cmd[0]} failed: {e}")
        return None


def _linux_info(os_release: Path = _OS_RELEASE) -> tuple[str, str]:
    try:
        content = os_release.read_text()
    except OSError:
        return "Linux", ""

    for line in content.splitlines():
        if line.startswith("PRETTY_NAME="):
            parts = line[len("PRETTY_NAME="):].strip('"').split()
            if parts:
                return parts[0], parts[1] if len(parts) > 1 else ""
            break
    return "Linux", ""


def detect_os_info() -> str:
    """Describe the host OS. Spawns a subprocess or reads a file, so callers cache it."""
    system = platform.system()
    name, version = system, ""

    if system == "Windows":
        name = "Windows"
        output = _run(["cmd", "/c", "ver"])
        match = _WINDOWS_VERSION_RE.search(output or "")
        if match:
            version = match.group(1)
    elif system == "Darwin":
        name = "macOS"
        version = (_run(["sw_vers", "-productVersion"]) or "").strip()
    elif system == "Linux":
        name, version = _linux_info()
    elif not system:
        name = "unknown"

    return f"{name} - {version}" if version else name


class PlatformInfo:
    """
    Process-wide holder of the OS descriptor.

    The lookup runs at most once; the value never changes after that.
    """

    def __init__(self, detect: Callable[[], str] = detect_os_info):
        self._detect = detect
        self._value: Optional[str] = None
        self._lock = threading.Lock()

    def get(self) -> str:
        if self._value is None:
            with self._lock:
                if self._value is None:
                    self._value = self._detect()
        return self._value


_platform_info = PlatformInfo()


def get_platform_info() -> PlatformInfo:
    """Get the singleton platform info cache."""
    return _platform_info


def user_agent(client_user_agent: str = "", info: Optional[PlatformInfo] = None) -> str:
    """Build the provenance string, appending the caller's UA when given."""
    info = info or _platform_info
    ua = f"{PRODUCT}/{__version__} ({info.get()})"
    if client_user_agent:
        ua = f"{ua} {client_user_agent}"
    return ua
