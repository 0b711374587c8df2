"""Cross-platform helpers for git-sync."""

import os
import platform
import socket
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class PlatformType(Enum):
    """Supported platform types."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


class PlatformInfo:
    """Platform information and utilities."""

    def __init__(self):
        """Initialize platform detection."""
        self._platform_type = self._detect_platform()

    def _detect_platform(self) -> PlatformType:
        """Detect the current platform."""
        system = platform.system().lower()

        if system == "windows":
            return PlatformType.WINDOWS
        elif system == "darwin":
            return PlatformType.MACOS
        elif system == "linux":
            return PlatformType.LINUX
        else:
            return PlatformType.UNKNOWN

    @property
    def platform_type(self) -> PlatformType:
        """Get the detected platform type."""
        return self._platform_type

    @property
    def is_windows(self) -> bool:
        """Check if running on Windows."""
        return self._platform_type == PlatformType.WINDOWS


# Global platform info instance
_platform_info: Optional[PlatformInfo] = None


def get_platform_info() -> PlatformInfo:
    """Get the global platform info instance."""
    global _platform_info
    if _platform_info is None:
        _platform_info = PlatformInfo()
    return _platform_info


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Normalize a path for the current platform.

    Args:
        path: Path to normalize

    Returns:
        Normalized Path object
    """
    if isinstance(path, str):
        path = Path(path)

    # Expand user home directory (~) first, then resolve to absolute path
    return path.expanduser().resolve()


def get_host_name() -> str:
    """Name of the machine, used in default commit messages."""
    return platform.node() or socket.gethostname() or "unknown-host"


def supports_color(stream=None) -> bool:
    """
    Check whether ANSI colors should be written to the given stream.

    Colors are disabled by the NO_COLOR convention, for non-terminal streams,
    and on Windows consoles without ANSI support.
    """
    if os.getenv("NO_COLOR"):
        return False

    stream = stream if stream is not None else sys.stderr
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False

    if get_platform_info().is_windows:
        return bool(os.getenv("WT_SESSION") or os.getenv("ANSICON") or os.getenv("TERM"))

    return True
