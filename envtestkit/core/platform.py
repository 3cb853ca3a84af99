"""
Platform detection for envtestkit.

Resolves the host operating system and CPU architecture into the two tokens
used by the kubebuilder-tools bucket, e.g. ``linux``/``amd64`` or
``darwin``/``arm64``. The tokens select the archive to download and filter
the remote listing.

Usage:
    from envtestkit.core.platform import detect_platform

    info = detect_platform()
    print(info.os_name, info.os_arch)
    print(info.platform_suffix())  # '-linux-amd64'
"""

import functools
import platform
from dataclasses import dataclass

from envtestkit.core.exceptions import UnsupportedPlatformError


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform tokens used in archive names and directory names.

    Attributes:
        os_name: Operating system token ('linux', 'darwin', 'windows')
        os_arch: CPU architecture token ('amd64', 'arm64', 'ppc64le', 's390x')
    """

    os_name: str
    os_arch: str

    def platform_string(self) -> str:
        """
        Get the platform string used in archive names.

        Example:
            >>> PlatformInfo('linux', 'amd64').platform_string()
            'linux-amd64'
        """
        return f"{self.os_name}-{self.os_arch}"

    def platform_suffix(self) -> str:
        """
        Get the suffix appended to a version to name its binaries directory.

        Example:
            >>> PlatformInfo('darwin', 'arm64').platform_suffix()
            '-darwin-arm64'
        """
        return f"-{self.platform_string()}"

    def matches(self, name: str) -> bool:
        """Check whether a name contains both platform tokens."""
        return self.os_name in name and self.os_arch in name

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform tokens.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the operating system is not supported
    """
    return PlatformInfo(os_name=_detect_os(), os_arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS token: 'linux', 'darwin' or 'windows'
    """
    system = platform.system().lower()

    if system == "linux":
        return "linux"
    elif system == "darwin":
        return "darwin"
    elif system == "windows":
        return "windows"
    else:
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'amd64', 'arm64', 'ppc64le', 's390x'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    else:
        # ppc64le and s390x are already named the way the bucket names them
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
