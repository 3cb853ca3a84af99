"""
Directory layout for downloaded binaries.

Directory Structure:
    envtest directory (~/.jenvtest/ or %USERPROFILE%\\.jenvtest\\):
        - binaries/                         : one directory per version and platform
          - 1.26.1-linux-amd64/
            - kube-apiserver
            - etcd
            - kubectl

A version directory is created fresh by each download and never merged with
an existing one; retention and eviction are left to the caller.
"""

import logging
import os
from pathlib import Path
from typing import List, Union

from envtestkit.core.exceptions import (
    ConfigurationError,
    DirectoryCreationFailedError,
    MalformedVersionError,
)
from envtestkit.core.version import Version

logger = logging.getLogger(__name__)

DEFAULT_DIR_NAME = ".jenvtest"
DEFAULT_BINARIES_DIR = "binaries"


def get_default_envtest_dir() -> Path:
    """
    Get the platform-specific default envtest directory.

    Returns:
        Path: %USERPROFILE%\\.jenvtest on Windows, ~/.jenvtest elsewhere
    """
    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigurationError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine envtest directory."
            )
        return Path(user_profile) / DEFAULT_DIR_NAME
    else:  # Linux/macOS
        return Path.home() / DEFAULT_DIR_NAME


def get_binaries_root(
    envtest_dir: Union[str, Path], binaries_dir: str = DEFAULT_BINARIES_DIR
) -> Path:
    """Get the directory holding one subdirectory per downloaded version."""
    return Path(envtest_dir) / binaries_dir


def get_target_directory(
    binaries_root: Union[str, Path], version: str, platform_suffix: str
) -> Path:
    """
    Compute the directory for a version and platform without touching disk.

    Example:
        >>> get_target_directory('/home/u/.jenvtest/binaries', '1.26.1', '-linux-amd64')
        PosixPath('/home/u/.jenvtest/binaries/1.26.1-linux-amd64')
    """
    return Path(binaries_root) / f"{version}{platform_suffix}"


def prepare_target_directory(
    binaries_root: Union[str, Path], version: str, platform_suffix: str
) -> Path:
    """
    Create a fresh directory for a version and platform.

    Missing parents are created. An existing directory (or file) at the
    target path is a conflict: re-downloading must not mix old and new files.

    Returns:
        Path to the created directory

    Raises:
        DirectoryCreationFailedError: If the path exists or cannot be created
    """
    target = get_target_directory(binaries_root, version, platform_suffix)

    try:
        target.mkdir(parents=True, exist_ok=False)
    except FileExistsError as e:
        raise DirectoryCreationFailedError(target, "path already exists") from e
    except OSError as e:
        raise DirectoryCreationFailedError(target, str(e)) from e

    logger.debug(f"Created binaries directory: {target}")
    return target


def find_installed_versions(
    binaries_root: Union[str, Path], platform_suffix: str
) -> List[str]:
    """
    List versions that already have a directory for the given platform.

    Directory names that don't carry a parseable version are ignored.

    Returns:
        Version strings sorted ascending
    """
    root = Path(binaries_root)
    if not root.is_dir():
        return []

    installed = []
    for entry in root.iterdir():
        if not entry.is_dir() or not entry.name.endswith(platform_suffix):
            continue
        version = entry.name[: -len(platform_suffix)]
        try:
            installed.append(Version(version))
        except MalformedVersionError:
            logger.debug(f"Ignoring unrecognized directory: {entry}")

    return [v.original for v in sorted(installed)]


__all__ = [
    "DEFAULT_BINARIES_DIR",
    "get_default_envtest_dir",
    "get_binaries_root",
    "get_target_directory",
    "prepare_target_directory",
    "find_installed_versions",
]
