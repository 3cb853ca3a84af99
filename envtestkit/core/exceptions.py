"""
Centralized exception hierarchy for envtestkit.

Every failure of the provisioning pipeline derives from EnvtestKitError and
records the stage it originated from, so callers can tell whether resolving,
preparing, fetching or extracting went wrong.
"""

from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class EnvtestKitError(Exception):
    """Base exception for all envtestkit errors."""

    stage = "unknown"


class ConfigurationError(EnvtestKitError):
    """Invalid configuration file or value."""

    stage = "config"


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(EnvtestKitError):
    """Base exception for platform and version resolution errors."""

    stage = "resolve"


class UnsupportedPlatformError(ResolutionError):
    """Raised when the host operating system cannot be mapped to a token."""

    pass


class MalformedVersionError(ResolutionError):
    """Raised when a version string is not a major.minor.patch sequence."""

    def __init__(self, version: str, reason: str = ""):
        self.version = version
        msg = f"Malformed version: {version!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class NoVersionsAvailableError(ResolutionError):
    """Raised when no remote version matches the current platform."""

    pass


class VersionListingError(ResolutionError):
    """Raised when the remote bucket listing cannot be read."""

    pass


# ============================================================================
# Pipeline Exceptions
# ============================================================================


class DirectoryCreationFailedError(EnvtestKitError):
    """Raised when the target directory exists already or cannot be created."""

    stage = "prepare"

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        msg = f"Cannot create directory: {self.path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DownloadFailedError(EnvtestKitError):
    """Raised on any transport or I/O error while fetching an archive."""

    stage = "fetch"


class ArchiveError(EnvtestKitError):
    """Base exception for archive extraction errors."""

    stage = "extract"


class UnexpectedArchiveEntryError(ArchiveError):
    """Raised when an archive entry matches none of the expected binaries."""

    def __init__(self, entry_name: str):
        self.entry_name = entry_name
        super().__init__(f"Unexpected entry with name: {entry_name}")


class ExtractionFailedError(ArchiveError):
    """Raised when decompressing or copying archive contents fails."""

    pass


class PermissionSetFailedError(ArchiveError):
    """Raised when an extracted binary cannot be made executable."""

    def __init__(self, path: Union[str, Path], reason: Optional[str] = None):
        self.path = Path(path)
        msg = f"Cannot make the file executable: {self.path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


__all__ = [
    "EnvtestKitError",
    "ConfigurationError",
    "ResolutionError",
    "UnsupportedPlatformError",
    "MalformedVersionError",
    "NoVersionsAvailableError",
    "VersionListingError",
    "DirectoryCreationFailedError",
    "DownloadFailedError",
    "ArchiveError",
    "UnexpectedArchiveEntryError",
    "ExtractionFailedError",
    "PermissionSetFailedError",
]
