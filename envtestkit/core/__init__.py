"""
Core functionality for envtestkit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    EnvtestKitError,
    ConfigurationError,
    ResolutionError,
    UnsupportedPlatformError,
    MalformedVersionError,
    NoVersionsAvailableError,
    VersionListingError,
    DirectoryCreationFailedError,
    DownloadFailedError,
    ArchiveError,
    UnexpectedArchiveEntryError,
    ExtractionFailedError,
    PermissionSetFailedError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .version import (
    Version,
    compare_versions,
    sort_versions,
    latest_version,
)

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
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "Version",
    "compare_versions",
    "sort_versions",
    "latest_version",
]
