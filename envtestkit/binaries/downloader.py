"""
Download orchestration for the control plane binaries.

A download runs start to finish on the calling thread:

1. Resolve the version (given, or the latest one in the remote catalog)
2. Create the version directory
3. Download the archive to a temporary file
4. Extract the three binaries into the directory
5. Delete the temporary file

A failure at any step aborts the download. The version directory is left as
it is so it can be inspected; removing it is up to the caller.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from envtestkit.binaries.catalog import RemoteVersionCatalog
from envtestkit.binaries.extractor import extract_binaries
from envtestkit.binaries.fetcher import ArchiveFetcher
from envtestkit.config.settings import EnvtestConfig
from envtestkit.core.directory import (
    find_installed_versions,
    get_target_directory,
    prepare_target_directory,
)
from envtestkit.core.download import DownloadProgress
from envtestkit.core.exceptions import EnvtestKitError
from envtestkit.core.platform import PlatformInfo, detect_platform
from envtestkit.core.version import Version

logger = logging.getLogger(__name__)


class BinaryDownloader:
    """
    Downloads kubebuilder-tools binaries into the envtest directory.

    Example:
        >>> downloader = BinaryDownloader()
        >>> directory = downloader.download_latest()
        >>> print(f"Binaries in: {directory}")
    """

    def __init__(
        self,
        config: Optional[EnvtestConfig] = None,
        platform: Optional[PlatformInfo] = None,
        catalog: Optional[RemoteVersionCatalog] = None,
        fetcher: Optional[ArchiveFetcher] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize binary downloader.

        Args:
            config: Optional configuration. If None, uses defaults.
            platform: Optional platform tokens. If None, detects the host.
            catalog: Optional remote catalog. If None, creates one from config.
            fetcher: Optional archive fetcher. If None, creates one from config.
            progress_callback: Optional callback for archive download progress
        """
        self.config = config or EnvtestConfig()
        self.platform = platform or detect_platform()
        self.catalog = catalog or RemoteVersionCatalog(self.config)
        self.fetcher = fetcher or ArchiveFetcher(self.config)
        self.progress_callback = progress_callback

    def download(self, version: str) -> Path:
        """
        Download and extract the binaries of a version.

        Args:
            version: Version string used verbatim in the URL and directory name

        Returns:
            Directory containing the extracted binaries

        Raises:
            MalformedVersionError: If the version cannot be parsed
            DirectoryCreationFailedError: If the version directory already exists
            DownloadFailedError: If the archive cannot be downloaded
            ArchiveError: If the archive content is not as expected
        """
        try:
            Version(version)
            logger.info(f"Downloading binaries with version: {version}")

            directory = prepare_target_directory(
                self.config.binaries_root, version, self.platform.platform_suffix()
            )
            archive = self.fetcher.fetch(
                version, self.platform, progress_callback=self.progress_callback
            )
            try:
                extract_binaries(archive, directory)
            finally:
                self._remove_archive(archive)
        except EnvtestKitError as e:
            logger.error(f"Download of {version} failed during {e.stage}: {e}")
            raise

        logger.info(f"Binaries for {version} ready in {directory}")
        return directory

    def download_latest(self) -> Path:
        """
        Download the latest version published for the platform.

        Raises:
            NoVersionsAvailableError: If no version is published for the platform
        """
        try:
            version = self.catalog.find_latest(self.platform)
        except EnvtestKitError as e:
            logger.error(
                f"Download of latest version for {self.platform} failed during {e.stage}: {e}"
            )
            raise

        return self.download(version)

    def list_remote_versions(self) -> List[str]:
        """List versions published for the platform, sorted ascending."""
        return self.catalog.list_versions(self.platform)

    def list_installed_versions(self) -> List[str]:
        """List versions already downloaded for the platform, sorted ascending."""
        return find_installed_versions(
            self.config.binaries_root, self.platform.platform_suffix()
        )

    def get_installed_directory(self, version: str) -> Optional[Path]:
        """Get the directory of a downloaded version, or None if absent."""
        directory = get_target_directory(
            self.config.binaries_root, version, self.platform.platform_suffix()
        )
        return directory if directory.is_dir() else None

    @staticmethod
    def _remove_archive(archive: Path) -> None:
        try:
            archive.unlink()
        except OSError as e:
            logger.warning(f"Unable to delete temp file: {archive}: {e}")


__all__ = ["BinaryDownloader"]
