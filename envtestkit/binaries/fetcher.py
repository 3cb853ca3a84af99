"""Download of kubebuilder-tools archives into temporary files."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from envtestkit.config.settings import EnvtestConfig
from envtestkit.core.download import DownloadProgress, download_file
from envtestkit.core.exceptions import DownloadFailedError
from envtestkit.core.platform import PlatformInfo

logger = logging.getLogger(__name__)

TEMP_PREFIX = "kubebuilder-tools"
TEMP_SUFFIX = ".tar.gz"


class ArchiveFetcher:
    """Streams the archive for a version and platform to a temporary file."""

    def __init__(
        self,
        config: Optional[EnvtestConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or EnvtestConfig()
        self.session = session

    def build_url(self, version: str, platform: PlatformInfo) -> str:
        """
        Build the download URL for a version and platform.

        The version is used verbatim; no 'v' prefix is added.

        Example:
            >>> ArchiveFetcher().build_url('1.26.1', PlatformInfo('linux', 'amd64'))
            'https://storage.googleapis.com/kubebuilder-tools/kubebuilder-tools-1.26.1-linux-amd64.tar.gz'
        """
        return (
            f"{self.config.storage_url}/{self.config.bucket}/"
            f"{self.config.archive_name(version, platform)}"
        )

    def fetch(
        self,
        version: str,
        platform: PlatformInfo,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Download an archive to a new temporary file.

        The caller owns the returned file and must delete it.

        Returns:
            Path to the complete, closed archive file

        Raises:
            DownloadFailedError: If the request, the response or the write fails
        """
        url = self.build_url(version, platform)

        fd, temp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX)
        os.close(fd)
        temp_path = Path(temp_name)

        logger.debug(f"Downloading binary from url: {url} to temp file: {temp_path}")

        try:
            download_file(
                url,
                temp_path,
                progress_callback=progress_callback,
                timeout=self.config.timeout,
                session=self.session,
            )
        except (RequestException, OSError, ValueError) as e:
            try:
                temp_path.unlink()
            except OSError as cleanup_error:
                logger.warning(
                    f"Unable to delete temp file: {temp_path}: {cleanup_error}"
                )
            raise DownloadFailedError(f"Failed to download {url}: {e}") from e

        return temp_path


__all__ = ["ArchiveFetcher"]
