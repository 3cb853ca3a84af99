"""
Remote catalog of kubebuilder-tools releases.

The bucket is listed through the Cloud Storage JSON API. Object names look
like ``kubebuilder-tools-1.26.1-linux-amd64.tar.gz``; the version is whatever
sits between the archive prefix and the next '-'. Versions containing a '-'
themselves (pre-releases such as 1.27.0-rc.1) therefore lose their suffix
and read as the release they precede.
"""

import logging
from typing import Iterator, List, Optional

import requests
from requests.exceptions import RequestException

from envtestkit.config.settings import EnvtestConfig
from envtestkit.core.exceptions import (
    MalformedVersionError,
    NoVersionsAvailableError,
    VersionListingError,
)
from envtestkit.core.platform import PlatformInfo
from envtestkit.core.version import Version, latest_version, strip_version_prefix

logger = logging.getLogger(__name__)

LISTING_FIELDS = "items(name),nextPageToken"


def version_from_object_name(name: str, prefix: str) -> str:
    """
    Derive the version embedded in an archive name.

    Args:
        name: Object name from the bucket listing
        prefix: Literal archive prefix, e.g. 'kubebuilder-tools-'

    Returns:
        Version string without a leading 'v'

    Raises:
        MalformedVersionError: If no '-' follows the version

    Example:
        >>> version_from_object_name('kubebuilder-tools-v1.2.3-linux-amd64.tar.gz', 'kubebuilder-tools-')
        '1.2.3'
    """
    stripped = name.replace(prefix, "", 1)
    end = stripped.find("-")
    if end < 0:
        raise MalformedVersionError(name, "no version delimiter in object name")
    return strip_version_prefix(stripped[:end])


class RemoteVersionCatalog:
    """
    Lists the versions published in the kubebuilder-tools bucket.

    Example:
        >>> catalog = RemoteVersionCatalog()
        >>> catalog.find_latest(detect_platform())
        '1.30.0'
    """

    def __init__(
        self,
        config: Optional[EnvtestConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or EnvtestConfig()
        self.session = session or requests.Session()

    @property
    def listing_endpoint(self) -> str:
        return f"{self.config.listing_url}/{self.config.bucket}/o"

    def _iter_pages(self) -> Iterator[dict]:
        page_token = None
        while True:
            params = {"fields": LISTING_FIELDS}
            if page_token:
                params["pageToken"] = page_token

            try:
                response = self.session.get(
                    self.listing_endpoint, params=params, timeout=self.config.timeout
                )
                response.raise_for_status()
                page = response.json()
            except (RequestException, ValueError) as e:
                raise VersionListingError(
                    f"Failed to list bucket {self.config.bucket}: {e}"
                ) from e

            yield page

            page_token = page.get("nextPageToken")
            if not page_token:
                return

    def list_object_names(self) -> List[str]:
        """
        List every object name in the bucket, following pagination.

        Raises:
            VersionListingError: If the listing request fails
        """
        logger.debug(f"Listing objects in {self.listing_endpoint}")
        names = []
        for page in self._iter_pages():
            names.extend(item["name"] for item in page.get("items", []))
        logger.debug(f"Found {len(names)} objects in bucket {self.config.bucket}")
        return names

    def list_versions(self, platform: PlatformInfo) -> List[str]:
        """
        List versions published for a platform, sorted ascending.

        Raises:
            VersionListingError: If the listing request fails
            MalformedVersionError: If a matching object name has no valid version
        """
        versions = {}
        for name in self.list_object_names():
            if not platform.matches(name):
                continue
            version = version_from_object_name(name, self.config.archive_prefix)
            # Validates the string; malformed names are a hard error
            versions.setdefault(Version(version), version)

        return [versions[v] for v in sorted(versions)]

    def find_latest(self, platform: PlatformInfo) -> str:
        """
        Find the highest version published for a platform.

        Raises:
            NoVersionsAvailableError: If no object matches the platform
        """
        versions = self.list_versions(platform)
        if not versions:
            raise NoVersionsAvailableError(
                f"Cannot find relevant version to download for {platform}"
            )
        latest = latest_version(versions)
        logger.info(f"Latest version for {platform}: {latest}")
        return latest


__all__ = [
    "RemoteVersionCatalog",
    "version_from_object_name",
]
