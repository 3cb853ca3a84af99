"""
Streaming HTTP download with progress reporting.

Archives are written to disk chunk by chunk and never held in memory as a
whole. Failed downloads are not retried or resumed; the caller decides what
to do with a partially written destination.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
PROGRESS_INTERVAL_SECONDS = 0.5


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: float = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Stream the body of a URL into a local file.

    Args:
        url: URL to download from
        destination: Local path to write; truncated if it exists
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds
        session: Optional requests session to issue the request with

    Returns:
        Path to downloaded file

    Raises:
        RequestException: If the HTTP request fails or returns an error status
        OSError: If the destination cannot be written
        ValueError: If URL or destination is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    http = session or requests

    logger.debug(f"Downloading from {url} to {destination}")

    with http.get(url, stream=True, timeout=timeout, allow_redirects=True) as response:
        response.raise_for_status()

        total_size = _parse_content_length(response.headers.get("content-length"))

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= PROGRESS_INTERVAL_SECONDS
                    or downloaded == total_size
                ):
                    progress_callback(
                        _make_progress(downloaded, total_size, current_time - start_time)
                    )
                    last_progress_time = current_time

    # Unknown length never hits downloaded == total_size above
    if progress_callback and total_size == 0:
        progress_callback(_make_progress(downloaded, 0, time.time() - start_time))

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _parse_content_length(value: Optional[str]) -> int:
    # Missing or malformed lengths are treated as unknown (0)
    try:
        total_size = int(value) if value else 0
    except ValueError:
        logger.debug(f"Ignoring invalid content-length: {value!r}")
        return 0
    return max(total_size, 0)


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=downloaded / elapsed if elapsed > 0 else 0,
    )


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "download_file",
    "format_progress",
    "RequestException",
]
