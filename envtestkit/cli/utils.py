"""
Shared utilities for CLI commands.
"""

import logging

from envtestkit.binaries.downloader import BinaryDownloader
from envtestkit.config.settings import load_config
from envtestkit.core.download import DownloadProgress

logger = logging.getLogger(__name__)


def log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloading: {progress}")


def create_downloader(args) -> BinaryDownloader:
    """
    Build a downloader from the global CLI options.

    Raises:
        ConfigurationError: If the configuration file is invalid
    """
    config = load_config(args.config)
    return BinaryDownloader(config=config, progress_callback=log_progress)
