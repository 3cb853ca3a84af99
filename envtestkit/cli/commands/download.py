"""
Download command implementation.

Downloads the binaries of a version, or of the latest published version,
and prints the directory they were extracted to.
"""

import logging

from envtestkit.cli.utils import create_downloader
from envtestkit.core.exceptions import EnvtestKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the download command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        downloader = create_downloader(args)
        if args.version:
            directory = downloader.download(args.version)
        else:
            directory = downloader.download_latest()
    except EnvtestKitError as e:
        logger.error(f"Download failed ({e.stage}): {e}")
        return 1

    print(directory)
    return 0
