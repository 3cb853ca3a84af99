"""
Versions command implementation.

Lists versions downloaded for this platform, or published in the bucket.
"""

import logging

from envtestkit.cli.utils import create_downloader
from envtestkit.core.exceptions import EnvtestKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        downloader = create_downloader(args)
        if args.remote:
            versions = downloader.list_remote_versions()
        else:
            versions = downloader.list_installed_versions()
    except EnvtestKitError as e:
        logger.error(f"Cannot list versions: {e}")
        return 1

    if not versions:
        logger.info("No versions found")

    for version in versions:
        print(version)
    return 0
