"""
Path command implementation.

Prints the directory holding the binaries of a downloaded version.
"""

import logging

from envtestkit.cli.utils import create_downloader
from envtestkit.binaries.extractor import get_binary_paths
from envtestkit.core.exceptions import EnvtestKitError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the path command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the version is downloaded, 1 otherwise)
    """
    try:
        downloader = create_downloader(args)
    except EnvtestKitError as e:
        logger.error(f"Cannot locate binaries: {e}")
        return 1

    directory = downloader.get_installed_directory(args.version)
    if directory is None:
        logger.error(f"Version {args.version} is not downloaded")
        return 1

    missing = [
        name for name, path in get_binary_paths(directory).items() if not path.is_file()
    ]
    if missing:
        logger.warning(
            f"Incomplete installation in {directory}, missing: {', '.join(missing)}"
        )

    print(directory)
    return 0
