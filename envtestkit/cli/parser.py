"""
envtestkit CLI argument parser.

This module implements the command-line interface for envtestkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from envtestkit import __version__

logger = logging.getLogger(__name__)


class CLI:
    """envtestkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="envtestkit",
            description="envtestkit - control plane binaries for Kubernetes API tests",
            epilog='Use "envtestkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"envtestkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to YAML configuration file",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_download_command(subparsers)
        self._add_versions_command(subparsers)
        self._add_path_command(subparsers)

        return parser

    def _add_download_command(self, subparsers):
        """Add 'download' subcommand."""
        parser = subparsers.add_parser(
            "download",
            help="Download binaries for a version",
            description="Download kube-apiserver, etcd and kubectl for a version "
            "(the latest published one if omitted)",
        )
        parser.add_argument(
            "version",
            nargs="?",
            metavar="VERSION",
            help="Version to download, e.g. 1.26.1 (default: latest)",
        )

    def _add_versions_command(self, subparsers):
        """Add 'versions' subcommand."""
        parser = subparsers.add_parser(
            "versions",
            help="List downloaded or published versions",
            description="List versions downloaded for this platform",
        )
        parser.add_argument(
            "--remote",
            action="store_true",
            help="List versions published in the bucket instead",
        )

    def _add_path_command(self, subparsers):
        """Add 'path' subcommand."""
        parser = subparsers.add_parser(
            "path",
            help="Print the directory of a downloaded version",
            description="Print the directory holding the binaries of a version",
        )
        parser.add_argument("version", metavar="VERSION", help="Downloaded version")

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.parser.parse_args(argv)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            argv: Command-line arguments (default: sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        args = self.parse_args(argv)

        if not args.command:
            self.parser.print_help()
            return 1

        self._configure_logging(args)
        return self._dispatch_command(args)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "download": "envtestkit.cli.commands.download",
            "versions": "envtestkit.cli.commands.versions",
            "path": "envtestkit.cli.commands.path",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
