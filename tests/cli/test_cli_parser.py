"""
Tests for the CLI parser and commands.
"""

import logging

import pytest
from pathlib import Path
from unittest.mock import Mock, patch

from envtestkit.binaries.downloader import BinaryDownloader
from envtestkit.cli.parser import CLI
from envtestkit.core.exceptions import DirectoryCreationFailedError, VersionListingError
from envtestkit.core.platform import detect_platform


@pytest.fixture
def mock_downloader():
    return Mock(spec=BinaryDownloader)


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop the stderr handler installed by CLI.run."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli is not None
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        cli = CLI()
        result = cli.run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "envtestkit" in captured.out

    def test_global_options(self):
        """Test global options before the command."""
        cli = CLI()
        args = cli.parse_args(["-v", "--config", "envtestkit.yaml", "versions"])

        assert args.verbose is True
        assert args.quiet is False
        assert args.config == Path("envtestkit.yaml")


class TestCommandParsing:
    """Test subcommand parsing."""

    def test_download_with_version(self):
        """Test download with an explicit version."""
        args = CLI().parse_args(["download", "1.26.1"])

        assert args.command == "download"
        assert args.version == "1.26.1"

    def test_download_latest(self):
        """Test download without a version."""
        args = CLI().parse_args(["download"])

        assert args.command == "download"
        assert args.version is None

    def test_versions(self):
        """Test versions defaults to local listing."""
        args = CLI().parse_args(["versions"])

        assert args.command == "versions"
        assert args.remote is False

    def test_versions_remote(self):
        """Test versions --remote."""
        assert CLI().parse_args(["versions", "--remote"]).remote is True

    def test_path_requires_version(self):
        """Test path without a version fails."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["path"])


class TestDownloadCommand:
    """Test the download command."""

    def test_download_version(self, mock_downloader, capsys, tmp_path):
        """Test the directory is printed on success."""
        mock_downloader.download.return_value = tmp_path / "1.26.1-linux-amd64"

        with patch(
            "envtestkit.cli.commands.download.create_downloader",
            return_value=mock_downloader,
        ):
            result = CLI().run(["download", "1.26.1"])

        assert result == 0
        mock_downloader.download.assert_called_once_with("1.26.1")
        assert capsys.readouterr().out.strip() == str(tmp_path / "1.26.1-linux-amd64")

    def test_download_latest(self, mock_downloader, tmp_path):
        """Test download without version resolves the latest."""
        mock_downloader.download_latest.return_value = tmp_path

        with patch(
            "envtestkit.cli.commands.download.create_downloader",
            return_value=mock_downloader,
        ):
            result = CLI().run(["download"])

        assert result == 0
        mock_downloader.download_latest.assert_called_once_with()
        mock_downloader.download.assert_not_called()

    def test_download_failure(self, mock_downloader, capsys, tmp_path):
        """Test failures are logged with their stage and return 1."""
        mock_downloader.download.side_effect = DirectoryCreationFailedError(
            tmp_path, "path already exists"
        )

        with patch(
            "envtestkit.cli.commands.download.create_downloader",
            return_value=mock_downloader,
        ):
            result = CLI().run(["download", "1.26.1"])

        assert result == 1
        assert "prepare" in capsys.readouterr().err

    def test_invalid_config_file(self, tmp_path, capsys):
        """Test a missing configuration file fails the command."""
        result = CLI().run(
            ["--config", str(tmp_path / "missing.yaml"), "download", "1.26.1"]
        )

        assert result == 1
        assert "not found" in capsys.readouterr().err

    def test_wrong_config_value_type(self, tmp_path, capsys):
        """Test a config value of the wrong type fails the command without a traceback."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text("envtest_dir: 5\n")

        result = CLI().run(["--config", str(config_file), "download", "1.26.1"])

        assert result == 1
        assert "envtest_dir must be a path" in capsys.readouterr().err


class TestVersionsCommand:
    """Test the versions command."""

    def test_local_versions(self, mock_downloader, capsys):
        """Test installed versions are printed one per line."""
        mock_downloader.list_installed_versions.return_value = ["1.9.0", "1.26.1"]

        with patch(
            "envtestkit.cli.commands.versions.create_downloader",
            return_value=mock_downloader,
        ):
            result = CLI().run(["versions"])

        assert result == 0
        assert capsys.readouterr().out.splitlines() == ["1.9.0", "1.26.1"]
        mock_downloader.list_remote_versions.assert_not_called()

    def test_remote_versions_error(self, mock_downloader):
        """Test listing errors return 1."""
        mock_downloader.list_remote_versions.side_effect = VersionListingError("boom")

        with patch(
            "envtestkit.cli.commands.versions.create_downloader",
            return_value=mock_downloader,
        ):
            assert CLI().run(["versions", "--remote"]) == 1


class TestPathCommand:
    """Test the path command against a real envtest directory."""

    def test_not_downloaded(self, tmp_path, monkeypatch, capsys):
        """Test an absent version returns 1."""
        monkeypatch.setenv("ENVTESTKIT_DIR", str(tmp_path))

        assert CLI().run(["path", "1.26.1"]) == 1
        assert capsys.readouterr().out == ""

    def test_downloaded(self, tmp_path, monkeypatch, capsys):
        """Test a downloaded version prints its directory."""
        monkeypatch.setenv("ENVTESTKIT_DIR", str(tmp_path))
        directory = tmp_path / "binaries" / f"1.26.1{detect_platform().platform_suffix()}"
        directory.mkdir(parents=True)
        for name in ["kube-apiserver", "etcd", "kubectl"]:
            (directory / name).write_bytes(b"")

        assert CLI().run(["path", "1.26.1"]) == 0
        assert capsys.readouterr().out.strip() == str(directory)

    def test_incomplete_installation_warns(self, tmp_path, monkeypatch, capsys):
        """Test missing binaries are reported but the path is still printed."""
        monkeypatch.setenv("ENVTESTKIT_DIR", str(tmp_path))
        directory = tmp_path / "binaries" / f"1.26.1{detect_platform().platform_suffix()}"
        directory.mkdir(parents=True)
        (directory / "etcd").write_bytes(b"")

        assert CLI().run(["path", "1.26.1"]) == 0

        assert "kube-apiserver" in capsys.readouterr().err
