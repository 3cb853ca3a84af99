"""
Tests for configuration loading.
"""

import pytest
from pathlib import Path

from envtestkit.config.settings import (
    DEFAULT_ARCHIVE_PREFIX,
    DEFAULT_BUCKET,
    DEFAULT_STORAGE_URL,
    EnvtestConfig,
    load_config,
    load_yaml_config,
)
from envtestkit.core.exceptions import ConfigurationError
from envtestkit.core.platform import PlatformInfo


class TestEnvtestConfig:
    """Tests for the EnvtestConfig dataclass."""

    def test_defaults(self, tmp_path):
        """Test defaults point at the public bucket."""
        config = EnvtestConfig(envtest_dir=tmp_path)

        assert config.storage_url == DEFAULT_STORAGE_URL
        assert config.bucket == DEFAULT_BUCKET
        assert config.archive_prefix == DEFAULT_ARCHIVE_PREFIX
        assert config.binaries_root == tmp_path / "binaries"
        assert config.timeout == 30.0

    def test_default_envtest_dir(self, tmp_path, monkeypatch):
        """Test the envtest directory defaults to ~/.jenvtest."""
        monkeypatch.setenv("HOME", str(tmp_path))
        assert EnvtestConfig().envtest_dir == tmp_path / ".jenvtest"

    def test_string_dir_and_trailing_slash_normalized(self, tmp_path):
        """Test string paths become Path and URLs lose trailing slashes."""
        config = EnvtestConfig(
            envtest_dir=str(tmp_path), storage_url="http://localhost:9000/"
        )
        assert config.envtest_dir == tmp_path
        assert config.storage_url == "http://localhost:9000"

    def test_archive_name(self, tmp_path):
        """Test archive naming."""
        config = EnvtestConfig(envtest_dir=tmp_path)
        name = config.archive_name("1.26.1", PlatformInfo("darwin", "arm64"))
        assert name == "kubebuilder-tools-1.26.1-darwin-arm64.tar.gz"

    @pytest.mark.parametrize("timeout", [0, -5, "soon"])
    def test_invalid_timeout(self, tmp_path, timeout):
        """Test non-positive or non-numeric timeouts are rejected."""
        with pytest.raises(ConfigurationError, match="timeout"):
            EnvtestConfig(envtest_dir=tmp_path, timeout=timeout)

    def test_empty_bucket(self, tmp_path):
        """Test empty bucket is rejected."""
        with pytest.raises(ConfigurationError, match="bucket"):
            EnvtestConfig(envtest_dir=tmp_path, bucket="")

    def test_from_dict_unknown_keys(self, tmp_path):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="bukket"):
            EnvtestConfig.from_dict({"envtest_dir": str(tmp_path), "bukket": "x"})


class TestLoadYamlConfig:
    """Tests for load_yaml_config."""

    def test_missing_file(self, tmp_path):
        """Test missing file raises."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        """Test empty file yields empty mapping."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text("")
        assert load_yaml_config(config_file) == {}

    def test_invalid_yaml(self, tmp_path):
        """Test invalid YAML raises ConfigurationError."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text("envtest_dir: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(config_file)

    def test_not_a_mapping(self, tmp_path):
        """Test a list document is rejected."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config(config_file)


class TestLoadConfig:
    """Tests for load_config layering."""

    def test_defaults_only(self, tmp_path, monkeypatch):
        """Test no file and no environment gives defaults."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config = load_config(environ={})
        assert config == EnvtestConfig()

    def test_file_values(self, tmp_path):
        """Test file values override defaults."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text(
            f"envtest_dir: {tmp_path / 'custom'}\n"
            "timeout: 60\n"
            "binaries_dir: bins\n"
        )

        config = load_config(config_file, environ={})

        assert config.envtest_dir == tmp_path / "custom"
        assert config.timeout == 60.0
        assert config.binaries_root == tmp_path / "custom" / "bins"

    def test_environment_overrides_file(self, tmp_path):
        """Test environment variables win over the file."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text(f"envtest_dir: {tmp_path / 'from-file'}\n")

        config = load_config(
            config_file,
            environ={
                "ENVTESTKIT_DIR": str(tmp_path / "from-env"),
                "ENVTESTKIT_STORAGE_URL": "http://mirror.local/",
            },
        )

        assert config.envtest_dir == tmp_path / "from-env"
        assert config.storage_url == "http://mirror.local"

    @pytest.mark.parametrize(
        "line,key",
        [
            ("envtest_dir: 5", "envtest_dir"),
            ("storage_url: 5", "storage_url"),
            ("listing_url: [a, b]", "listing_url"),
            ("bucket: {name: tools}", "bucket"),
            ("archive_prefix: 1.5", "archive_prefix"),
            ("binaries_dir: true", "binaries_dir"),
        ],
    )
    def test_wrong_value_type(self, tmp_path, line, key):
        """Test values of the wrong type raise ConfigurationError."""
        config_file = tmp_path / "envtestkit.yaml"
        config_file.write_text(line + "\n")

        with pytest.raises(ConfigurationError, match=key):
            load_config(config_file, environ={})

    def test_uses_os_environ_by_default(self, tmp_path, monkeypatch):
        """Test os.environ is consulted when no mapping is given."""
        monkeypatch.setenv("ENVTESTKIT_DIR", str(tmp_path))
        assert load_config().envtest_dir == Path(tmp_path)
