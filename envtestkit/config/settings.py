"""
Configuration for envtestkit.

Settings come from three layers, later ones winning:

1. Built-in defaults pointing at the public kubebuilder-tools bucket
2. An optional YAML file whose top-level keys are EnvtestConfig field names
3. Environment variables (ENVTESTKIT_DIR, ENVTESTKIT_STORAGE_URL)

Example envtestkit.yaml:

    envtest_dir: /opt/envtest
    timeout: 60
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from envtestkit.core.directory import (
    DEFAULT_BINARIES_DIR,
    get_binaries_root,
    get_default_envtest_dir,
)
from envtestkit.core.exceptions import ConfigurationError
from envtestkit.core.platform import PlatformInfo

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_URL = "https://storage.googleapis.com"
DEFAULT_LISTING_URL = "https://storage.googleapis.com/storage/v1/b"
DEFAULT_BUCKET = "kubebuilder-tools"
DEFAULT_ARCHIVE_PREFIX = "kubebuilder-tools-"
DEFAULT_TIMEOUT = 30.0

ENV_ENVTEST_DIR = "ENVTESTKIT_DIR"
ENV_STORAGE_URL = "ENVTESTKIT_STORAGE_URL"

STRING_FIELDS = ("storage_url", "listing_url", "bucket", "archive_prefix", "binaries_dir")


@dataclass(frozen=True)
class EnvtestConfig:
    """
    Locations and naming used by the binary download pipeline.

    Attributes:
        storage_url: Base URL archives are downloaded from
        listing_url: Base URL of the bucket listing API
        bucket: Bucket holding the archives
        archive_prefix: Literal prefix of every archive name
        envtest_dir: Root directory for downloaded binaries
        binaries_dir: Subdirectory of envtest_dir holding version directories
        timeout: HTTP connect/read timeout in seconds
    """

    storage_url: str = DEFAULT_STORAGE_URL
    listing_url: str = DEFAULT_LISTING_URL
    bucket: str = DEFAULT_BUCKET
    archive_prefix: str = DEFAULT_ARCHIVE_PREFIX
    envtest_dir: Path = field(default_factory=get_default_envtest_dir)
    binaries_dir: str = DEFAULT_BINARIES_DIR
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        for name in STRING_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"{name} must be a string, got {type(value).__name__}"
                )
        if not isinstance(self.envtest_dir, (str, os.PathLike)):
            raise ConfigurationError(
                f"envtest_dir must be a path, got {type(self.envtest_dir).__name__}"
            )

        object.__setattr__(self, "envtest_dir", Path(self.envtest_dir).expanduser())
        object.__setattr__(self, "storage_url", self.storage_url.rstrip("/"))
        object.__setattr__(self, "listing_url", self.listing_url.rstrip("/"))

        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"timeout must be a number, got {self.timeout!r}")
        if timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")
        object.__setattr__(self, "timeout", timeout)

        for name in ("bucket", "archive_prefix", "binaries_dir"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} cannot be empty")

    @property
    def binaries_root(self) -> Path:
        return get_binaries_root(self.envtest_dir, self.binaries_dir)

    def archive_name(self, version: str, platform: PlatformInfo) -> str:
        """
        Name of the archive for a version and platform.

        Example:
            >>> EnvtestConfig().archive_name('1.26.1', PlatformInfo('linux', 'amd64'))
            'kubebuilder-tools-1.26.1-linux-amd64.tar.gz'
        """
        return f"{self.archive_prefix}{version}-{platform.platform_string()}.tar.gz"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvtestConfig":
        """
        Build a configuration from a mapping of field names.

        Raises:
            ConfigurationError: If the mapping has unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}"
            )
        return cls(**data)


def load_yaml_config(config_file: Path) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Returns:
        Configuration dictionary (empty for an empty file)

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration in {config_file} must be a mapping, "
            f"got {type(config).__name__}"
        )
    return config


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> EnvtestConfig:
    """
    Load configuration from defaults, an optional YAML file and the environment.

    Args:
        config_file: Optional path to a YAML file
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigurationError: If the file or any value is invalid
    """
    environ = os.environ if environ is None else environ

    data: Dict[str, Any] = {}
    if config_file is not None:
        data.update(load_yaml_config(Path(config_file)))

    config = EnvtestConfig.from_dict(data)

    overrides: Dict[str, Any] = {}
    if environ.get(ENV_ENVTEST_DIR):
        overrides["envtest_dir"] = Path(environ[ENV_ENVTEST_DIR])
    if environ.get(ENV_STORAGE_URL):
        overrides["storage_url"] = environ[ENV_STORAGE_URL]

    if overrides:
        logger.debug(f"Applying environment overrides: {sorted(overrides)}")
        config = replace(config, **overrides)

    return config


__all__ = [
    "EnvtestConfig",
    "load_config",
    "load_yaml_config",
    "DEFAULT_STORAGE_URL",
    "DEFAULT_LISTING_URL",
    "DEFAULT_BUCKET",
    "DEFAULT_ARCHIVE_PREFIX",
]
