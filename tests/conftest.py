"""
Pytest configuration and shared fixtures for envtestkit tests.
"""

import io
import tarfile
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from envtestkit.config.settings import EnvtestConfig
from envtestkit.core.platform import PlatformInfo, clear_platform_cache

# Layout of the published kubebuilder-tools archives
STANDARD_ENTRIES: Dict[str, Optional[bytes]] = {
    "kubebuilder/": None,
    "kubebuilder/bin/": None,
    "kubebuilder/bin/etcd": b"etcd binary",
    "kubebuilder/bin/kube-apiserver": b"kube-apiserver binary",
    "kubebuilder/bin/kubectl": b"kubectl binary",
}


def build_archive(path: Path, entries: Dict[str, Optional[bytes]]) -> Path:
    """
    Write a .tar.gz archive.

    Args:
        path: Archive path to create
        entries: Member name to content; None creates a directory entry
    """
    with tarfile.open(path, "w:gz") as tar:
        for name, content in entries.items():
            info = tarfile.TarInfo(name.rstrip("/"))
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(content)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(content))
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating archives in a temporary directory."""

    def _make(entries=None, name="kubebuilder-tools.tar.gz") -> Path:
        return build_archive(
            tmp_path / name, STANDARD_ENTRIES if entries is None else entries
        )

    return _make


@pytest.fixture
def archive_bytes(tmp_path: Path) -> bytes:
    """Content of a standard archive, for serving from mocked HTTP responses."""
    path = build_archive(tmp_path / "served.tar.gz", STANDARD_ENTRIES)
    return path.read_bytes()


@pytest.fixture
def linux_amd64() -> PlatformInfo:
    return PlatformInfo("linux", "amd64")


@pytest.fixture
def envtest_dir(tmp_path: Path) -> Path:
    return tmp_path / "jenvtest"


@pytest.fixture
def config(envtest_dir: Path) -> EnvtestConfig:
    """Default configuration with an isolated envtest directory."""
    return EnvtestConfig(envtest_dir=envtest_dir)


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Platform detection is cached per process; keep tests independent."""
    clear_platform_cache()
    yield
    clear_platform_cache()
