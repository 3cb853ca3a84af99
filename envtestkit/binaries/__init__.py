"""
Resolution, download and extraction of the kubebuilder-tools binaries.
"""

from .catalog import RemoteVersionCatalog, version_from_object_name
from .downloader import BinaryDownloader
from .extractor import ExpectedBinary, classify_entry, extract_binaries, get_binary_paths
from .fetcher import ArchiveFetcher

__all__ = [
    "RemoteVersionCatalog",
    "version_from_object_name",
    "BinaryDownloader",
    "ExpectedBinary",
    "classify_entry",
    "extract_binaries",
    "get_binary_paths",
    "ArchiveFetcher",
]
