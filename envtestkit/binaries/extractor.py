"""
Selective extraction of the control plane binaries from a kubebuilder-tools archive.

The archive is read as a single-pass gzip tar stream. Each regular entry must
be one of the three expected binaries; it is written under its canonical name
and made executable. Anything else aborts the extraction, since a renamed or
missing binary would otherwise only surface when a test environment fails to
start.
"""

import logging
import os
import shutil
import stat
import tarfile
import zlib
from contextlib import closing
from enum import Enum
from pathlib import Path
from typing import IO, Dict, Iterator, Optional, Set, Tuple, Union

from envtestkit.core.exceptions import (
    ArchiveError,
    ExtractionFailedError,
    PermissionSetFailedError,
    UnexpectedArchiveEntryError,
)

logger = logging.getLogger(__name__)

EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class ExpectedBinary(Enum):
    """The binaries shipped in every archive, with their name fragment and output filename."""

    KUBECTL = ("kubectl", "kubectl")
    API_SERVER = ("kube-apiserver", "kube-apiserver")
    ETCD = ("etcd", "etcd")

    def __init__(self, fragment: str, filename: str):
        self.fragment = fragment
        self.filename = filename


def classify_entry(name: str) -> Optional[ExpectedBinary]:
    """
    Find the binary an archive entry path stands for.

    Fragments are checked in declaration order and are mutually exclusive
    for the archives published in the bucket.

    Example:
        >>> classify_entry('kubebuilder/bin/kube-apiserver')
        <ExpectedBinary.API_SERVER: ('kube-apiserver', 'kube-apiserver')>
        >>> classify_entry('kubebuilder/README') is None
        True
    """
    for binary in ExpectedBinary:
        if binary.fragment in name:
            return binary
    return None


def get_binary_paths(directory: Union[str, Path]) -> Dict[str, Path]:
    """
    Map each canonical binary name to its location inside a version directory.

    Example:
        >>> get_binary_paths('/b/1.26.1-linux-amd64')['etcd']
        PosixPath('/b/1.26.1-linux-amd64/etcd')
    """
    directory = Path(directory)
    return {binary.filename: directory / binary.filename for binary in ExpectedBinary}


def iter_archive_entries(
    archive_path: Union[str, Path],
) -> Iterator[Tuple[tarfile.TarInfo, Optional[IO[bytes]]]]:
    """
    Lazily iterate over the entries of a gzip-compressed tar stream.

    The stream is not seekable: each file object is only readable until the
    generator advances to the next entry.

    Yields:
        (member, fileobj) pairs; fileobj is None for non-regular entries
    """
    with tarfile.open(archive_path, mode="r|gz") as tar:
        for member in tar:
            fileobj = tar.extractfile(member) if member.isfile() else None
            yield member, fileobj


def make_executable(path: Path) -> None:
    """
    Add the executable bit for owner, group and others.

    Raises:
        PermissionSetFailedError: If the mode cannot be changed
    """
    try:
        mode = path.stat().st_mode
        path.chmod(mode | EXECUTABLE_BITS)
    except OSError as e:
        raise PermissionSetFailedError(path, str(e)) from e

    # chmod may be silently ignored, e.g. on some mounted filesystems
    if os.name != "nt" and not os.access(path, os.X_OK):
        raise PermissionSetFailedError(path)


def _copy_entry(fileobj: IO[bytes], target: Path) -> None:
    # 'xb' refuses to overwrite: a duplicate entry is an integrity problem
    with open(target, "xb") as out:
        shutil.copyfileobj(fileobj, out)


def extract_binaries(
    archive_path: Union[str, Path], target_dir: Union[str, Path]
) -> Set[Path]:
    """
    Extract the expected binaries from an archive into a directory.

    Args:
        archive_path: Path to a .tar.gz archive
        target_dir: Existing directory to write the binaries into

    Returns:
        Paths of the extracted binaries

    Raises:
        UnexpectedArchiveEntryError: If an entry matches no expected binary
        ExtractionFailedError: If reading or writing fails, or a binary is missing
        PermissionSetFailedError: If a binary cannot be made executable
    """
    archive_path = Path(archive_path)
    target_dir = Path(target_dir)
    extracted = {}

    logger.info(f"Extracting binaries from {archive_path} to {target_dir}")

    try:
        with closing(iter_archive_entries(archive_path)) as entries:
            for member, fileobj in entries:
                if member.isdir():
                    continue

                binary = classify_entry(member.name)
                if binary is None:
                    raise UnexpectedArchiveEntryError(member.name)

                if fileobj is None:
                    raise ExtractionFailedError(
                        f"Entry {member.name} for {binary.filename} is not a regular file"
                    )

                target = target_dir / binary.filename
                logger.debug(f"Extracting {member.name} -> {target}")
                _copy_entry(fileobj, target)
                make_executable(target)
                extracted[binary] = target

    except ArchiveError:
        raise
    except (OSError, tarfile.TarError, EOFError, zlib.error) as e:
        raise ExtractionFailedError(f"Failed to extract {archive_path}: {e}") from e

    missing = [b.filename for b in ExpectedBinary if b not in extracted]
    if missing:
        raise ExtractionFailedError(
            f"Archive {archive_path.name} is missing binaries: {', '.join(missing)}"
        )

    logger.info(f"Extracted {len(extracted)} binaries to {target_dir}")
    return set(extracted.values())


__all__ = [
    "ExpectedBinary",
    "classify_entry",
    "get_binary_paths",
    "iter_archive_entries",
    "make_executable",
    "extract_binaries",
]
