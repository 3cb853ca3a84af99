"""
Semantic version parsing and comparison.

Versions are dot-separated sequences of non-negative integers with at least
major.minor.patch components and an optional leading 'v'. Components are
compared numerically, so "1.10.0" sorts after "1.9.0".
"""

import functools
from typing import Iterable, List, Tuple

from envtestkit.core.exceptions import MalformedVersionError, NoVersionsAvailableError

MIN_COMPONENTS = 3


def strip_version_prefix(version_string: str) -> str:
    """Remove a single leading 'v' from a version string."""
    if version_string.startswith("v"):
        return version_string[1:]
    return version_string


@functools.total_ordering
class Version:
    """
    Semantic version parser and comparator.

    Example:
        >>> Version("v1.10.0") > Version("1.9.0")
        True
        >>> Version("1.24.2").normalized
        '1.24.2'
    """

    def __init__(self, version_string: str):
        """
        Parse version string.

        Args:
            version_string: Version in format "major.minor.patch", optionally 'v'-prefixed

        Raises:
            MalformedVersionError: If version format is invalid
        """
        if not isinstance(version_string, str):
            raise MalformedVersionError(
                str(version_string),
                f"expected a string, got {type(version_string).__name__}",
            )
        self.original = version_string
        self.normalized = strip_version_prefix(version_string)
        self.components = self._parse(self.normalized)

    @classmethod
    def parse(cls, version_string: str) -> "Version":
        return cls(version_string)

    def _parse(self, version_string: str) -> Tuple[int, ...]:
        if not version_string:
            raise MalformedVersionError(self.original, "empty version")

        parts = version_string.split(".")
        if len(parts) < MIN_COMPONENTS:
            raise MalformedVersionError(
                self.original, "expected at least major.minor.patch"
            )

        for part in parts:
            # isdigit() alone would accept unicode digits such as '²'
            if not (part.isascii() and part.isdigit()):
                raise MalformedVersionError(
                    self.original, f"component {part!r} is not a non-negative integer"
                )

        return tuple(int(part) for part in parts)

    @property
    def major(self) -> int:
        return self.components[0]

    @property
    def minor(self) -> int:
        return self.components[1]

    @property
    def patch(self) -> int:
        return self.components[2]

    def _key(self, length: int) -> Tuple[int, ...]:
        return self.components + (0,) * (length - len(self.components))

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1 as this version is less than, equal to or greater than other."""
        length = max(len(self.components), len(other.components))
        mine, theirs = self._key(length), other._key(length)
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        # Trailing zeros don't change equality, so they must not change the hash
        components = list(self.components)
        while len(components) > MIN_COMPONENTS and components[-1] == 0:
            components.pop()
        return hash(tuple(components))

    def __str__(self) -> str:
        return self.normalized

    def __repr__(self) -> str:
        return f"Version({self.original!r})"


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if a < b, 0 if a == b, 1 if a > b

    Raises:
        MalformedVersionError: If either string cannot be parsed

    Example:
        >>> compare_versions("1.10.0", "1.9.0")
        1
        >>> compare_versions("v1.2.3", "1.2.3")
        0
    """
    return Version(a).compare(Version(b))


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Sort version strings in ascending semantic order."""
    return sorted(versions, key=Version)


def latest_version(versions: Iterable[str]) -> str:
    """
    Pick the highest version string.

    Raises:
        NoVersionsAvailableError: If there are no candidates
        MalformedVersionError: If a candidate cannot be parsed
    """
    candidates = list(versions)
    if not candidates:
        raise NoVersionsAvailableError("Cannot find relevant version to download")
    return sort_versions(candidates)[-1]


__all__ = [
    "Version",
    "compare_versions",
    "sort_versions",
    "latest_version",
    "strip_version_prefix",
]
