"""
Semantic version parsing, precedence and distance.

Follows semver 2.0.0 precedence: build metadata is ignored, a release
outranks its prereleases, and numeric prerelease identifiers compare
numerically and sort below alphanumeric ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_SEMVER = re.compile(
    r"^[v=]?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

CORE_FIELDS = ("major", "minor", "patch")


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """Semantic version with precedence ordering."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, version: str) -> SemVer:
        """
        Parse a version string such as ``"1.2.3"``, ``"v2.0.0-rc.1"``.

        Raises:
            ValueError: If *version* is not a valid semantic version.
        """
        match = _SEMVER.match(version.strip()) if isinstance(version, str) else None
        if match is None:
            raise ValueError(f"Invalid semantic version: {version!r}")

        pre = match.group("pre")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _precedence_key(self) -> tuple:
        if not self.prerelease:
            # A release sorts above any prerelease of the same core.
            return (self.core, 1, ())
        return (self.core, 0, tuple(_identifier_key(i) for i in self.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence_key() == other._precedence_key()

    def __lt__(self, other: SemVer) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __hash__(self) -> int:
        return hash(self._precedence_key())

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += "-" + ".".join(self.prerelease)
        if self.build:
            version += "+" + ".".join(self.build)
        return version


def version_distance(a: str | SemVer, b: str | SemVer) -> str | None:
    """
    Return the kind of increment separating *a* and *b*.

    Returns ``None`` when the versions are equal, ``"major"``, ``"minor"``
    or ``"patch"`` for the first differing core field (prefixed ``"pre"``
    when either side is a prerelease), and ``"prerelease"`` when only the
    prerelease differs.

    Raises:
        ValueError: If either version cannot be parsed.
    """
    left = a if isinstance(a, SemVer) else SemVer.parse(a)
    right = b if isinstance(b, SemVer) else SemVer.parse(b)

    if left == right:
        return None

    prefix = "pre" if (left.prerelease or right.prerelease) else ""
    for name in CORE_FIELDS:
        if getattr(left, name) != getattr(right, name):
            return prefix + name
    return "prerelease"
