"""
Externalization decisions.

Given the host ("super") and bundle ("sub") snapshots, decide for each
shared package whether the host's copy can stand in for the bundle's. A
host version may replace a required version only if it is not older, and
not newer by a breaking (major) increment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from anywhereify.externals.semver import SemVer, version_distance
from anywhereify.externals.snapshot import diff_snapshots

logger = logging.getLogger(__name__)

COMPATIBLE_DISTANCES = frozenset({"patch", "minor"})


def should_externalize(super_version: str | None, sub_version: str | None) -> bool:
    """
    Return ``True`` if the host-supplied version may replace the bundled one.

    Never raises: missing or unparsable versions yield ``False``.

    Example:
        >>> should_externalize("1.2.0", "1.1.0")
        True
        >>> should_externalize("2.0.0", "1.0.0")
        False
    """
    if not super_version or not sub_version:
        return False

    try:
        host = SemVer.parse(super_version)
        required = SemVer.parse(sub_version)
    except ValueError as e:
        logger.debug("Not externalizing: %s", e)
        return False

    host_is_newer = host >= required
    lesser, greater = (required, host) if host_is_newer else (host, required)
    distance = version_distance(lesser, greater)

    if distance is None:
        return True
    return host_is_newer and distance in COMPATIBLE_DISTANCES


@dataclass(frozen=True)
class VersionDecision:
    """
    The externalization decision for one shared package.

    Attributes:
        name: Package name.
        super_version: Version supplied by the host.
        sub_version: Version the bundle resolved.
        should_externalize: Whether to leave the package out of the bundle.
    """

    name: str
    super_version: str
    sub_version: str
    should_externalize: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "super_version": self.super_version,
            "sub_version": self.sub_version,
            "should_externalize": self.should_externalize,
        }


def decide_externals(
    super_snapshot: Mapping[str, str],
    sub_snapshot: Mapping[str, str],
) -> list[VersionDecision]:
    """Decide every package shared by both snapshots, sorted by name."""
    shared = diff_snapshots(super_snapshot, sub_snapshot)
    decisions = [
        VersionDecision(
            name=name,
            super_version=super_version,
            sub_version=sub_version,
            should_externalize=should_externalize(super_version, sub_version),
        )
        for name, (super_version, sub_version) in sorted(shared.items())
    ]
    logger.info(
        "%d shared package(s), %d externalized",
        len(decisions),
        sum(d.should_externalize for d in decisions),
    )
    return decisions


def gather_externals(
    super_snapshot: Mapping[str, str],
    sub_snapshot: Mapping[str, str],
) -> list[str]:
    """Names of the packages the bundler should treat as external."""
    return [
        d.name for d in decide_externals(super_snapshot, sub_snapshot) if d.should_externalize
    ]
