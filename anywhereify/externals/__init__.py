"""
Dependency externalization.

Decides which packages the host runtime already supplies in a compatible
version, so the bundler can leave them out.

Usage::

    from anywhereify.externals import DependencySnapshot, gather_externals

    host = DependencySnapshot.from_lockfile(Path("host"), label="super")
    bundle = DependencySnapshot.from_lockfile(Path("bundle"), label="sub")
    externals = gather_externals(host, bundle)
"""

from anywhereify.externals.capture import capture_snapshots, read_package_name
from anywhereify.externals.resolver import (
    VersionDecision,
    decide_externals,
    gather_externals,
    should_externalize,
)
from anywhereify.externals.semver import SemVer, version_distance
from anywhereify.externals.snapshot import DependencySnapshot, diff_snapshots

__all__ = [
    "DependencySnapshot",
    "SemVer",
    "VersionDecision",
    "capture_snapshots",
    "decide_externals",
    "diff_snapshots",
    "gather_externals",
    "read_package_name",
    "should_externalize",
    "version_distance",
]
