"""
DependencySnapshot: an immutable name -> version map of one dependency graph.

Snapshots are read from npm lockfiles. Lockfile v2/v3 list installs under
``packages`` keyed by ``node_modules/<name>``; only hoisted, top-level
installs are taken since nested copies are private to their dependents.
Lockfile v1 is read from its top-level ``dependencies`` table.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

logger = logging.getLogger(__name__)

LOCKFILE_NAME = "package-lock.json"
_NODE_MODULES = "node_modules/"


def _top_level_name(path: str) -> str | None:
    """``node_modules/@scope/pkg`` -> ``@scope/pkg``; nested paths -> None."""
    if not path.startswith(_NODE_MODULES):
        return None
    name = path[len(_NODE_MODULES):]
    if _NODE_MODULES.rstrip("/") in name.split("/"):
        return None
    parts = name.split("/")
    if name.startswith("@"):
        return name if len(parts) == 2 else None
    return name if len(parts) == 1 else None


@dataclass(frozen=True)
class DependencySnapshot(Mapping[str, str]):
    """
    Dependency versions of one project at one point in time.

    Attributes:
        label: Which side this snapshot is (e.g. ``"super"``, ``"sub"``).
        versions: Read-only package name -> version mapping.
    """

    label: str
    versions: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))

    def __getitem__(self, name: str) -> str:
        return self.versions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)

    def __repr__(self) -> str:
        return f"DependencySnapshot({self.label!r}, {len(self)} packages)"

    @classmethod
    def from_lock_data(cls, data: Mapping[str, Any], label: str) -> DependencySnapshot:
        """Build a snapshot from parsed lockfile JSON."""
        versions: dict[str, str] = {}

        installed = data.get("packages")
        if isinstance(installed, Mapping) and installed:
            for path, entry in installed.items():
                name = _top_level_name(path)
                if name and isinstance(entry, Mapping) and isinstance(entry.get("version"), str):
                    versions[name] = entry["version"]
        else:
            for name, entry in (data.get("dependencies") or {}).items():
                if isinstance(entry, Mapping) and isinstance(entry.get("version"), str):
                    versions[name] = entry["version"]

        logger.debug("Read %d packages into %s snapshot", len(versions), label)
        return cls(label=label, versions=versions)

    @classmethod
    def from_lockfile(cls, path: Path, label: str) -> DependencySnapshot:
        """
        Read a snapshot from a ``package-lock.json`` file.

        Raises:
            FileNotFoundError: If the lockfile does not exist.
            json.JSONDecodeError: If the lockfile is not valid JSON.
        """
        path = Path(path)
        if path.is_dir():
            path = path / LOCKFILE_NAME
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_lock_data(data, label=label)


def diff_snapshots(
    super_snapshot: Mapping[str, str],
    sub_snapshot: Mapping[str, str],
) -> dict[str, tuple[str, str]]:
    """
    Pair up the versions of packages present in both snapshots.

    Returns:
        ``{name: (super_version, sub_version)}`` for every shared name.
    """
    return {
        name: (super_snapshot[name], sub_version)
        for name, sub_version in sub_snapshot.items()
        if name in super_snapshot
    }
