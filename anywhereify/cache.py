"""
Build cache bookkeeping.

A build is skipped when the fingerprint of its inputs matches the one
recorded next to the previous output, and that output still exists. The
record lives at ``<out>/.anywhereify-cache.json``.

The inputs cover the project's manifest and lockfile and, when a host is
configured, the host's as well: the externals are decided from the host's
installed graph, so a host change invalidates the bundle.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from anywhereify._canonical import fingerprint

logger = logging.getLogger(__name__)

CACHE_FILENAME = ".anywhereify-cache.json"
OUTPUT_FILENAME = "index.js"
MANIFEST_FILENAME = "package.json"
LOCKFILE_FILENAME = "package-lock.json"


def _read_json(path: Path) -> Any:
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def _project_state(project_dir: Path) -> dict[str, Any]:
    """Declared dependencies and a digest of the lockfile of one project."""
    manifest = _read_json(project_dir / MANIFEST_FILENAME) or {}
    lock = _read_json(project_dir / LOCKFILE_FILENAME)
    return {
        "dependencies": manifest.get("dependencies", {}),
        "lockfile": fingerprint(lock) if lock is not None else None,
    }


def build_inputs(
    raw_exports: list[Any],
    *,
    minify: bool,
    host: Path | None,
    project_dir: Path,
    tool_version: str,
) -> dict[str, Any]:
    """Collect everything that influences the build output."""
    project = _project_state(Path(project_dir))
    return {
        "exports": raw_exports,
        "minify": minify,
        "host": str(host) if host else None,
        "dependencies": project["dependencies"],
        "lockfile": project["lockfile"],
        "host_state": _project_state(Path(host)) if host else None,
        "tool_version": tool_version,
    }


@dataclass(frozen=True)
class CacheRecord:
    """A recorded build fingerprint and the externals that build used."""

    fingerprint: str
    created_at: str
    externals: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fingerprint": self.fingerprint,
            "created_at": self.created_at,
            "externals": list(self.externals),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheRecord:
        return cls(
            fingerprint=data.get("fingerprint", ""),
            created_at=data.get("created_at", ""),
            externals=list(data.get("externals") or []),
        )


class BuildCache:
    """
    Fingerprint record for one output directory.

    Args:
        out_dir: The build output directory.
    """

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = Path(out_dir)
        self.path = self.out_dir / CACHE_FILENAME

    def load(self) -> CacheRecord | None:
        if not self.path.is_file():
            return None
        try:
            return CacheRecord.from_dict(json.loads(self.path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, AttributeError, TypeError):
            logger.warning("Ignoring unreadable build cache at %s", self.path)
            return None

    def lookup(self, inputs: dict[str, Any]) -> CacheRecord | None:
        """Return the record if *inputs* match the last build and its output exists."""
        record = self.load()
        if record is None or not (self.out_dir / OUTPUT_FILENAME).is_file():
            return None
        if record.fingerprint != fingerprint(inputs):
            return None
        return record

    def is_fresh(self, inputs: dict[str, Any]) -> bool:
        return self.lookup(inputs) is not None

    def record(self, inputs: dict[str, Any], externals: list[str] | None = None) -> CacheRecord:
        record = CacheRecord(
            fingerprint=fingerprint(inputs),
            created_at=datetime.now().isoformat(),
            externals=list(externals or []),
        )
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
        return record
