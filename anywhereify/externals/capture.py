"""
Snapshot capture for the host and bundle dependency graphs.

Each side's top-level dependencies are reinstalled into a dedicated,
empty directory so each gets its own lockfile. The installs run one after
the other and never share a directory, which keeps one side's lockfile
from leaking into the other.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from anywhereify.externals.snapshot import LOCKFILE_NAME, DependencySnapshot
from anywhereify.toolchain.base import Installer

logger = logging.getLogger(__name__)

SUPER = "super"
SUB = "sub"


def read_package_name(project_dir: Path) -> str | None:
    """Return the ``name`` from *project_dir*/package.json, if any."""
    manifest = Path(project_dir) / "package.json"
    if not manifest.is_file():
        return None
    name = json.loads(manifest.read_text(encoding="utf-8")).get("name")
    return name if isinstance(name, str) and name else None


def _capture(
    label: str,
    dependencies: list[str],
    work_dir: Path,
    installer: Installer,
) -> DependencySnapshot:
    target = work_dir / label
    target.mkdir(parents=True, exist_ok=True)
    # A named manifest makes npm install here rather than in a parent project.
    (target / "package.json").write_text(json.dumps({"name": label}), encoding="utf-8")

    installer.install(dependencies, cwd=target)

    lockfile = target / LOCKFILE_NAME
    if not lockfile.is_file():
        logger.debug("No lockfile written for %s; treating as empty", label)
        return DependencySnapshot(label=label)
    return DependencySnapshot.from_lockfile(lockfile, label=label)


def capture_snapshots(
    host_dir: Path,
    project_dir: Path,
    work_dir: Path,
    installer: Installer,
) -> tuple[DependencySnapshot, DependencySnapshot]:
    """
    Capture the host ("super") and project ("sub") snapshots.

    Args:
        host_dir: Project that will supply packages at runtime.
        project_dir: Project being bundled.
        work_dir: Scratch directory; ``super/`` and ``sub/`` are created in it.
        installer: Installer used to list and install dependencies.

    Returns:
        ``(super_snapshot, sub_snapshot)``.
    """
    excluded = read_package_name(project_dir)

    super_deps = [d for d in installer.list(Path(host_dir)) if d != excluded]
    sub_deps = [d for d in installer.list(Path(project_dir)) if d != excluded]
    logger.info(
        "Capturing snapshots: %d host, %d project dependencies",
        len(super_deps),
        len(sub_deps),
    )

    super_snapshot = _capture(SUPER, super_deps, Path(work_dir), installer)
    sub_snapshot = _capture(SUB, sub_deps, Path(work_dir), installer)
    return super_snapshot, sub_snapshot
