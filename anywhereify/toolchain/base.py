"""
Toolchain protocols: the external collaborators a build drives.

- Installer: installs packages into a directory and lists its dependencies
- Bundler: bundles entry files, leaving the given externals out
- Minifier: minifies source text

Concrete implementations shell out to node tooling through
:func:`run_command`; tests substitute in-memory fakes.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from anywhereify.errors import ToolchainError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600.0


class Installer(Protocol):
    """Protocol for package installers."""

    def install(self, packages: Sequence[str], cwd: Path) -> None:
        """
        Install *packages* into the project at *cwd*, saving them to its
        manifest and lockfile.
        """
        ...

    def list(self, cwd: Path) -> list[str]:
        """Return the names of the top-level dependencies installed at *cwd*."""
        ...


class Bundler(Protocol):
    """Protocol for bundlers."""

    def bundle(
        self,
        entries: Sequence[Path],
        externals: Sequence[str],
        out_file: Path,
    ) -> str:
        """
        Bundle *entries* into *out_file* without embedding *externals*.

        Returns:
            The bundled source text.
        """
        ...


class Minifier(Protocol):
    """Protocol for minifiers."""

    def minify(self, source: str) -> str:
        """Return the minified form of *source*."""
        ...


def run_command(
    cmd: list[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run *cmd* with captured output.

    Raises:
        ToolchainError: If the executable is missing, the command times
            out, or (with *check*) it exits non-zero.
    """
    full_env = os.environ.copy()
    if env:
        full_env.update(env)

    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=full_env,
        )
    except FileNotFoundError as e:
        raise ToolchainError(f"Executable not found: {cmd[0]}", command=cmd) from e
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(
            f"Command timed out after {timeout}s: {' '.join(cmd)}", command=cmd
        ) from e

    if check and result.returncode != 0:
        raise ToolchainError(
            f"Command failed: {' '.join(cmd)}\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}",
            command=cmd,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result
