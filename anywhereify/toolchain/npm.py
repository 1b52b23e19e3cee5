"""
NpmInstaller: package installation through the npm CLI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from anywhereify.errors import ToolchainError
from anywhereify.toolchain.base import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)


class NpmInstaller:
    """
    Installs and lists packages with ``npm``.

    Args:
        npm: The npm executable.
        timeout: Per-command timeout in seconds.
    """

    def __init__(self, npm: str = "npm", timeout: float = DEFAULT_TIMEOUT) -> None:
        self.npm = npm
        self.timeout = timeout

    def install(self, packages: Sequence[str], cwd: Path) -> None:
        packages = list(packages)
        if not packages:
            logger.debug("Nothing to install in %s", cwd)
            return
        logger.info("Installing %d package(s) in %s", len(packages), cwd)
        run_command(
            [self.npm, "install", "--save", "--no-audit", "--no-fund", *packages],
            cwd=cwd,
            timeout=self.timeout,
        )

    def list(self, cwd: Path) -> list[str]:
        # npm ls exits non-zero for extraneous or missing packages but
        # still prints the tree.
        result = run_command(
            [self.npm, "ls", "--json", "--depth=0"],
            cwd=cwd,
            timeout=self.timeout,
            check=False,
        )
        try:
            data = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise ToolchainError(
                f"Could not parse `npm ls` output in {cwd}",
                command=[self.npm, "ls", "--json", "--depth=0"],
                stdout=result.stdout,
                stderr=result.stderr,
            ) from e
        return list((data.get("dependencies") or {}).keys())
