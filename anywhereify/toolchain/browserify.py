"""
BrowserifyBundler: CommonJS bundling through the browserify CLI.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from anywhereify.toolchain.base import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)


def build_browserify_command(
    entries: Sequence[Path],
    externals: Sequence[str],
    out_file: Path,
    npx: str = "npx",
) -> list[str]:
    """
    Build the browserify argument list.

    Each external becomes ``-x <name>`` so browserify leaves the
    ``require`` call for the host runtime to satisfy.
    """
    cmd = [npx, "--yes", "browserify", *(str(e) for e in entries)]
    for external in externals:
        cmd.extend(["-x", external])
    cmd.extend(["-o", str(out_file)])
    return cmd


class BrowserifyBundler:
    """
    Bundles entry files with ``browserify`` via ``npx``.

    Args:
        cwd: Directory to run in; its ``node_modules`` is used for resolution.
        npx: The npx executable.
        timeout: Timeout in seconds.
    """

    def __init__(
        self,
        cwd: Path | None = None,
        npx: str = "npx",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.cwd = cwd
        self.npx = npx
        self.timeout = timeout

    def bundle(
        self,
        entries: Sequence[Path],
        externals: Sequence[str],
        out_file: Path,
    ) -> str:
        out_file = Path(out_file)
        cwd = self.cwd or out_file.parent
        logger.info(
            "Bundling %d entr%s with %d external(s)",
            len(entries),
            "y" if len(entries) == 1 else "ies",
            len(externals),
        )
        run_command(
            build_browserify_command(entries, externals, out_file, npx=self.npx),
            cwd=cwd,
            timeout=self.timeout,
        )
        return out_file.read_text(encoding="utf-8")
