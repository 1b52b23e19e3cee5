"""
BabelMinifier: minification through the babel-minify CLI.

Name mangling and regexp constructor rewriting are disabled: the hoisted
bindings and ``module.exports`` keys must survive minification verbatim.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from anywhereify.errors import MinifyError, ToolchainError
from anywhereify.toolchain.base import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)


class BabelMinifier:
    """
    Minifies source text with ``babel-minify`` via ``npx``.

    Args:
        npx: The npx executable.
        timeout: Timeout in seconds.
    """

    def __init__(self, npx: str = "npx", timeout: float = DEFAULT_TIMEOUT) -> None:
        self.npx = npx
        self.timeout = timeout

    def minify(self, source: str) -> str:
        with tempfile.TemporaryDirectory(prefix="anywhereify-minify-") as tmp:
            in_file = Path(tmp) / "input.js"
            out_file = Path(tmp) / "output.js"
            in_file.write_text(source, encoding="utf-8")

            cmd = [
                self.npx,
                "--yes",
                "babel-minify",
                str(in_file),
                "--out-file",
                str(out_file),
                "--mangle=false",
                "--regexpConstructors=false",
            ]
            try:
                run_command(cmd, cwd=Path(tmp), timeout=self.timeout)
            except ToolchainError as e:
                raise MinifyError(
                    f"Minification failed: {e}",
                    command=e.command,
                    stdout=e.stdout,
                    stderr=e.stderr,
                ) from e

            minified = out_file.read_text(encoding="utf-8")

        logger.debug("Minified %d -> %d bytes", len(source), len(minified))
        return minified
