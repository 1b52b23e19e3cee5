"""
Builder: turns an anywhere.config.json into a single bundled index.js.

Steps:

1. Sanitize the export specification (any compiler error halts the build)
2. Skip if the build cache says the inputs are unchanged
3. Scaffold a temporary project with a stub that loads every export
4. Install the exported packages into it
5. Optionally decide which packages the host already provides
6. Bundle the stub, leaving the externals out
7. Hoist the bindings, suppress their scoped declarations, append
   ``module.exports``
8. Minify and write ``<out>/index.js``

Typical usage::

    from anywhereify.builder import Builder
    from anywhereify.config import AnywhereConfig

    result = Builder(AnywhereConfig.load()).build()
    print(result.out_file)
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from anywhereify import __version__
from anywhereify.cache import OUTPUT_FILENAME, BuildCache, build_inputs
from anywhereify.config import AnywhereConfig
from anywhereify.exports import (
    ExportNode,
    IdentifierSource,
    declare_exports,
    declare_global_exports,
    generate_module_exports,
    packages,
    sanitize_exports,
    suppress_scoped_declarations,
)
from anywhereify.externals import capture_snapshots, gather_externals
from anywhereify.toolchain import (
    BabelMinifier,
    BrowserifyBundler,
    Bundler,
    Installer,
    Minifier,
    NpmInstaller,
)

logger = logging.getLogger(__name__)

STUB_FILENAME = "stub.js"
BUNDLE_FILENAME = "bundle.js"

StepCallback = Callable[[str], None]


@dataclass
class BuildResult:
    """
    Outcome of a build.

    Attributes:
        out_file: The written bundle.
        packages: Top-level packages that were installed.
        externals: Packages left for the host to provide.
        duration_s: Wall-clock build time in seconds.
        cached: ``True`` if the build was skipped as up to date.
    """

    out_file: Path
    packages: list[str] = field(default_factory=list)
    externals: list[str] = field(default_factory=list)
    duration_s: float = 0.0
    cached: bool = False


def assemble_bundle(bundle_text: str, exports: list[ExportNode]) -> str:
    """
    Wrap bundled text so every binding reaches ``module.exports``.

    The hoisted declarations go first, then the bundle with its scoped
    declarations turned into assignments, then ``module.exports``.
    """
    hoisted = declare_global_exports(exports)
    source = f"{hoisted}\n{bundle_text}" if hoisted else bundle_text
    source = suppress_scoped_declarations(source, exports)
    return f"{source.rstrip()}\n{generate_module_exports(exports)}\n"


class Builder:
    """
    Drives one build.

    Args:
        config: Validated configuration.
        project_dir: Project being bundled (holds ``package.json``).
            Defaults to the config file's directory.
        installer: Package installer (default: :class:`NpmInstaller`).
        bundler: Bundler (default: :class:`BrowserifyBundler`).
        minifier: Minifier (default: :class:`BabelMinifier`).
        ids: Identifier source for export bindings.
        on_step: Called with a short description as each step starts.
    """

    def __init__(
        self,
        config: AnywhereConfig,
        project_dir: Path | None = None,
        installer: Installer | None = None,
        bundler: Bundler | None = None,
        minifier: Minifier | None = None,
        ids: IdentifierSource | None = None,
        on_step: StepCallback | None = None,
    ) -> None:
        self.config = config
        self.project_dir = Path(project_dir or config.root)
        self.installer = installer or NpmInstaller()
        self.bundler = bundler or BrowserifyBundler()
        self.minifier = minifier or BabelMinifier()
        self.ids = ids
        self.on_step = on_step
        self.cache = BuildCache(config.out)

    def _step(self, message: str) -> None:
        logger.info(message)
        if self.on_step is not None:
            self.on_step(message)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def compile(self) -> list[ExportNode]:
        """Sanitize the configured exports."""
        return sanitize_exports(self.config.raw_exports, ids=self.ids)

    def scaffold(self, temp_dir: Path, exports: list[ExportNode]) -> Path:
        """Write the temporary project and return the stub path."""
        temp_dir.mkdir(parents=True, exist_ok=True)
        package_json = self.project_dir / "package.json"
        if not package_json.is_file():
            raise FileNotFoundError(f"No package.json found in {self.project_dir}")
        shutil.copyfile(package_json, temp_dir / "package.json")

        stub = temp_dir / STUB_FILENAME
        stub.write_text(declare_exports(exports) + "\n", encoding="utf-8")
        logger.debug("Wrote stub %s", stub)
        return stub

    def resolve_externals(self, temp_dir: Path) -> list[str]:
        """Packages the host already provides in a compatible version."""
        if self.config.host is None:
            logger.info("No host configured; bundling every dependency")
            return []
        super_snapshot, sub_snapshot = capture_snapshots(
            host_dir=self.config.host,
            project_dir=temp_dir,
            work_dir=temp_dir,
            installer=self.installer,
        )
        return gather_externals(super_snapshot, sub_snapshot)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self, force: bool = False) -> BuildResult:
        """
        Run the full build.

        Args:
            force: Rebuild even if the cache says the output is current.

        Raises:
            ExportSpecError: The export specification is invalid.
            ToolchainError: An external tool failed.
            FileNotFoundError: The project has no ``package.json``.
        """
        started = time.monotonic()
        out_file = self.config.out / OUTPUT_FILENAME

        self._step("Compiling exports")
        exports = self.compile()
        to_install = packages(exports)

        inputs = build_inputs(
            self.config.raw_exports,
            minify=self.config.minify,
            host=self.config.host,
            project_dir=self.project_dir,
            tool_version=__version__,
        )
        cached = None if force else self.cache.lookup(inputs)
        if cached is not None:
            self._step("Output is up to date")
            return BuildResult(
                out_file=out_file,
                packages=to_install,
                externals=list(cached.externals),
                duration_s=time.monotonic() - started,
                cached=True,
            )

        temp_dir = Path(tempfile.mkdtemp(prefix="anywhereify-"))
        try:
            self._step("Scaffolding temporary project")
            stub = self.scaffold(temp_dir, exports)

            self._step(f"Installing {len(to_install)} package(s)")
            self.installer.install(to_install, cwd=temp_dir)

            self._step("Resolving externals")
            externals = self.resolve_externals(temp_dir)
            logger.info("Externals: %s", externals or "(none)")

            self._step("Bundling")
            bundle_text = self.bundler.bundle(
                [stub], externals, temp_dir / BUNDLE_FILENAME
            )
            source = assemble_bundle(bundle_text, exports)

            if self.config.minify:
                self._step("Minifying")
                source = self.minifier.minify(source)

            self._step(f"Writing {out_file}")
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(source, encoding="utf-8")
            self.cache.record(inputs, externals)
        finally:
            if self.config.keep_temp:
                logger.info("Keeping temporary project at %s", temp_dir)
            else:
                logger.debug("Cleaning up %s", temp_dir)
                shutil.rmtree(temp_dir, ignore_errors=True)

        return BuildResult(
            out_file=out_file,
            packages=to_install,
            externals=externals,
            duration_s=time.monotonic() - started,
        )
