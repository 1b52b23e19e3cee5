"""
Toolchain: installer, bundler and minifier collaborators.

Usage::

    from anywhereify.toolchain import BrowserifyBundler, NpmInstaller

    NpmInstaller().install(["left-pad"], cwd=project_dir)
    text = BrowserifyBundler().bundle([stub], externals=[], out_file=out)
"""

from anywhereify.toolchain.base import Bundler, Installer, Minifier, run_command
from anywhereify.toolchain.browserify import BrowserifyBundler, build_browserify_command
from anywhereify.toolchain.minify import BabelMinifier
from anywhereify.toolchain.npm import NpmInstaller

__all__ = [
    "BabelMinifier",
    "BrowserifyBundler",
    "Bundler",
    "Installer",
    "Minifier",
    "NpmInstaller",
    "build_browserify_command",
    "run_command",
]
