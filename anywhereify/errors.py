"""
Error taxonomy for export compilation and the external toolchain.

Compiler errors are raised synchronously and never recovered from: a single
malformed node invalidates the whole compilation. All of them subclass
:class:`ExportSpecError` (itself a ``ValueError``) so callers can halt the
build with one ``except`` clause and surface the message verbatim.
"""

from __future__ import annotations


class ExportSpecError(ValueError):
    """Base class for export specification errors."""

    pass


class ShapeError(ExportSpecError):
    """A malformed export list or element, or a missing required field."""

    pass


class AliasError(ExportSpecError):
    """An ``alias`` that is present but not a non-empty string."""

    pass


class DepthError(ExportSpecError):
    """Exports nested deeper than a single level."""

    pass


class NestedExportsRequireAliasError(ExportSpecError):
    """Nested exports declared on a parent without an ``alias``."""

    pass


class ParentShapeError(ExportSpecError):
    """A nested node was emitted without a well-formed parent."""

    pass


class UnrepresentableNodeError(ExportSpecError):
    """
    A node the emitters cannot represent.

    Never caused by user input: a sanitized tree cannot produce one.
    """

    pass


class ToolchainError(RuntimeError):
    """
    An external tool (npm, browserify, minifier) failed.

    Attributes:
        command: The command that was run.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command or [])
        self.stdout = stdout
        self.stderr = stderr


class MinifyError(ToolchainError):
    """The minifier rejected the bundle."""

    pass
