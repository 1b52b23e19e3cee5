"""
anywhereify: bundle npm packages so they can be loaded anywhere.

An export specification names the packages (and paths inside them) to
expose. anywhereify compiles it into a stub that loads each one into a
binding, bundles the stub, and appends a ``module.exports`` object built
from the same tree. Packages the host runtime already provides in a
compatible version are left out of the bundle.

Example:
    import anywhereify

    tree = anywhereify.sanitize_exports([
        {"name": "web3-providers-http", "alias": "Web3HttpProvider"},
        {"name": "@opengsn/gsn", "alias": "OpenGSN", "exports": [
            {"name": "dist/RelayProvider", "alias": "RelayProvider"},
        ]},
    ])
    print(anywhereify.declare_exports(tree))
    print(anywhereify.generate_module_exports(tree))

    # Or run the whole build from anywhere.config.json:
    result = anywhereify.Builder(anywhereify.AnywhereConfig.load()).build()
"""

__version__ = "0.1.0"

# Errors
from anywhereify.errors import (
    AliasError,
    DepthError,
    ExportSpecError,
    MinifyError,
    NestedExportsRequireAliasError,
    ParentShapeError,
    ShapeError,
    ToolchainError,
    UnrepresentableNodeError,
)

# Export compiler
from anywhereify.exports import (
    CounterIdentifierSource,
    ExportNode,
    IdentifierSource,
    Parsed,
    RandomIdentifierSource,
    Rejected,
    declare_exports,
    declare_global_exports,
    generate_module_exports,
    packages,
    parse_exports,
    sanitize_exports,
    suppress_scoped_declarations,
)

# Externals
from anywhereify.externals import (
    DependencySnapshot,
    SemVer,
    VersionDecision,
    decide_externals,
    diff_snapshots,
    gather_externals,
    should_externalize,
)

# Config / build
from anywhereify.config import AnywhereConfig
from anywhereify.builder import Builder, BuildResult

__all__ = [
    "__version__",
    # Errors
    "AliasError",
    "DepthError",
    "ExportSpecError",
    "MinifyError",
    "NestedExportsRequireAliasError",
    "ParentShapeError",
    "ShapeError",
    "ToolchainError",
    "UnrepresentableNodeError",
    # Export compiler
    "CounterIdentifierSource",
    "ExportNode",
    "IdentifierSource",
    "Parsed",
    "RandomIdentifierSource",
    "Rejected",
    "declare_exports",
    "declare_global_exports",
    "generate_module_exports",
    "packages",
    "parse_exports",
    "sanitize_exports",
    "suppress_scoped_declarations",
    # Externals
    "DependencySnapshot",
    "SemVer",
    "VersionDecision",
    "decide_externals",
    "diff_snapshots",
    "gather_externals",
    "should_externalize",
    # Config / build
    "AnywhereConfig",
    "Builder",
    "BuildResult",
]
