"""
AnywhereConfig: project configuration loader for anywhereify.

This module provides:

- find_config_file: Walk up directories to locate anywhere.config.json
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- AnywhereConfig: Typed, validated configuration with load/from_dict

Configuration is loaded from ``anywhere.config.json`` with optional
``anywhere.config.local.json`` overrides. The resolution order is:

    defaults → anywhere.config.json → anywhere.config.local.json

Example:
    >>> config = AnywhereConfig.load()
    >>> config.out
    PosixPath('/path/to/project/dist')
    >>> config.raw_exports[0]
    {'name': 'react-native-polyfill'}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "anywhere.config.json"
LOCAL_CONFIG_FILENAME = "anywhere.config.local.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "exports": None,
    "out": "dist",
    "polyfills": [],
    "minify": True,
    "host": None,
    "keep_temp": False,
}


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find ``anywhere.config.json``.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Lists are leaves: an override list replaces the base list. Neither
    input is mutated; a new dict is returned.
    """
    merged: dict[str, Any] = dict(base)

    for key, over_val in override.items():
        base_val = base.get(key)
        if isinstance(base_val, dict) and isinstance(over_val, dict):
            merged[key] = deep_merge(base_val, over_val)
        else:
            merged[key] = over_val

    return merged


def _load_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _require_non_empty_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Expected non-empty String {key}, encountered {value!r}.")
    return value


def _require_bool(data: dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValueError(f"Expected Boolean {key}, encountered {value!r}.")
    return value


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnywhereConfig:
    """
    Validated anywhereify configuration.

    Attributes:
        exports: The raw export specification, sanitized at build time.
        out: Output directory for the bundle.
        polyfills: Packages loaded for their side effects before any export.
        minify: Whether to minify the bundle.
        host: Project whose installed dependencies are assumed present at
            runtime; ``None`` disables externalization.
        keep_temp: Keep the temporary build project for inspection.
        root: Directory of the config file; relative paths resolve from here.
    """

    exports: list[Any]
    out: Path
    polyfills: list[str] = field(default_factory=list)
    minify: bool = True
    host: Path | None = None
    keep_temp: bool = False
    root: Path = field(default_factory=Path.cwd)

    @property
    def raw_exports(self) -> list[Any]:
        """Polyfills as side-effect-only exports, followed by the declared exports."""
        return [{"name": name} for name in self.polyfills] + list(self.exports)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        start_dir: Path | None = None,
        config_path: Path | None = None,
    ) -> AnywhereConfig:
        """
        Find and load the project configuration.

        Walks up from *start_dir* (default: cwd) unless *config_path* is
        given, then deep-merges ``anywhere.config.local.json`` from the
        same directory when present.

        Raises:
            FileNotFoundError: If no config file is found.
            ValueError: If the config is invalid.
        """
        if config_path is None:
            config_path = find_config_file(start_dir)
            if config_path is None:
                raise FileNotFoundError(
                    f"It looks like you have forgotten to define your {CONFIG_FILENAME} "
                    f"(searched {start_dir or Path.cwd()} and its parents)."
                )
        elif not Path(config_path).is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        config_path = Path(config_path).resolve()
        data = _load_json(config_path)

        local_overrides: dict[str, Any] | None = None
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            local_overrides = _load_json(local_path)

        return cls.from_dict(data, local_overrides=local_overrides, root=config_path.parent)

    @classmethod
    def from_dict(
        cls,
        data: Any,
        local_overrides: Any = None,
        root: Path | None = None,
    ) -> AnywhereConfig:
        """
        Validate a parsed config document.

        Useful for testing without touching the filesystem.

        Raises:
            ValueError: If the document or any field is invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a config Object, encountered {data!r}.")
        if local_overrides is not None and not isinstance(local_overrides, dict):
            raise ValueError(
                f"Expected a local config Object, encountered {local_overrides!r}."
            )

        merged = deep_merge(DEFAULT_CONFIG, data)
        if local_overrides:
            merged = deep_merge(merged, local_overrides)

        root = (root or Path.cwd()).resolve()

        exports = merged["exports"]
        if not isinstance(exports, list) or not exports:
            raise ValueError(f"Expected non-empty Array exports, encountered {exports!r}.")

        out = root / _require_non_empty_string(merged, "out")

        polyfills = merged["polyfills"]
        if not isinstance(polyfills, list) or not all(
            isinstance(p, str) and p for p in polyfills
        ):
            raise ValueError(
                f"Expected Array of non-empty String polyfills, encountered {polyfills!r}."
            )

        host = None
        if merged["host"] is not None:
            host = root / _require_non_empty_string(merged, "host")

        return cls(
            exports=list(exports),
            out=out,
            polyfills=list(polyfills),
            minify=_require_bool(merged, "minify"),
            host=host,
            keep_temp=_require_bool(merged, "keep_temp"),
            root=root,
        )
