"""Tests for anywhereify.config module."""

from __future__ import annotations

import json

import pytest

from anywhereify.config import (
    CONFIG_FILENAME,
    LOCAL_CONFIG_FILENAME,
    AnywhereConfig,
    deep_merge,
    find_config_file,
)

SAMPLE_CONFIG = {
    "exports": [
        {"name": "web3-providers-http", "alias": "Web3HttpProvider"},
        {
            "name": "@opengsn/gsn",
            "alias": "OpenGSN",
            "exports": [{"name": "dist/RelayProvider", "alias": "RelayProvider"}],
        },
    ],
}


# ---------------------------------------------------------------------------
# deep_merge
# ---------------------------------------------------------------------------


class TestDeepMerge:
    def test_basic(self):
        result = deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 99}})
        assert result == {"a": 1, "b": {"c": 99, "d": 3}}

    def test_does_not_mutate_base(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 99}})
        assert base["b"]["c"] == 2

    def test_lists_are_replaced(self):
        result = deep_merge({"polyfills": ["a", "b"]}, {"polyfills": ["c"]})
        assert result == {"polyfills": ["c"]}

    def test_override_dict_with_scalar(self):
        assert deep_merge({"k": {"x": 1}}, {"k": None}) == {"k": None}


# ---------------------------------------------------------------------------
# from_dict
# ---------------------------------------------------------------------------


class TestFromDict:
    def test_defaults(self, tmp_path):
        config = AnywhereConfig.from_dict(SAMPLE_CONFIG, root=tmp_path)
        assert config.out == tmp_path.resolve() / "dist"
        assert config.polyfills == []
        assert config.minify is True
        assert config.host is None
        assert config.keep_temp is False
        assert config.root == tmp_path.resolve()

    def test_raw_exports_unchanged_without_polyfills(self, tmp_path):
        config = AnywhereConfig.from_dict(SAMPLE_CONFIG, root=tmp_path)
        assert config.raw_exports == SAMPLE_CONFIG["exports"]

    def test_polyfills_come_first(self, tmp_path):
        data = {**SAMPLE_CONFIG, "polyfills": ["react-native-polyfill"]}
        config = AnywhereConfig.from_dict(data, root=tmp_path)
        assert config.raw_exports[0] == {"name": "react-native-polyfill"}
        assert config.raw_exports[1:] == SAMPLE_CONFIG["exports"]

    def test_relative_paths_resolve_from_root(self, tmp_path):
        data = {**SAMPLE_CONFIG, "out": "build/js", "host": "../host-app"}
        config = AnywhereConfig.from_dict(data, root=tmp_path)
        assert config.out == tmp_path.resolve() / "build" / "js"
        assert config.host == tmp_path.resolve() / "../host-app"

    def test_absolute_out(self, tmp_path):
        target = tmp_path / "elsewhere"
        data = {**SAMPLE_CONFIG, "out": str(target)}
        assert AnywhereConfig.from_dict(data, root=tmp_path / "p").out == target

    @pytest.mark.parametrize(
        "data, message",
        [
            ([], "config Object"),
            ({}, "non-empty Array exports"),
            ({"exports": []}, "non-empty Array exports"),
            ({"exports": {"name": "x"}}, "non-empty Array exports"),
            ({**SAMPLE_CONFIG, "out": ""}, "non-empty String out"),
            ({**SAMPLE_CONFIG, "polyfills": "a,b"}, "polyfills"),
            ({**SAMPLE_CONFIG, "polyfills": [""]}, "polyfills"),
            ({**SAMPLE_CONFIG, "minify": "yes"}, "Boolean minify"),
            ({**SAMPLE_CONFIG, "host": 3}, "non-empty String host"),
            ({**SAMPLE_CONFIG, "keep_temp": 1}, "Boolean keep_temp"),
        ],
    )
    def test_invalid(self, data, message, tmp_path):
        with pytest.raises(ValueError, match=message):
            AnywhereConfig.from_dict(data, root=tmp_path)

    def test_export_contents_not_validated_here(self, tmp_path):
        config = AnywhereConfig.from_dict({"exports": [42]}, root=tmp_path)
        assert config.exports == [42]


# ---------------------------------------------------------------------------
# Local overrides
# ---------------------------------------------------------------------------


class TestLocalOverrides:
    def test_override_wins(self, tmp_path):
        config = AnywhereConfig.from_dict(
            SAMPLE_CONFIG, local_overrides={"minify": False, "host": "host"}, root=tmp_path
        )
        assert config.minify is False
        assert config.host == tmp_path.resolve() / "host"

    def test_invalid_override(self, tmp_path):
        with pytest.raises(ValueError, match="local config Object"):
            AnywhereConfig.from_dict(SAMPLE_CONFIG, local_overrides=[], root=tmp_path)


# ---------------------------------------------------------------------------
# find_config_file / load
# ---------------------------------------------------------------------------


class TestFindConfigFile:
    def test_found_in_parent(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("{}")
        child = tmp_path / "src" / "lib"
        child.mkdir(parents=True)
        assert find_config_file(child) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_not_found(self, tmp_path):
        # tmp_path has no config and its parents are unlikely to have one
        result = find_config_file(tmp_path)
        assert result is None or result.parent != tmp_path.resolve()


class TestLoad:
    def test_load_with_local_file(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps(SAMPLE_CONFIG))
        (tmp_path / LOCAL_CONFIG_FILENAME).write_text(json.dumps({"keep_temp": True}))
        sub = tmp_path / "src"
        sub.mkdir()

        config = AnywhereConfig.load(start_dir=sub)
        assert config.keep_temp is True
        assert config.root == tmp_path.resolve()
        assert config.out == tmp_path.resolve() / "dist"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps(SAMPLE_CONFIG))
        assert AnywhereConfig.load(config_path=path).root == tmp_path.resolve()

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AnywhereConfig.load(config_path=tmp_path / "missing.json")

    def test_missing_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr("anywhereify.config.find_config_file", lambda start_dir=None: None)
        with pytest.raises(FileNotFoundError, match="forgotten to define your anywhere.config.json"):
            AnywhereConfig.load(start_dir=tmp_path)
