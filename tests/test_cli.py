"""Tests for the anywhereify command-line interface."""

from __future__ import annotations

import json

import pytest

from anywhereify import cli
from anywhereify.builder import BuildResult
from anywhereify.config import CONFIG_FILENAME

CONFIG = {
    "exports": [
        {"name": "left-pad", "alias": "LeftPad"},
        {
            "name": "@opengsn/gsn",
            "alias": "OpenGSN",
            "exports": [{"name": "dist/RelayProvider", "alias": "RelayProvider"}],
        },
    ],
}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text(json.dumps(CONFIG))
    return path


def _lock(path, versions):
    path.write_text(
        json.dumps({"packages": {f"node_modules/{n}": {"version": v} for n, v in versions.items()}})
    )
    return path


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "usage: anywhereify" in capsys.readouterr().out


class TestCompile:
    def test_json(self, config_file, capsys):
        assert cli.main(["compile", "--config", str(config_file), "--json"]) == 0
        fragments = json.loads(capsys.readouterr().out)

        assert fragments["packages"] == ["left-pad", "@opengsn/gsn"]
        assert fragments["declarations"].count("var ") == 2
        assert 'require("@opengsn/gsn/dist/RelayProvider")' in fragments["declarations"]
        assert fragments["global_declarations"].count("var ") == 2
        assert fragments["module_exports"].startswith("module.exports = {")
        assert '"OpenGSN": {' in fragments["module_exports"]

    def test_invalid_exports(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"exports": [{"name": "x", "alias": ""}]}))
        assert cli.main(["compile", "--config", str(path)]) == 1

    def test_missing_config(self, tmp_path):
        assert cli.main(["compile", "--config", str(tmp_path / "nope.json")]) == 1


class TestExternals:
    def test_json(self, tmp_path, capsys):
        super_lock = _lock(tmp_path / "super.json", {"web3": "1.2.0", "bn.js": "5.0.0"})
        sub_lock = _lock(tmp_path / "sub.json", {"web3": "1.1.0", "bn.js": "4.11.9", "x": "1.0.0"})

        assert cli.main(["externals", str(super_lock), str(sub_lock), "--json"]) == 0
        decisions = json.loads(capsys.readouterr().out)
        assert [(d["name"], d["should_externalize"]) for d in decisions] == [
            ("bn.js", False),
            ("web3", True),
        ]

    def test_table(self, tmp_path):
        super_lock = _lock(tmp_path / "super.json", {"web3": "1.2.0"})
        sub_lock = _lock(tmp_path / "sub.json", {"web3": "1.1.0"})
        assert cli.main(["externals", str(super_lock), str(sub_lock)]) == 0

    def test_missing_lockfile(self, tmp_path):
        assert cli.main(["externals", str(tmp_path / "a.json"), str(tmp_path / "b.json")]) == 1


class TestBuild:
    def test_overrides_reach_builder(self, config_file, tmp_path, monkeypatch):
        seen = {}

        class StubBuilder:
            def __init__(self, config, on_step=None):
                seen["config"] = config

            def build(self, force=False):
                seen["force"] = force
                return BuildResult(out_file=tmp_path / "out" / "index.js", externals=["web3"])

        monkeypatch.setattr("anywhereify.builder.Builder", StubBuilder)

        code = cli.main([
            "build",
            "--config", str(config_file),
            "--out", str(tmp_path / "out"),
            "--polyfills", "a, b",
            "--no-minify",
            "--force",
        ])

        assert code == 0
        config = seen["config"]
        assert config.out == (tmp_path / "out").resolve()
        assert config.polyfills == ["a", "b"]
        assert config.minify is False
        assert seen["force"] is True

    def test_invalid_config_returns_error(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text(json.dumps({"exports": []}))
        assert cli.main(["build", "--config", str(path)]) == 1
