"""Tests for externalization decisions."""

from __future__ import annotations

import logging

import pytest

from anywhereify.externals import (
    DependencySnapshot,
    VersionDecision,
    decide_externals,
    gather_externals,
    should_externalize,
)


class TestShouldExternalize:
    """Tests for should_externalize()."""

    @pytest.mark.parametrize(
        "super_version, sub_version, expected",
        [
            ("1.2.0", "1.1.0", True),
            ("2.0.0", "1.0.0", False),
            ("1.0.0", "1.2.0", False),
            ("1.0.0", "1.0.0", True),
            ("1.0.5", "1.0.1", True),
            ("1.0.0", "1.0.1", False),
            ("1.0.0+host", "1.0.0+bundle", True),
            ("v1.3.0", "1.2.0", True),
        ],
    )
    def test_decisions(self, super_version, sub_version, expected):
        assert should_externalize(super_version, sub_version) is expected

    @pytest.mark.parametrize(
        "super_version, sub_version",
        [(None, "1.0.0"), ("1.0.0", None), ("", "1.0.0"), ("1.0.0", "")],
    )
    def test_missing_version(self, super_version, sub_version):
        assert should_externalize(super_version, sub_version) is False

    def test_unparsable_version(self):
        assert should_externalize("github:user/repo", "1.0.0") is False
        assert should_externalize("1.0.0", "file:../x") is False

    def test_prerelease_gap_is_not_compatible(self):
        assert should_externalize("1.1.0-beta.1", "1.0.0") is False
        assert should_externalize("1.0.0", "1.0.0-rc.1") is False

    def test_same_prerelease(self):
        assert should_externalize("1.0.0-rc.1", "1.0.0-rc.1") is True


class TestDecideExternals:
    """Tests for decide_externals() and gather_externals()."""

    @pytest.fixture
    def snapshots(self):
        super_snap = DependencySnapshot(
            label="super",
            versions={"web3": "1.2.0", "bn.js": "5.0.0", "ethers": "5.0.0", "only-host": "1.0.0"},
        )
        sub_snap = DependencySnapshot(
            label="sub",
            versions={"web3": "1.1.0", "bn.js": "4.11.9", "ethers": "5.4.0", "only-sub": "1.0.0"},
        )
        return super_snap, sub_snap

    def test_sorted_decisions(self, snapshots):
        decisions = decide_externals(*snapshots)
        assert decisions == [
            VersionDecision("bn.js", "5.0.0", "4.11.9", False),
            VersionDecision("ethers", "5.0.0", "5.4.0", False),
            VersionDecision("web3", "1.2.0", "1.1.0", True),
        ]

    def test_gather(self, snapshots):
        assert gather_externals(*snapshots) == ["web3"]

    def test_no_overlap(self):
        assert gather_externals({"a": "1.0.0"}, {"b": "1.0.0"}) == []

    def test_logs_summary(self, snapshots, caplog):
        with caplog.at_level(logging.INFO, logger="anywhereify.externals.resolver"):
            decide_externals(*snapshots)
        assert "3 shared package(s), 1 externalized" in caplog.text

    def test_to_dict(self):
        d = VersionDecision("web3", "1.2.0", "1.1.0", True).to_dict()
        assert d == {
            "name": "web3",
            "super_version": "1.2.0",
            "sub_version": "1.1.0",
            "should_externalize": True,
        }
