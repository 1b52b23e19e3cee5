"""Tests for identifier allocation."""

from __future__ import annotations

import threading

import pytest

from anywhereify.exports import ids as ids_module
from anywhereify.exports.ids import (
    CounterIdentifierSource,
    IdentifierSource,
    RandomIdentifierSource,
    is_safe_identifier,
)


class TestIsSafeIdentifier:
    """Tests for is_safe_identifier()."""

    def test_letters_only(self):
        assert is_safe_identifier("abcDEF")

    def test_rejects_digits_and_symbols(self):
        assert not is_safe_identifier("abc1")
        assert not is_safe_identifier("a_b")
        assert not is_safe_identifier("a-b")
        assert not is_safe_identifier("$a")

    def test_rejects_empty(self):
        assert not is_safe_identifier("")

    def test_rejects_reserved_words(self):
        assert not is_safe_identifier("function")
        assert not is_safe_identifier("var")
        assert not is_safe_identifier("require")


class TestCounterIdentifierSource:
    """Tests for CounterIdentifierSource."""

    def test_sequence(self):
        ids = CounterIdentifierSource()
        assert [ids.next_id() for _ in range(3)] == ["anywhereA", "anywhereB", "anywhereC"]

    def test_rolls_over_after_z(self):
        ids = CounterIdentifierSource(prefix="x")
        issued = [ids.next_id() for _ in range(28)]
        assert issued[25] == "xZ"
        assert issued[26] == "xAA"
        assert issued[27] == "xAB"

    def test_all_safe_and_unique(self):
        ids = CounterIdentifierSource()
        issued = [ids.next_id() for _ in range(1000)]
        assert len(set(issued)) == 1000
        assert all(is_safe_identifier(i) for i in issued)

    def test_independent_sources_are_deterministic(self):
        a, b = CounterIdentifierSource(), CounterIdentifierSource()
        assert [a.next_id() for _ in range(5)] == [b.next_id() for _ in range(5)]

    def test_invalid_prefix(self):
        with pytest.raises(ValueError, match="letters only"):
            CounterIdentifierSource(prefix="id_")

    def test_satisfies_protocol(self):
        assert isinstance(CounterIdentifierSource(), IdentifierSource)


class TestRandomIdentifierSource:
    """Tests for RandomIdentifierSource."""

    def test_ids_are_letters_only(self):
        ids = RandomIdentifierSource()
        for _ in range(200):
            identifier = ids.next_id()
            assert is_safe_identifier(identifier)
            assert len(identifier) >= 8

    def test_ids_are_unique(self):
        ids = RandomIdentifierSource()
        issued = [ids.next_id() for _ in range(500)]
        assert len(set(issued)) == len(issued)

    def test_retries_short_reserved_and_duplicate_tokens(self, monkeypatch):
        tokens = iter(["a1-b2_c3", "function", "abc-def12gh", "abcdefgh", "ijk_lmnop"])
        monkeypatch.setattr(ids_module.secrets, "token_urlsafe", lambda n: next(tokens))

        ids = RandomIdentifierSource()
        assert ids.next_id() == "abcdefgh"
        # "abcdefgh" again is skipped as a duplicate.
        assert ids.next_id() == "ijklmnop"

    def test_thread_safe_uniqueness(self):
        ids = RandomIdentifierSource()
        issued: list[str] = []
        lock = threading.Lock()

        def worker():
            local = [ids.next_id() for _ in range(100)]
            with lock:
                issued.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(issued) == 800
        assert len(set(issued)) == 800

    def test_satisfies_protocol(self):
        assert isinstance(RandomIdentifierSource(), IdentifierSource)
