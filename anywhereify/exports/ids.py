"""
Identifier allocation for export bindings.

Every export node gets an identifier that is safe to use as a bare
JavaScript binding: letters only, never a reserved word, unique for the
lifetime of the source that issued it.

Two sources are provided:

- RandomIdentifierSource: collision-resistant random tokens (default)
- CounterIdentifierSource: deterministic, for reproducible output and tests

Example:
    >>> ids = CounterIdentifierSource()
    >>> ids.next_id(), ids.next_id()
    ('anywhereA', 'anywhereB')
"""

from __future__ import annotations

import re
import secrets
import threading
from typing import Protocol, runtime_checkable

# 16 bytes -> 22 URL-safe characters before stripping.
TOKEN_BYTES = 16
MIN_ID_LENGTH = 8

_NON_LETTERS = re.compile(r"[^A-Za-z]")
_LETTERS_ONLY = re.compile(r"^[A-Za-z]+$")

JS_RESERVED_WORDS = frozenset(
    {
        "await", "break", "case", "catch", "class", "const", "continue",
        "debugger", "default", "delete", "do", "else", "enum", "export",
        "extends", "false", "finally", "for", "function", "if", "implements",
        "import", "in", "instanceof", "interface", "let", "new", "null",
        "package", "private", "protected", "public", "return", "static",
        "super", "switch", "this", "throw", "true", "try", "typeof", "var",
        "void", "while", "with", "yield", "arguments", "eval", "undefined",
        "require", "module", "exports",
    }
)


def is_safe_identifier(candidate: str) -> bool:
    """Return ``True`` if *candidate* can be used as a bare binding name."""
    return bool(_LETTERS_ONLY.match(candidate)) and candidate not in JS_RESERVED_WORDS


@runtime_checkable
class IdentifierSource(Protocol):
    """Protocol for anything that hands out binding identifiers."""

    def next_id(self) -> str:
        """Return a fresh identifier, distinct from all previous ones."""
        ...


class RandomIdentifierSource:
    """
    Random, letters-only identifiers.

    Draws a URL-safe random token, strips everything that is not a letter
    and retries until the result is long enough, not reserved and not
    previously issued. Safe to share between threads.
    """

    def __init__(self, min_length: int = MIN_ID_LENGTH) -> None:
        self.min_length = min_length
        self._issued: set[str] = set()
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            while True:
                candidate = _NON_LETTERS.sub("", secrets.token_urlsafe(TOKEN_BYTES))
                if len(candidate) < self.min_length:
                    continue
                if not is_safe_identifier(candidate) or candidate in self._issued:
                    continue
                self._issued.add(candidate)
                return candidate


def _letters(n: int) -> str:
    """Bijective base-26 encoding: 1 -> A, 26 -> Z, 27 -> AA."""
    out = []
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


class CounterIdentifierSource:
    """
    Deterministic identifiers: ``prefix`` followed by a letter counter.

    Args:
        prefix: Letters-only prefix (default: ``"anywhere"``).
    """

    def __init__(self, prefix: str = "anywhere") -> None:
        if not _LETTERS_ONLY.match(prefix):
            raise ValueError(f"Identifier prefix must be letters only, got {prefix!r}")
        self.prefix = prefix
        self._count = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            self._count += 1
            return f"{self.prefix}{_letters(self._count)}"
