"""
Scope suppression for bundled output.

The bundler wraps the stub in its own function scope, so ``var <id> = ...``
inside it is invisible to the ``module.exports`` appended afterwards. This
pass turns the first scoped declaration of each tree id into a plain
assignment, which writes through to the hoisted ``var <id>`` emitted by
:func:`declare_global_exports`.

The rewrite is textual and runs in a single regex pass. Only declarations
with an initializer are matched, so the hoisted forward declarations that
precede the bundle are left alone, and identifiers are matched on whole
word boundaries so an id that is a prefix of another is never confused
with it.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from anywhereify.exports.tree import ExportNode, collect_ids

logger = logging.getLogger(__name__)

BINDING_KEYWORDS = ("var", "let", "const")


def _declaration_pattern(ids: Sequence[str]) -> re.Pattern[str]:
    # Longest first so alternation never stops at a shorter prefix.
    alternatives = "|".join(re.escape(i) for i in sorted(set(ids), key=len, reverse=True))
    keywords = "|".join(BINDING_KEYWORDS)
    return re.compile(
        rf"(?<![\w$.])(?:{keywords})\s+(?P<id>{alternatives})(?![\w$])(?=\s*=(?!=))"
    )


def suppress_scoped_declarations(source: str, exports: Sequence[ExportNode]) -> str:
    """
    Rewrite the first ``var|let|const <id> =`` of every tree id to ``<id> =``.

    Args:
        source: Bundled source text.
        exports: The export tree the bundle was built from.

    Returns:
        The rewritten source.
    """
    ids = collect_ids(exports)
    if not ids:
        return source

    rewritten: set[str] = set()

    def _replace(match: re.Match[str]) -> str:
        identifier = match.group("id")
        if identifier in rewritten:
            return match.group(0)
        rewritten.add(identifier)
        return identifier

    result = _declaration_pattern(ids).sub(_replace, source)

    missing = [i for i in ids if i not in rewritten]
    if missing:
        logger.debug("No scoped declaration found for %d id(s): %s", len(missing), missing)
    return result
