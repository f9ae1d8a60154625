"""Lexical reference discovery over definition bodies."""

from __future__ import annotations

import re
from typing import AbstractSet, Optional, Pattern, Set

# Capitalised identifier tokens; generated schema constants are PascalCase.
REFERENCE_PATTERN = re.compile(r"\b[A-Z][A-Za-z0-9_]*\b")


def scan(
    body: str,
    known_names: AbstractSet[str],
    *,
    own_name: Optional[str] = None,
    pattern: Pattern[str] = REFERENCE_PATTERN,
) -> Set[str]:
    """Return the known names that appear as whole tokens inside ``body``.

    Matches inside comments or string literals are kept: callers only need a
    superset of the true references to build a safe ordering.
    """
    if not body:
        return set()
    found = {match.group(0) for match in pattern.finditer(body)}
    found.intersection_update(known_names)
    if own_name is not None:
        found.discard(own_name)
    return found


__all__ = ["REFERENCE_PATTERN", "scan"]
