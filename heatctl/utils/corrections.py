"""
Suggest the intended name for a supposedly mistyped one.
"""

from __future__ import annotations

from collections.abc import Iterable
from difflib import SequenceMatcher
import operator

LIMIT = 0.6

def suggest_corrections(badname: str, goodnames: Iterable[str]) -> list[str]:
    """
    Return names from goodnames similar to badname, best match first.
    """
    badname_lower = badname.lower()
    scored = [
        (name, SequenceMatcher(None, a=badname_lower, b=name.lower(), autojunk=False).ratio())
        for name in goodnames]
    scored = [item for item in scored if item[1] >= LIMIT]
    scored.sort(key=operator.itemgetter(1), reverse=True)
    return [name for name, _ in scored]


def did_you_mean(badname: str, goodnames: Iterable[str]) -> str:
    """Format the suggestions as a message suffix (may be empty)."""
    suggestions = suggest_corrections(badname, goodnames)
    if not suggestions:
        return ""
    return f"; did you mean {' or '.join(repr(s) for s in suggestions[:2])}?"
