"""Canonical form for a raw interest tag."""

from __future__ import annotations

import re

# Greedy and not nesting aware: "a (b) c (d)" loses everything from the first
# "(" to the last ")".
_PARENTHETICAL_RE = re.compile(r"\s*\(.*\)\s*")


def normalize(raw: str | None) -> str:
    """Return the comparable key for one raw interest token.

    Trims, lowercases, drops any parenthetical group with its surrounding
    whitespace, trims again and strips a single trailing ``s``.

    The ``s`` stripping is a crude plural fold: ``"robots"`` becomes
    ``"robot"`` but ``"bus"`` also becomes ``"bu"``.  Callers rely on this exact
    behaviour for matching, so don't make it smarter.
    """
    if not raw:
        return ""
    text = raw.strip().lower()
    text = _PARENTHETICAL_RE.sub("", text).strip()
    if text.endswith("s"):
        text = text[:-1]
    return text
