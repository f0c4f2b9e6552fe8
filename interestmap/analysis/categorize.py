"""Assign ranked interests to the fixed keyword categories."""

from __future__ import annotations

from collections.abc import Iterable

from interestmap.analysis.models import CategoryBreakdown, CategorySpec


def assign_category(token: str, spec: CategorySpec) -> str:
    """Return the first category (table order) with a keyword inside ``token``.

    Matching is a plain substring test, not whole-word: "ai" matches
    "said".  Tokens no keyword hits go to the catch-all.
    """
    needle = token.lower()
    for category in spec.categories:
        if any(keyword in needle for keyword in category.keywords):
            return category.name
    return spec.catch_all


def categorize(ranked: Iterable[tuple[str, int]], spec: CategorySpec) -> CategoryBreakdown:
    """Sum interest counts per category and keep each category's full term map.

    Every category in ``spec`` is present in the result, zeroed if nothing
    landed in it.  Truncating to a top-N view is left to
    :meth:`CategoryBreakdown.top_terms`.
    """
    breakdown = CategoryBreakdown()
    for name in spec.names:
        breakdown.totals[name] = 0
        breakdown.terms[name] = {}

    for token, count in ranked:
        category = assign_category(token, spec)
        breakdown.totals[category] += count
        terms = breakdown.terms[category]
        terms[token] = terms.get(token, 0) + count
        breakdown.assignments[token] = category
    return breakdown
