"""Data structures for the analytics core.

These are plain dataclasses (not Pydantic); they are ephemeral, recomputed
from the current dataset on every request, and never persisted.  The API
layer converts them to response models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class CloudWord:
    """One word in the overview word cloud."""

    text: str
    count: int
    font_size: float  # pixels


@dataclass(frozen=True)
class Category:
    """One row of the category table: a name and its keyword substrings."""

    name: str
    keywords: tuple[str, ...] = ()
    colour: str = ""  # chart colour hint, e.g. "#3B82F6"


@dataclass(frozen=True)
class CategorySpec:
    """Ordered category table.  Order decides first-match assignment."""

    categories: tuple[Category, ...]
    catch_all: str  # name of the category that takes unmatched tokens

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.categories]


@dataclass
class CategoryBreakdown:
    """Per-category totals and term counts, keyed in category table order."""

    totals: dict[str, int] = field(default_factory=dict)
    terms: dict[str, dict[str, int]] = field(default_factory=dict)  # category -> token -> count
    assignments: dict[str, str] = field(default_factory=dict)  # token -> category

    def top_terms(self, category: str, n: int | None = None) -> list[tuple[str, int]]:
        """Terms in ``category`` by count descending (ties by token), first ``n``."""
        ranked = sorted(self.terms.get(category, {}).items(), key=lambda item: (-item[1], item[0]))
        return ranked if n is None else ranked[: max(0, n)]


class ConnectionOutcome(str, Enum):
    NO_QUERY = "no_query"
    NO_MATCH = "no_match"
    NO_CO_OCCURRENCE = "no_co_occurrence"
    OK = "ok"


@dataclass(frozen=True)
class Connection:
    """An interest that shares respondents with the query."""

    interest: str
    count: int  # matching lines that also list this interest
    percentage: float  # count / matching lines * 100, one decimal


@dataclass
class ConnectionResult:
    """Outcome of a connections search for one query."""

    outcome: ConnectionOutcome
    query: str  # as typed by the user
    normalized_query: str = ""
    matching_lines: int = 0
    connections: list[Connection] = field(default_factory=list)

    @property
    def message(self) -> str | None:
        """User-facing note for the non-``ok`` outcomes (``None`` otherwise)."""
        if self.outcome == ConnectionOutcome.NO_MATCH:
            return f'Hittade inga läsare med intresset "{self.query}".'
        if self.outcome == ConnectionOutcome.NO_CO_OCCURRENCE:
            return f'Inga andra intressen hittades tillsammans med "{self.query}".'
        return None

    @property
    def title(self) -> str | None:
        if self.outcome != ConnectionOutcome.OK:
            return None
        return f"Personer intresserade av {self.query} är också intresserade av:"
