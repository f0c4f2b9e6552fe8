"""Analytics core: normalisation, frequency, categories and connections."""

from interestmap.analysis.categorize import assign_category, categorize
from interestmap.analysis.connections import find_connections
from interestmap.analysis.frequency import aggregate, filter_interests, top_interests, word_cloud
from interestmap.analysis.models import (
    CategoryBreakdown,
    CategorySpec,
    ConnectionOutcome,
    ConnectionResult,
)
from interestmap.analysis.normalize import normalize
from interestmap.analysis.parser import parse

__all__ = [
    "CategoryBreakdown",
    "CategorySpec",
    "ConnectionOutcome",
    "ConnectionResult",
    "aggregate",
    "assign_category",
    "categorize",
    "filter_interests",
    "find_connections",
    "normalize",
    "parse",
    "top_interests",
    "word_cloud",
]
