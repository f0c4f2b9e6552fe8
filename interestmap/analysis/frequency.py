"""Interest frequency ranking and the overview views built on it."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from interestmap.analysis.models import CloudWord
from interestmap.analysis.parser import RespondentLine

RankedInterests = list[tuple[str, int]]

DEFAULT_TOP_N = 10
DEFAULT_CLOUD_SIZE = 50

# Word cloud font sizes in pixels
CLOUD_MIN_FONT = 12.0
CLOUD_FONT_RANGE = 48.0


def rank(counts: Counter[str]) -> RankedInterests:
    """Sort ``counts`` by count descending, ties by token ascending."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def aggregate(lines: Iterable[RespondentLine]) -> RankedInterests:
    """Count every token occurrence across all lines and rank the result.

    A token repeated within one line counts once per repetition.  Always
    recomputed from the lines passed in.
    """
    counts: Counter[str] = Counter()
    for line in lines:
        counts.update(line)
    return rank(counts)


def top_interests(ranked: RankedInterests, n: int = DEFAULT_TOP_N) -> RankedInterests:
    return ranked[: max(0, n)]


def filter_interests(ranked: RankedInterests, text: str | None) -> RankedInterests:
    """Entries whose token contains ``text`` (case-insensitive substring)."""
    needle = (text or "").lower()
    if not needle:
        return list(ranked)
    return [(token, count) for token, count in ranked if needle in token]


def word_cloud(ranked: RankedInterests, n: int = DEFAULT_CLOUD_SIZE) -> list[CloudWord]:
    """Size the top ``n`` interests relative to the most frequent one."""
    if not ranked:
        return []
    max_count = ranked[0][1]
    words: list[CloudWord] = []
    for token, count in ranked[: max(0, n)]:
        size = CLOUD_MIN_FONT
        if max_count:
            size += (count / max_count) * CLOUD_FONT_RANGE
        font_size = round(max(CLOUD_MIN_FONT, size), 2)
        words.append(CloudWord(text=token, count=count, font_size=font_size))
    return words
