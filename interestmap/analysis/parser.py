"""Split an uploaded interest file into per-respondent token lines."""

from __future__ import annotations

from interestmap.analysis.normalize import normalize

# Tokens this short after normalisation are noise ("x", "ab", stray initials).
MIN_TOKEN_LENGTH = 3

RespondentLine = tuple[str, ...]


def parse_line(record: str) -> RespondentLine:
    """Normalise one comma-separated record, keeping order and duplicates."""
    tokens = (normalize(raw) for raw in record.split(","))
    return tuple(t for t in tokens if len(t) >= MIN_TOKEN_LENGTH)


def parse(raw_text: str | None) -> list[RespondentLine]:
    """Parse newline-delimited records into respondent lines.

    Records left with no qualifying token are dropped.  There is no quoting
    convention, so a comma inside a tag always splits it.
    """
    if not raw_text:
        return []
    lines: list[RespondentLine] = []
    for record in raw_text.split("\n"):
        line = parse_line(record)
        if line:
            lines.append(line)
    return lines
