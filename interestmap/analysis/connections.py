"""Co-occurrence search: what else do readers of X care about?"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from interestmap.analysis.models import Connection, ConnectionOutcome, ConnectionResult
from interestmap.analysis.normalize import normalize
from interestmap.analysis.parser import RespondentLine

DEFAULT_LIMIT = 15


def find_connections(
    query: str | None,
    lines: Sequence[RespondentLine],
    *,
    limit: int = DEFAULT_LIMIT,
) -> ConnectionResult:
    """Rank interests by the share of ``query``'s respondents who also list them.

    The query is normalised the same way as the data and matched exactly
    against line tokens.  Each matching line adds at most one to any other
    interest, however often that interest repeats in the line, so the
    percentage is a true "fraction of respondents".
    """
    original = query or ""
    token = normalize(original)
    if not token:
        return ConnectionResult(outcome=ConnectionOutcome.NO_QUERY, query=original)

    matching = [line for line in lines if token in line]
    if not matching:
        return ConnectionResult(
            outcome=ConnectionOutcome.NO_MATCH,
            query=original,
            normalized_query=token,
        )

    related: Counter[str] = Counter()
    for line in matching:
        related.update(set(line) - {token})

    ranked = sorted(related.items(), key=lambda item: (-item[1], item[0]))[: max(0, limit)]
    total = len(matching)
    connections = [
        Connection(interest=interest, count=count, percentage=round(count / total * 100, 1))
        for interest, count in ranked
    ]

    outcome = ConnectionOutcome.OK if connections else ConnectionOutcome.NO_CO_OCCURRENCE
    return ConnectionResult(
        outcome=outcome,
        query=original,
        normalized_query=token,
        matching_lines=total,
        connections=connections,
    )
