"""Connections API: interests that co-occur with a searched one."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from interestmap.analysis.connections import find_connections

router = APIRouter(prefix="/api")


class ConnectionItem(BaseModel):
    interest: str
    label: str
    count: int
    percentage: float


class ConnectionsResponse(BaseModel):
    """``status`` is one of no_query, no_match, no_co_occurrence, ok.

    ``message`` is set for no_match / no_co_occurrence, ``title`` for ok.
    no_query is the neutral "nothing searched yet" state, not an error.
    """

    status: str
    query: str
    normalized_query: str
    matching_respondents: int
    message: str | None = None
    title: str | None = None
    connections: list[ConnectionItem] = []


@router.get("/connections", response_model=ConnectionsResponse)
def get_connections(request: Request, q: str = "") -> ConnectionsResponse:
    dataset = request.app.state.store.current
    limit = request.app.state.settings.connections_limit

    result = find_connections(q, dataset.lines, limit=limit)
    return ConnectionsResponse(
        status=result.outcome.value,
        query=result.query,
        normalized_query=result.normalized_query,
        matching_respondents=result.matching_lines,
        message=result.message,
        title=result.title,
        connections=[
            ConnectionItem(
                interest=c.interest,
                label=c.interest[:1].upper() + c.interest[1:],
                count=c.count,
                percentage=c.percentage,
            )
            for c in result.connections
        ],
    )
