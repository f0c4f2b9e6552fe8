"""Overview API: top interests, filterable ranking and word cloud."""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from interestmap.analysis.frequency import filter_interests, top_interests, word_cloud
from interestmap.config import InterestmapSettings
from interestmap.dataset import Dataset

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class InterestCount(BaseModel):
    interest: str
    label: str  # display form, first letter capitalised
    count: int


class CloudWordResponse(BaseModel):
    text: str
    count: int
    font_size: float
    connections_url: str  # opens the connections view for this word


class OverviewResponse(BaseModel):
    has_data: bool
    top: list[InterestCount]
    filter: str
    interests: list[InterestCount]  # full ranking, narrowed by ``filter``
    word_cloud: list[CloudWordResponse]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_dataset(request: Request) -> Dataset:
    return request.app.state.store.current


def _get_settings(request: Request) -> InterestmapSettings:
    return request.app.state.settings


def _label(interest: str) -> str:
    return interest[:1].upper() + interest[1:]


def _counts(ranked: list[tuple[str, int]]) -> list[InterestCount]:
    return [InterestCount(interest=t, label=_label(t), count=c) for t, c in ranked]


def connections_url(interest: str) -> str:
    return f"/api/connections?q={quote(interest)}"


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    request: Request,
    filter_text: str = Query(default="", alias="filter"),
    top: int | None = Query(default=None, ge=1),
    cloud: int | None = Query(default=None, ge=1),
) -> OverviewResponse:
    settings = _get_settings(request)
    ranked = _get_dataset(request).ranked_list()

    words = word_cloud(ranked, cloud or settings.word_cloud_size)
    return OverviewResponse(
        has_data=bool(ranked),
        top=_counts(top_interests(ranked, top or settings.overview_top_n)),
        filter=filter_text,
        interests=_counts(filter_interests(ranked, filter_text)),
        word_cloud=[
            CloudWordResponse(
                text=w.text,
                count=w.count,
                font_size=w.font_size,
                connections_url=connections_url(w.text),
            )
            for w in words
        ],
    )
