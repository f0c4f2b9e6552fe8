"""Categories API: interest totals and top terms per keyword category."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from interestmap.analysis.categorize import categorize
from interestmap.analysis.models import CategorySpec

router = APIRouter(prefix="/api")


class TermCount(BaseModel):
    term: str
    count: int


class CategoryResponse(BaseModel):
    name: str
    colour: str
    total: int
    is_catch_all: bool
    top_terms: list[TermCount]


class CategoriesResponse(BaseModel):
    """Categories in table order, the same order the pie chart uses."""

    has_data: bool
    grand_total: int
    categories: list[CategoryResponse]


@router.get("/categories", response_model=CategoriesResponse)
def get_categories(
    request: Request,
    top: int | None = Query(default=None, ge=1),
) -> CategoriesResponse:
    spec: CategorySpec = request.app.state.categories
    ranked = request.app.state.store.current.ranked_list()
    n = top or request.app.state.settings.category_top_n

    breakdown = categorize(ranked, spec)
    return CategoriesResponse(
        has_data=bool(ranked),
        grand_total=sum(breakdown.totals.values()),
        categories=[
            CategoryResponse(
                name=category.name,
                colour=category.colour,
                total=breakdown.totals[category.name],
                is_catch_all=category.name == spec.catch_all,
                top_terms=[
                    TermCount(term=term, count=count)
                    for term, count in breakdown.top_terms(category.name, n)
                ],
            )
            for category in spec.categories
        ],
    )
