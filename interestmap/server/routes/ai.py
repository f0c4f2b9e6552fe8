"""AI narrative endpoints: reader persona and term explanation.

Both always answer 200 once the request itself is valid: an LLM failure
comes back as the fixed apology text, not as an HTTP error.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from interestmap.narrative import NarrativeService, to_html

router = APIRouter(prefix="/api/ai")


class ExplainRequest(BaseModel):
    term: str = ""


class NarrativeResponse(BaseModel):
    text: str
    html: str  # escaped, line breaks as <br>


def _get_narrator(request: Request) -> NarrativeService:
    return request.app.state.narrator


def _response(text: str) -> NarrativeResponse:
    return NarrativeResponse(text=text, html=to_html(text))


@router.post("/persona", response_model=NarrativeResponse)
async def generate_persona(request: Request) -> NarrativeResponse:
    ranked = request.app.state.store.current.ranked_list()
    if not ranked:
        raise HTTPException(status_code=400, detail="Upload a data file first")
    text = await _get_narrator(request).persona(ranked)
    return _response(text)


@router.post("/explain", response_model=NarrativeResponse)
async def explain_term(request: Request, body: ExplainRequest) -> NarrativeResponse:
    try:
        text = await _get_narrator(request).explain(body.term)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _response(text)
