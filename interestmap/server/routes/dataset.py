"""Dataset API: upload the interest file and read back its summary."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from interestmap.config import InterestmapSettings
from interestmap.dataset import Dataset, DatasetStore, decode_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class DatasetSummaryResponse(BaseModel):
    """What the current dataset holds."""

    has_data: bool
    source_name: str
    records_read: int
    respondent_count: int
    distinct_interests: int
    mention_count: int


def _get_store(request: Request) -> DatasetStore:
    return request.app.state.store


def _get_settings(request: Request) -> InterestmapSettings:
    return request.app.state.settings


def _summary(dataset: Dataset) -> DatasetSummaryResponse:
    return DatasetSummaryResponse(
        has_data=dataset.has_data,
        source_name=dataset.source_name,
        records_read=dataset.records_read,
        respondent_count=dataset.respondent_count,
        distinct_interests=dataset.distinct_interests,
        mention_count=dataset.mention_count,
    )


@router.get("/dataset", response_model=DatasetSummaryResponse)
def get_dataset(request: Request) -> DatasetSummaryResponse:
    return _summary(_get_store(request).current)


@router.post("/dataset", response_model=DatasetSummaryResponse)
def upload_dataset(request: Request, file: UploadFile = File(...)) -> DatasetSummaryResponse:
    """Replace the working dataset with the uploaded interest file."""
    settings = _get_settings(request)
    payload = file.file.read()
    if not payload:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(payload) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Uploaded file exceeds {settings.max_upload_bytes} bytes",
        )

    source_name = (file.filename or "").strip()
    dataset = _get_store(request).replace(decode_upload(payload), source_name)
    if not dataset.has_data:
        logger.warning("Upload %s contained no usable interests", source_name or "<unnamed>")
    return _summary(dataset)


@router.delete("/dataset", response_model=DatasetSummaryResponse)
def clear_dataset(request: Request) -> DatasetSummaryResponse:
    store = _get_store(request)
    store.clear()
    return _summary(store.current)
