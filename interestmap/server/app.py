"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI

from interestmap import __version__
from interestmap.categories import load_categories
from interestmap.config import InterestmapSettings, load_settings
from interestmap.dataset import DatasetStore
from interestmap.llm.client import LLMClient
from interestmap.narrative import NarrativeService
from interestmap.server.routes.ai import router as ai_router
from interestmap.server.routes.categories import router as categories_router
from interestmap.server.routes.connections import router as connections_router
from interestmap.server.routes.dataset import router as dataset_router
from interestmap.server.routes.health import router as health_router
from interestmap.server.routes.overview import router as overview_router

logger = logging.getLogger(__name__)


def create_app(
    settings: InterestmapSettings | None = None,
    data_file: Path | None = None,
    llm_client: LLMClient | None = None,
    verbose: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Pre-built settings; loaded from env/.env when omitted.
        data_file: Interest file to load on startup, so the dashboard opens
                   with data instead of an upload prompt.
        llm_client: Override the narrative LLM client (tests inject a fake).
        verbose: When True, terminal handler shows DEBUG-level messages.

    In ``--reload`` mode uvicorn calls this factory with no arguments.  The
    CLI stashes the data file in ``_INTERESTMAP_DATA_FILE`` so the factory
    can recover it.
    """
    if data_file is None:
        env_file = os.environ.get("_INTERESTMAP_DATA_FILE")
        if env_file:
            data_file = Path(env_file)
    if not verbose and os.environ.get("_INTERESTMAP_VERBOSE") == "1":
        verbose = True

    if settings is None:
        settings = load_settings()

    if settings.output_dir is not None:
        from interestmap.logging import setup_logging

        setup_logging(
            output_dir=settings.output_dir, verbose=verbose, file_level=settings.log_level
        )

    app = FastAPI(title="Interestmap", version=__version__, docs_url="/api/docs", redoc_url=None)

    app.state.settings = settings
    app.state.categories = load_categories(settings.categories_file)
    app.state.store = DatasetStore()
    app.state.narrator = NarrativeService(settings, client=llm_client)

    app.include_router(health_router)
    app.include_router(dataset_router)
    app.include_router(overview_router)
    app.include_router(categories_router)
    app.include_router(connections_router)
    app.include_router(ai_router)

    if data_file is not None:
        _load_on_startup(app.state.store, data_file)

    return app


def _load_on_startup(store: DatasetStore, data_file: Path) -> None:
    """Load an interest file into the store during app startup."""
    from interestmap.dataset import decode_upload

    try:
        store.replace(decode_upload(data_file.read_bytes()), data_file.name)
    except OSError:
        logger.exception("Failed to load interest file %s", data_file)
