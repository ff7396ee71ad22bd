"""
FastAPI application serving slices of the stored snapshots.

Nothing here talks to the stats API; every response is read from the
object store written by the ingestion run.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from player_number.config.settings import AppSettings, get_settings
from player_number.logging.setup import setup_logging
from player_number.storage.object_store import ObjectStore, StoreError
from player_number.storage.supabase_client import SupabaseObjectStore
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if app.state.settings is None:
        app.state.settings = get_settings()
        setup_logging(app.state.settings)
    if app.state.store is None:
        app.state.store = await SupabaseObjectStore.from_settings(app.state.settings)
    logger.info("Snapshot API ready")
    yield


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"Store failure serving {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Snapshot unavailable"})


def create_app(
    settings: Optional[AppSettings] = None, store: Optional[ObjectStore] = None
) -> FastAPI:
    app = FastAPI(title="Player Number Snapshot API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.add_exception_handler(StoreError, store_error_handler)
    app.include_router(router)
    return app


app = create_app()
