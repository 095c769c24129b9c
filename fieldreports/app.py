"""
FastAPI application entry point for the field reports backend.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from fieldreports.config import Settings, get_settings
from fieldreports.db import RecordStore
from fieldreports.dependencies import build_file_store, build_record_store
from fieldreports.errors import FieldReportsError, StorageError
from fieldreports.routes import router
from fieldreports.storage import FileStore

logger = logging.getLogger(__name__)


async def _render_error(request: Request, exc: FieldReportsError) -> JSONResponse:
    if exc.status_code >= 500:
        detail = exc.detail if isinstance(exc, StorageError) else exc.message
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            detail,
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _render_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def create_app(
    settings: Optional[Settings] = None,
    *,
    record_store: Optional[RecordStore] = None,
    file_store: Optional[FileStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Field Reports Backend (FastAPI)", version="0.1.0")
    app.state.settings = settings
    app.state.record_store = record_store or build_record_store(settings)
    app.state.file_store = file_store or build_file_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FieldReportsError, _render_error)
    app.add_exception_handler(Exception, _render_unexpected)
    app.include_router(router)
    file_store = app.state.file_store
    app.mount(
        f"/{file_store.url_prefix}",
        StaticFiles(directory=file_store.directory),
        name="uploads",
    )
    return app
