"""
Dependency wiring for the FastAPI app.

Backends are built once in ``create_app`` and kept on ``app.state``; the
``get_*`` functions hand them to route handlers through ``Depends``.
"""

from __future__ import annotations

import logging

from fastapi import Request

from fieldreports.config import Settings
from fieldreports.db import InMemoryRecordStore, RecordStore, SqlRecordStore
from fieldreports.errors import StartupError
from fieldreports.storage import FileStore, LocalFileStore

logger = logging.getLogger(__name__)


def build_record_store(settings: Settings) -> RecordStore:
    """
    Pick the record store for these settings.

    A database that cannot be reached is logged and the store is still
    returned; requests that need it will fail until it comes back.
    """
    if settings.use_in_memory_backends or not settings.database_url:
        logger.warning("DATABASE_URL not set, using in-memory record store")
        return InMemoryRecordStore()

    store = SqlRecordStore(settings.database_url)
    try:
        store.connect()
    except StartupError as exc:
        logger.error("%s", exc.message)
    else:
        logger.info("Database connected")
    return store


def build_file_store(settings: Settings) -> FileStore:
    return LocalFileStore(settings.upload_dir)


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store
