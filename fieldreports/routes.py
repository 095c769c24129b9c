"""
HTTP routes for the news and hazard resources.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from fieldreports.db import RecordStore
from fieldreports.dependencies import get_file_store, get_record_store
from fieldreports.errors import ValidationError
from fieldreports.schemas import (
    ErrorResponse,
    HazardResponse,
    HealthResponse,
    MessageResponse,
    NewsResponse,
)
from fieldreports.storage import FileStore

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _text(value: object) -> str:
    """Return a submitted scalar as text; anything else counts as missing."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


async def _read_fields(request: Request) -> dict:
    """Read a JSON or form-encoded body into a plain dict."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            payload = await request.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}
    async with request.form() as form:
        return {key: value for key, value in form.items()}


def public_url(request: Request, relative_path: str) -> str:
    """Turn a stored relative path into an absolute URL for this request."""
    host = request.headers.get("host") or request.url.netloc
    path = relative_path.replace("\\", "/").lstrip("/")
    return f"{request.url.scheme}://{host}/{path}"


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@router.post(
    "/uploadNews", response_model=MessageResponse, responses=ERROR_RESPONSES
)
async def upload_news(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """
    Store a news item. Accepts JSON or form fields title, summary, lat, lon.
    """
    fields = await _read_fields(request)
    title = _text(fields.get("title"))
    summary = _text(fields.get("summary"))
    if not title or not summary:
        raise ValidationError("Title & Summary required")

    await run_in_threadpool(
        store.create_news,
        title=title,
        summary=summary,
        lat=fields.get("lat"),
        lon=fields.get("lon"),
    )
    return MessageResponse(message="News uploaded successfully!")


@router.get(
    "/news", response_model=list[NewsResponse], responses=ERROR_RESPONSES
)
def list_news(store: RecordStore = Depends(get_record_store)):
    return [NewsResponse(**item.as_dict()) for item in store.list_news()]


@router.post(
    "/uploadHazard", response_model=MessageResponse, responses=ERROR_RESPONSES
)
async def upload_hazard(
    request: Request,
    store: RecordStore = Depends(get_record_store),
    files: FileStore = Depends(get_file_store),
):
    """
    Store a hazard report from a multipart form with title, description and file.

    The file is written first; if the record cannot be saved the file is
    removed again so no orphan is left in the upload directory.
    """
    async with request.form() as form:
        title = _text(form.get("title"))
        description = _text(form.get("description"))
        uploads = form.getlist("file")
        upload = uploads[0] if len(uploads) == 1 else None
        if (
            not title
            or not description
            or not isinstance(upload, UploadFile)
            or not upload.filename
        ):
            raise ValidationError("All fields are required")

        relative_path = await run_in_threadpool(
            files.save, upload.file, upload.filename
        )

    try:
        await run_in_threadpool(
            store.create_hazard,
            title=title,
            description=description,
            file=relative_path,
        )
    except Exception:
        logger.warning("Hazard record not saved, removing upload %s", relative_path)
        await run_in_threadpool(files.delete, relative_path)
        raise
    return MessageResponse(message="Hazard uploaded successfully!")


@router.get(
    "/hazards", response_model=list[HazardResponse], responses=ERROR_RESPONSES
)
def list_hazards(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    return [
        HazardResponse(
            id=hazard.id,
            title=hazard.title,
            description=hazard.description,
            image=public_url(request, hazard.file),
            createdAt=hazard.created_at,
        )
        for hazard in store.list_hazards()
    ]
