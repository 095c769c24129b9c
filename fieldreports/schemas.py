"""
Pydantic schemas for the field reports API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: Literal["ok"]


class NewsResponse(BaseModel):
    id: str
    title: str
    summary: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    createdAt: datetime


class HazardResponse(BaseModel):
    id: str
    title: str
    description: str
    # Absolute URL of the attached file, built per request.
    image: str
    createdAt: datetime
