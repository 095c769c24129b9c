"""
Record store abstraction for SQL databases and an in-memory test implementation.
"""

from __future__ import annotations

import logging
import math
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional, Protocol

from sqlalchemy import Column, DateTime, Float, String, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from fieldreports.errors import StartupError, StorageError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore(Protocol):
    """Interface for the news and hazard collections."""

    def create_news(
        self,
        title: str,
        summary: str,
        lat: object = None,
        lon: object = None,
    ) -> "NewsItem":
        ...

    def list_news(self) -> list["NewsItem"]:
        ...

    def create_hazard(
        self, title: str, description: str, file: str
    ) -> "HazardReport":
        ...

    def list_hazards(self) -> list["HazardReport"]:
        ...


@dataclass
class NewsItem:
    id: str
    title: str
    summary: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    created_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "lat": self.lat,
            "lon": self.lon,
            "createdAt": self.created_at,
        }


@dataclass
class HazardReport:
    id: str
    title: str
    description: str
    # Relative path inside the file store, e.g. "uploads/<stored-name>".
    file: str
    created_at: datetime = field(default_factory=_utcnow)


def coerce_coordinate(value: object) -> Optional[float]:
    """
    Cast a submitted coordinate to a float the way a Number field would.

    ``None`` and ``""`` mean "not given". Anything that is not a finite
    number raises StorageError, the same as a failed write.
    """
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise StorageError(f"Cast to number failed for value {value!r}") from exc
    if not math.isfinite(number):
        raise StorageError(f"Cast to number failed for value {value!r}")
    return number


def _newest_first(records: list) -> list:
    # Stable sort over reversed insertion order keeps ties newest-inserted first.
    return sorted(reversed(records), key=lambda r: r.created_at, reverse=True)


class InMemoryRecordStore:
    """Simple in-memory record store for development and tests."""

    def __init__(self):
        self.news: list[NewsItem] = []
        self.hazards: list[HazardReport] = []

    def create_news(
        self,
        title: str,
        summary: str,
        lat: object = None,
        lon: object = None,
    ) -> NewsItem:
        record = NewsItem(
            id=uuid.uuid4().hex,
            title=title,
            summary=summary,
            lat=coerce_coordinate(lat),
            lon=coerce_coordinate(lon),
        )
        self.news.append(record)
        return record

    def list_news(self) -> list[NewsItem]:
        return _newest_first(self.news)

    def create_hazard(
        self, title: str, description: str, file: str
    ) -> HazardReport:
        record = HazardReport(
            id=uuid.uuid4().hex,
            title=title,
            description=description,
            file=file,
        )
        self.hazards.append(record)
        return record

    def list_hazards(self) -> list[HazardReport]:
        return _newest_first(self.hazards)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.news.clear()
        self.hazards.clear()


class SqlRecordStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, **engine_kwargs):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlRecordStore")
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine = create_engine(database_url, future=True, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )

    def connect(self) -> None:
        """Create the tables if needed. Raises StartupError when unreachable."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StartupError(f"Database connection error: {exc}") from exc

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def create_news(
        self,
        title: str,
        summary: str,
        lat: object = None,
        lon: object = None,
    ) -> NewsItem:
        record = NewsItem(
            id=uuid.uuid4().hex,
            title=title,
            summary=summary,
            lat=coerce_coordinate(lat),
            lon=coerce_coordinate(lon),
        )
        with self._session() as session:
            session.add(
                NewsRow(
                    id=record.id,
                    title=record.title,
                    summary=record.summary,
                    lat=record.lat,
                    lon=record.lon,
                    created_at=record.created_at,
                )
            )
            session.commit()
        return record

    def list_news(self) -> list[NewsItem]:
        with self._session() as session:
            rows = session.scalars(
                select(NewsRow).order_by(NewsRow.created_at.desc())
            ).all()
            return [self._to_news_item(row) for row in rows]

    def create_hazard(
        self, title: str, description: str, file: str
    ) -> HazardReport:
        record = HazardReport(
            id=uuid.uuid4().hex,
            title=title,
            description=description,
            file=file,
        )
        with self._session() as session:
            session.add(
                HazardRow(
                    id=record.id,
                    title=record.title,
                    description=record.description,
                    file=record.file,
                    created_at=record.created_at,
                )
            )
            session.commit()
        return record

    def list_hazards(self) -> list[HazardReport]:
        with self._session() as session:
            rows = session.scalars(
                select(HazardRow).order_by(HazardRow.created_at.desc())
            ).all()
            return [self._to_hazard_report(row) for row in rows]

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        # SQLite hands back naive datetimes even for timezone-aware columns.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def _to_news_item(self, row: "NewsRow") -> NewsItem:
        return NewsItem(
            id=row.id,
            title=row.title,
            summary=row.summary,
            lat=row.lat,
            lon=row.lon,
            created_at=self._as_utc(row.created_at),
        )

    def _to_hazard_report(self, row: "HazardRow") -> HazardReport:
        return HazardReport(
            id=row.id,
            title=row.title,
            description=row.description,
            file=row.file,
            created_at=self._as_utc(row.created_at),
        )


Base = declarative_base()


class NewsRow(Base):
    __tablename__ = "news"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    summary = Column(String, nullable=False)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)


class HazardRow(Base):
    __tablename__ = "hazards"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    file = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
