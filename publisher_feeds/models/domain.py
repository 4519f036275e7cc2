"""Domain DTOs for the feed ingestion pipeline."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

SUMMARY_MAX_LENGTH = 500


def is_absolute_http_url(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        # e.g. an unbalanced "[" in the host
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ArticleRecord(BaseModel):
    """Canonical article extracted from one feed item."""

    model_config = ConfigDict(frozen=True)

    publisher: str = Field(..., description="출판사 표시 이름")
    publisher_slug: str = Field(..., description="출판사 식별자")
    source_feed_url: str = Field(..., description="기사를 가져온 피드 URL")
    title: str
    summary: Optional[str] = Field(None, max_length=SUMMARY_MAX_LENGTH)
    link: str = Field(..., description="중복 방지 키 (절대 URL)")
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("title은 공백일 수 없습니다.")
        return title

    @field_validator("link")
    @classmethod
    def _link_is_absolute(cls, value: str) -> str:
        link = value.strip()
        if not is_absolute_http_url(link):
            raise ValueError(f"link는 http(s) 절대 URL이어야 합니다: {value!r}")
        return link

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for the ``publisher_updates`` table."""
        return self.model_dump()


class RunStats(BaseModel):
    """Aggregate counters for one ingestion run."""

    total: NonNegativeInt = 0
    inserted: NonNegativeInt = 0
    skipped: NonNegativeInt = 0
    errors: NonNegativeInt = 0


class StatsAccumulator:
    """Thread-safe accumulator for run counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._inserted = 0
        self._skipped = 0
        self._errors = 0

    def add_batch(self, size: int, inserted: int) -> None:
        with self._lock:
            self._total += size
            self._inserted += inserted
            self._skipped += size - inserted

    def add_errors(self, size: int) -> None:
        """Count a batch the sink could not persist."""
        with self._lock:
            self._total += size
            self._errors += size

    def snapshot(self) -> RunStats:
        with self._lock:
            return RunStats(
                total=self._total,
                inserted=self._inserted,
                skipped=self._skipped,
                errors=self._errors,
            )
