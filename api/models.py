from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from publisher_feeds.models.domain import RunStats


class IngestSummary(BaseModel):
    ok: Literal[True] = True
    stats: RunStats


class ErrorResponse(BaseModel):
    ok: Literal[False] = False
    error: str
