"""Celery task for the scheduled publisher feed run."""

from __future__ import annotations

from typing import Any, Dict

from celery import shared_task
from sqlalchemy.exc import SQLAlchemyError

from publisher_feeds.db.models import Base
from publisher_feeds.db.session import get_engine
from publisher_feeds.pipeline import build_pipeline, render_summary
from publisher_feeds.settings import Settings, get_settings


class IngestionSetupError(RuntimeError):
    """The run could not start: invalid settings or unreachable store."""


def _ensure_schema(settings: Settings) -> None:
    # For local runs/tests, ensure schema exists (idempotent)
    Base.metadata.create_all(bind=get_engine(settings))


def ingest_core(settings: Settings | None = None) -> Dict[str, Any]:
    """Run one ingestion pass and return the JSON summary; test-friendly."""
    try:
        config = settings or get_settings()
        _ensure_schema(config)
    except (RuntimeError, SQLAlchemyError, ImportError) as exc:
        raise IngestionSetupError(str(exc)) from exc
    stats = build_pipeline(config).run()
    return render_summary(stats)


@shared_task(name="publisher_feeds.tasks.ingest.ingest_publisher_feeds")
def ingest_publisher_feeds() -> Dict[str, Any]:  # pragma: no cover - wrapper
    return ingest_core()
