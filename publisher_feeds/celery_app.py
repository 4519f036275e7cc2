"""Celery 애플리케이션 부트스트랩."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict

from celery import Celery, signals
from celery.schedules import schedule as celery_schedule

from .settings import Settings, get_settings
from .utils.logging import configure_logging

INGEST_TASK_NAME = "publisher_feeds.tasks.ingest.ingest_publisher_feeds"

_CELERY_APP: Celery | None = None


def create_celery_app(settings: Settings | None = None) -> Celery:
    """설정을 기반으로 Celery 인스턴스를 생성한다."""
    config = settings or get_settings()
    configure_logging(config.structlog_level, json_enabled=config.log_json)

    app = Celery("publisher_feeds", broker=config.redis_url, backend=config.redis_url)
    app.conf.update(
        task_default_queue="feeds.default",
        task_default_exchange="feeds",
        task_default_routing_key="feeds.default",
        task_soft_time_limit=config.celery_task_soft_time_limit,
        worker_concurrency=config.celery_worker_concurrency,
        beat_schedule=_build_beat_schedule(config),
        timezone="UTC",
        enable_utc=True,
        worker_send_task_events=True,
        task_send_sent_event=True,
    )

    app.autodiscover_tasks(["publisher_feeds.tasks"], related_name="ingest")
    _install_signal_handlers()
    return app


def get_celery_app() -> Celery:
    """싱글톤 Celery 인스턴스를 반환한다."""
    global _CELERY_APP
    if _CELERY_APP is None:
        _CELERY_APP = create_celery_app()
    return _CELERY_APP


def _build_beat_schedule(settings: Settings) -> Dict[str, Dict[str, Any]]:
    return {
        "ingest.publisher_feeds": {
            "task": INGEST_TASK_NAME,
            "schedule": celery_schedule(timedelta(minutes=settings.ingest_interval_minutes)),
            "options": {"queue": "feeds.ingest"},
        }
    }


def _install_signal_handlers() -> None:
    logger = logging.getLogger("publisher_feeds.worker")

    @signals.worker_shutdown.connect(weak=False, dispatch_uid="publisher_feeds.worker_shutdown")  # type: ignore[attr-defined]
    def _on_worker_shutdown(sender=None, **kwargs):  # noqa: ANN001
        logger.info("Celery worker shutdown detected", extra={"sender": str(sender)})
