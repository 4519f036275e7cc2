"""Configuration models for the publisher feed ingestion service."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, List, Optional, Set

from pydantic import (
    Field,
    PositiveInt,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .registry import FeedConfig, FeedRegistry, default_registry

DEFAULT_USER_AGENT = "BookCAT/1.0 (book discovery app; RSS reader)"


class Settings(BaseSettings):
    """피드 수집용 환경 설정."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    postgres_dsn: str = Field(..., alias="POSTGRES_DSN", description="publisher_updates 테이블이 위치한 DB 연결 문자열.")
    redis_url: str = Field(
        "redis://localhost:6379/0",
        alias="INGESTION_REDIS_URL",
        description="Celery 브로커/백엔드 Redis DSN.",
    )
    feed_fetch_timeout_seconds: PositiveInt = Field(
        15,
        alias="FEED_FETCH_TIMEOUT_SECONDS",
        description="피드 1건당 HTTP 타임아웃(초).",
    )
    feed_user_agent: str = Field(DEFAULT_USER_AGENT, alias="FEED_USER_AGENT", description="피드 요청 User-Agent 헤더.")
    feed_max_workers: PositiveInt = Field(
        1,
        alias="FEED_MAX_WORKERS",
        description="동시에 처리할 피드 수 (1이면 순차 처리).",
    )
    purge_retention_days: PositiveInt = Field(90, alias="PURGE_RETENTION_DAYS", description="기사 보존 기간(일).")
    ingest_interval_minutes: PositiveInt = Field(
        360,
        alias="INGEST_INTERVAL_MINUTES",
        description="수집 주기 (분 단위).",
    )
    structlog_level: str = Field("INFO", alias="STRUCTLOG_LEVEL", description="구조화 로그 레벨.")
    log_json: bool = Field(False, alias="LOG_JSON", description="로그를 JSON 형식으로 출력할지 여부.")
    publisher_feeds: Optional[List[FeedConfig]] = Field(
        None,
        alias="PUBLISHER_FEEDS",
        description="기본 출판사 목록을 대체하는 JSON 배열 (배포 시점 설정).",
    )
    celery_worker_concurrency: PositiveInt = Field(
        1,
        alias="CELERY_WORKER_CONCURRENCY",
        description="Celery 워커 동시 실행 수.",
    )
    celery_task_soft_time_limit: PositiveInt = Field(
        900,
        alias="CELERY_TASK_SOFT_TIME_LIMIT",
        description="Celery 태스크 소프트 타임아웃 (초).",
    )

    @field_validator("publisher_feeds", mode="before")
    @classmethod
    def _parse_publisher_feeds(cls, value: Any) -> Optional[List[Any]]:
        if value in (None, "", []):
            return None
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("PUBLISHER_FEEDS는 JSON 배열이어야 합니다.") from exc
            return parsed
        if isinstance(value, list):
            return value
        raise ValueError("PUBLISHER_FEEDS는 리스트 형태여야 합니다.")

    @field_validator("publisher_feeds")
    @classmethod
    def _validate_unique_slug(cls, value: Optional[List[FeedConfig]]) -> Optional[List[FeedConfig]]:
        if value is None:
            return value
        seen: Set[str] = set()
        for config in value:
            if config.publisher_slug in seen:
                raise ValueError(f"중복된 출판사 slug가 존재합니다: {config.publisher_slug}")
            seen.add(config.publisher_slug)
        return value

    @field_validator("postgres_dsn")
    @classmethod
    def _validate_postgres_dsn(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("POSTGRES_DSN은 유효한 DSN 문자열이어야 합니다.")
        return value

    @field_validator("feed_user_agent")
    @classmethod
    def _validate_user_agent(cls, value: str) -> str:
        agent = value.strip()
        if not agent:
            raise ValueError("FEED_USER_AGENT는 공백일 수 없습니다.")
        return agent

    def build_registry(self) -> FeedRegistry:
        """Return the configured registry, falling back to the built-in publishers."""
        if self.publisher_feeds:
            return FeedRegistry(feeds=tuple(self.publisher_feeds))
        return default_registry()


@lru_cache()
def get_settings() -> Settings:
    """환경 변수를 기준으로 Settings 인스턴스를 반환한다."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"환경 변수 검증에 실패했습니다: {exc}") from exc


def reset_settings_cache() -> None:
    """Settings LRU 캐시를 초기화한다 (테스트 용도)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
