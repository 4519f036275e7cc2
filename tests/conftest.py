from __future__ import annotations

import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
FIXTURES = Path(__file__).resolve().parent / "fixtures"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from publisher_feeds.db.models import Base  # noqa: E402
from publisher_feeds.db.session import dispose_engines  # noqa: E402
from publisher_feeds.models.domain import ArticleRecord  # noqa: E402
from publisher_feeds.registry import FeedConfig, FeedRegistry  # noqa: E402
from publisher_feeds.repositories.articles import SqlArticleRepository  # noqa: E402
from publisher_feeds.settings import reset_settings_cache  # noqa: E402

# Feed fixtures are dated October 2026; a clock pinned just after keeps them inside retention.
FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeFetcher:
    """Serves canned documents per URL; ``None`` simulates a failed fetch."""

    def __init__(self, documents: Dict[str, Optional[str]]) -> None:
        self._documents = documents
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch(self, url: str) -> Optional[str]:
        with self._lock:
            self.calls.append(url)
        return self._documents.get(url)


class InMemorySink:
    """Insert-if-absent store keyed by link, recording the order of operations."""

    def __init__(self) -> None:
        self.rows: Dict[str, ArticleRecord] = {}
        self.events: List[str] = []
        self.purge_cutoffs: List[datetime] = []
        self._lock = threading.Lock()

    def upsert(self, records: Sequence[ArticleRecord]) -> int:
        inserted = 0
        with self._lock:
            for record in records:
                if record.link in self.rows:
                    continue
                self.rows[record.link] = record
                inserted += 1
            self.events.append("upsert")
        return inserted

    def delete_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            self.events.append("purge")
            self.purge_cutoffs.append(cutoff)
            stale = [
                link
                for link, record in self.rows.items()
                if record.published_at is not None and record.published_at < cutoff
            ]
            for link in stale:
                del self.rows[link]
        return len(stale)


def make_registry(*configs: tuple[str, Sequence[str]]) -> FeedRegistry:
    return FeedRegistry(
        feeds=tuple(
            FeedConfig(publisher=slug.title(), slug=slug, feeds=tuple(urls))
            for slug, urls in configs
        )
    )


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()
    dispose_engines()


@pytest.fixture()
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'feeds.db'}"


@pytest.fixture()
def session_factory(sqlite_url: str) -> sessionmaker[Session]:
    engine = create_engine(sqlite_url, future=True)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture()
def repository(session_factory: sessionmaker[Session]) -> SqlArticleRepository:
    return SqlArticleRepository(session_factory)
