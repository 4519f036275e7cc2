"""Engine and session factories for the article store, one per DSN."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from publisher_feeds.settings import Settings, get_settings

_FACTORIES: Dict[str, sessionmaker[Session]] = {}
_FACTORIES_LOCK = threading.Lock()


def get_sessionmaker(settings: Settings | None = None) -> sessionmaker[Session]:
    """Session factory bound to ``POSTGRES_DSN``; built on first use and reused."""
    dsn = (settings or get_settings()).postgres_dsn
    with _FACTORIES_LOCK:
        factory = _FACTORIES.get(dsn)
        if factory is None:
            # stale pooled connections are common between 6-hourly runs
            engine = create_engine(dsn, future=True, pool_pre_ping=True)
            factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False, future=True)
            _FACTORIES[dsn] = factory
    return factory


def get_engine(settings: Settings | None = None) -> Engine:
    return get_sessionmaker(settings).kw["bind"]


def dispose_engines() -> None:
    """Close every pooled connection and forget the cached factories."""
    with _FACTORIES_LOCK:
        factories = list(_FACTORIES.values())
        _FACTORIES.clear()
    for factory in factories:
        factory.kw["bind"].dispose()


@contextmanager
def session_scope(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """Commit on success, roll back and re-raise on any error."""
    session = (factory or get_sessionmaker())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
