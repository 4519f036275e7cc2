"""Repositories for persisting and purging publisher articles."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Protocol, Sequence

from sqlalchemy import and_, delete, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from publisher_feeds.db.models import PublisherUpdate
from publisher_feeds.db.session import session_scope
from publisher_feeds.models.domain import ArticleRecord

# 9 bound parameters per row keeps a chunk under SQLite's legacy 999 limit.
UPSERT_CHUNK_SIZE = 100

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PersistenceError(Exception):
    """The article store rejected an upsert or purge."""


class ArticleSink(Protocol):
    def upsert(self, records: Sequence[ArticleRecord]) -> int: ...  # returns inserted count
    def delete_older_than(self, cutoff: datetime) -> int: ...  # returns deleted count


def _to_rows(records: Sequence[ArticleRecord]) -> List[Dict[str, Any]]:
    return [{"id": uuid.uuid4(), **record.to_row()} for record in records]


class SqlArticleRepository:
    """``publisher_updates`` store with insert-if-absent semantics keyed by ``link``."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def upsert(self, records: Sequence[ArticleRecord]) -> int:
        """Insert records whose link is new; return how many rows were actually inserted."""
        if not records:
            return 0
        rows = _to_rows(records)
        try:
            with session_scope(self._session_factory) as session:
                insert = self._dialect_insert(session)
                inserted = 0
                for start in range(0, len(rows), UPSERT_CHUNK_SIZE):
                    stmt = (
                        insert(PublisherUpdate.__table__)
                        .values(rows[start : start + UPSERT_CHUNK_SIZE])
                        .on_conflict_do_nothing(index_elements=["link"])
                        .returning(PublisherUpdate.__table__.c.id)
                    )
                    inserted += len(session.execute(stmt).all())
                return inserted
        except SQLAlchemyError as exc:
            raise PersistenceError(f"publisher_updates upsert 실패: {exc}") from exc

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete rows published strictly before ``cutoff``.

        Rows without a parseable publish date age out by ingestion time
        (``created_at``) instead, so they are not retained forever.
        """
        table = PublisherUpdate.__table__
        stmt = delete(table).where(
            or_(
                table.c.published_at < cutoff,
                and_(table.c.published_at.is_(None), table.c.created_at < cutoff),
            )
        )
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(stmt)
                return int(result.rowcount or 0)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"publisher_updates purge 실패: {exc}") from exc

    @staticmethod
    def _dialect_insert(session: Session):
        dialect = session.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect]
        except KeyError:
            raise PersistenceError(f"지원하지 않는 DB 방언입니다: {dialect}") from None
