"""Database utilities for the publisher feed service."""

from .models import Base, PublisherUpdate  # noqa: F401
from .session import dispose_engines, get_engine, get_sessionmaker, session_scope  # noqa: F401

__all__ = [
    "Base",
    "PublisherUpdate",
    "dispose_engines",
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
