"""Database engine and session management"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from paywise_gateway.config import settings
from paywise_gateway.infrastructure.database.models import Base


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Pool settings for a database URL.

    In-memory SQLite must share a single connection across threads,
    otherwise every new connection sees an empty database.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **engine_options(database_url))


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create tables; the default store starts empty on every process start"""
    Base.metadata.create_all(bind=bind)


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
