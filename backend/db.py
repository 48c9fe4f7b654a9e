"""
Database setup for the FastAPI backend.
Provides SQLAlchemy engine/session utilities; SQLite by default, any
SQLAlchemy URL (e.g. PostgreSQL) through DATABASE_URL.
"""
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build an engine for ``url`` with foreign keys enforced on SQLite."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs = {}
    if _is_memory_sqlite(url):
        # one shared connection, otherwise every checkout sees an empty database
        kwargs["poolclass"] = StaticPool

    # check_same_thread=False allows usage across FastAPI threads
    engine = create_engine(
        url, echo=echo, connect_args={"check_same_thread": False}, **kwargs
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    from repositories import models  # noqa: F401  Ensures models are registered

    Base.metadata.create_all(bind=engine)


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session from the app's session factory."""
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
