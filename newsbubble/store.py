"""
store.py
========
Database gateway for the app.

1) Creates the engine for DB_URL (SQLite file by default).
2) Creates tables (once) from the SQLModel classes in models.py.
3) Hands out Sessions (one unit of work per request or job run).

Queries shared by the engine and the routers live in repository.py.
"""

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from .config import DB_URL


def _make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    # An in-memory database only lives as long as its single connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=False, **kwargs)


engine = _make_engine(DB_URL)


def init_db() -> None:
    """
    Create missing tables. Safe to call on every startup; never drops data.
    """
    from . import models  # noqa: F401  (import just to register models with SQLModel)

    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """
    Open a Session bound to our engine.

      with get_session() as session:
          session.add(obj)
          session.commit()
    """
    return Session(engine)


def session_dependency():
    """FastAPI dependency: one session per request, closed afterwards."""
    with get_session() as session:
        yield session
