"""Ledger database engine and per-operation session factory.

The process holds one Engine (and its connection pool). Repositories are
handed the session factory, never a live Session, and open a short-lived
session for each save or load.
"""

from typing import Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _create_ledger_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from the API worker threads.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


def open_ledger_database(database_url: str) -> sessionmaker:
    """
    Bind the ledger store to database_url and create its tables.

    Any previously opened database is disposed first. Returns the session
    factory for SqlAlchemyLedgerStateRepository.
    """
    global _engine, _session_factory

    close_ledger_database()

    from cryptosim.repositories.sqlalchemy import orm_models  # noqa: F401

    engine = _create_ledger_engine(database_url)
    Base.metadata.create_all(bind=engine)

    _engine = engine
    _session_factory = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    return _session_factory


def get_session_factory() -> sessionmaker:
    """Session factory of the open ledger database."""
    if _session_factory is None:
        raise RuntimeError("Ledger database is not open")
    return _session_factory


def close_ledger_database() -> None:
    """Dispose the engine's pooled connections and forget the factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _session_factory = None
