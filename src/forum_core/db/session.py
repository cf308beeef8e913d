"""Database engine, session factory and transaction helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from forum_core.core.errors import StoreFailure
from forum_core.core.settings import settings

logger = logging.getLogger(__name__)

# Execution option for transactions that only read.
READ_ONLY_OPTION = "forum_read_only"


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import forum_core.models  # noqa: E402,F401


def _configure_sqlite(engine: Engine) -> None:
    """Make SQLite transactions write transactions with FK enforcement.

    pysqlite defers BEGIN until the first write, which lets two readers
    observe the same state before either writes. Emitting BEGIN IMMEDIATE
    takes the database write lock up front. Connections marked with
    ``READ_ONLY_OPTION`` begin DEFERRED and do not take the write lock.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # pragma: no cover - driver hook
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(
    url: str,
    *,
    echo: bool = False,
    timeout_seconds: float | None = None,
) -> Engine:
    """Create an engine for ``url`` with forum-specific driver settings.

    Args:
        url: SQLAlchemy database URL.
        echo: Log emitted SQL.
        timeout_seconds: Upper bound on waiting for a database lock.
    """
    timeout = settings.database_timeout_seconds if timeout_seconds is None else timeout_seconds
    is_sqlite = url.startswith("sqlite")
    connect_args: dict[str, object] = {}
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": timeout}

    engine = create_engine(
        url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )
    if is_sqlite:
        _configure_sqlite(engine)
    return engine


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Return a session factory whose objects stay readable after commit."""
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.sql_debug)

SessionLocal = build_session_factory(engine)


@contextmanager
def transaction(
    session_factory: sessionmaker[Session],
    action: str,
    *,
    read_only: bool = False,
) -> Iterator[Session]:
    """Run a block in one committed transaction.

    Driver errors are logged with ``action`` as context and re-raised as
    ``StoreFailure``; domain errors roll back and propagate unchanged.
    With ``read_only`` the SQLite write lock is not taken.
    """
    try:
        with session_factory() as db, db.begin():
            if read_only:
                db.connection(execution_options={READ_ONLY_OPTION: True})
            yield db
    except SQLAlchemyError as err:
        logger.error("Store failure during %s: %s", action, type(err).__name__, exc_info=True)
        raise StoreFailure() from err


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=bind or engine)
