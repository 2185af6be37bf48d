"""
Persistence gateway.

A Database owns one SQLAlchemy engine and its connection pool. It is built
explicitly by the application factory, initialised in the lifespan handler
and disposed on shutdown; request handlers reach it through get_db().
"""

import logging
import time
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Engine, session factory and lifecycle for one database URL."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        event.listen(self.engine, "before_cursor_execute", _start_timer)
        event.listen(self.engine, "after_cursor_execute", _log_query)

    def init(self) -> None:
        """Create all tables that don't exist yet."""
        # Models register themselves on Base.metadata at import time
        import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database initialized successfully")

    def shutdown(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database connections closed")

    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _start_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _log_query(conn, cursor, statement, parameters, context, executemany):
    started = conn.info["query_start_time"].pop()
    logger.debug(
        "Executed query %s (%.1f ms, rows=%s)",
        statement.split("\n", 1)[0],
        (time.perf_counter() - started) * 1000,
        cursor.rowcount,
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session from the app's Database for dependency injection."""
    database: Database = request.app.state.database
    yield from database.session()
