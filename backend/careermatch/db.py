from __future__ import annotations

import sqlite3
from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from careermatch.config import settings


database_url = (settings.database_url or "").strip() or "sqlite:///./careermatch.db"
is_sqlite = database_url.startswith("sqlite")
connect_args = {"check_same_thread": False, "timeout": 30} if is_sqlite else {}
engine = create_engine(
    database_url,
    future=True,
    connect_args=connect_args,
    pool_pre_ping=settings.db_pool_pre_ping,
)


def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA busy_timeout=30000;")
        cursor.execute("PRAGMA foreign_keys=ON;")
    finally:
        cursor.close()


if is_sqlite:
    event.listen(engine, "connect", _set_sqlite_pragmas)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    return SessionLocal


def init_db() -> None:
    # Only meant for local SQLite copies; the Supabase tables are loaded externally.
    from careermatch import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping_database(db: Session) -> bool:
    db.execute(text("SELECT 1"))
    return True
