"""
Database session and engine.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from tablebook.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Local dev only: no pool sizing, share the connection across request threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 8,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": 30,
    }


def enable_sqlite_write_lock(engine: Engine) -> Engine:
    """
    SQLite ignores FOR UPDATE and pysqlite defers BEGIN until the first write, so the guarded commit's
    re-check would run unlocked. Take over transaction control and open every transaction with
    BEGIN IMMEDIATE: the re-check and the insert then run under the database write lock.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_db_engine(url: str) -> Engine:
    db_engine = create_engine(url, **_engine_kwargs(url))
    if url.startswith("sqlite"):
        enable_sqlite_write_lock(db_engine)
    return db_engine


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
