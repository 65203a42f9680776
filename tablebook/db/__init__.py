from tablebook.db.base import Base
from tablebook.db.session import get_db, engine, SessionLocal, create_db_engine
from tablebook.db.tables import ACTIVE_STATUSES, ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "create_db_engine", "Base", "ACTIVE_STATUSES", "ALL_TABLE_NAMES"]
