"""
Database layer: engine, tables and the unit of work.
"""

from .database import Base, engine, SessionLocal, create_db_engine, create_session_factory, create_all_tables, drop_all_tables


__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "create_all_tables",
    "drop_all_tables",
]
