"""Database session helpers."""

from evershine.db.session import AsyncSessionLocal, engine, engine_options, get_db, get_db_context

__all__ = ["AsyncSessionLocal", "engine", "engine_options", "get_db", "get_db_context"]
