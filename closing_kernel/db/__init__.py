"""Database layer - engine, declarative base, and column types."""

from closing_kernel.db.base import Base, YesNoFlag, as_flag
from closing_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "Base",
    "YesNoFlag",
    "as_flag",
    "create_tables",
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
]
