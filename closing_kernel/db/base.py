"""
Module: closing_kernel.db.base
Responsibility: Declarative base class for the ORM mappings of the closing
    reference tables, plus the column type that bridges the legacy
    single-character 'S'/'N' flags to Python booleans.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Natural keys: the closing tables are owned by the billing backend and
      keyed by business identifiers (process code, month/year).  No
      surrogate primary key is added on top.
    - Flag mapping: YesNoFlag reads 'S' (sim) as True and anything else as
      False, and writes True/False back as 'S'/'N'.

Failure modes:
    - None at import time.  Mapping mismatches against the live schema
      surface as DBAPIError on first query.
"""

from datetime import date, datetime
from typing import ClassVar

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class YesNoFlag(TypeDecorator):
    """
    Boolean stored as a single 'S'/'N' character.

    Contract:
        Transparently converts between Python bool and the legacy flag
        columns used across the billing schema (e.g. ``ativo``).

    Guarantees:
        - process_bind_param: True -> 'S', False -> 'N'.
        - process_result_value: 'S' (case-insensitive) -> True, else False.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = String(1)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return "S" if value else "N"

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.strip().upper() == "S"


def as_flag(value: bool) -> str:
    """Render a bool the way the stored procedures expect it ('S'/'N')."""
    return "S" if value else "N"


class Base(DeclarativeBase):
    """
    Declarative base for all closing reference tables.

    Contract:
        Every ORM model in the kernel inherits from Base and declares its
        own natural primary key.

    Guarantees:
        - datetime maps to DateTime (naive; the legacy log stores local
          wall-clock timestamps).
        - date maps to Date.
        - int maps to Integer.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(),
        date: Date(),
        int: Integer(),
        bool: YesNoFlag(),
    }
