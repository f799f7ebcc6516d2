"""
Tests for closing_kernel.db: the 'S'/'N' flag type, the engine module and
transaction scoping.
"""

from datetime import date

import pytest
from sqlalchemy import text

from closing_kernel.db.base import as_flag
from closing_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from closing_kernel.models import ClosingPeriod, ProcessDefinition


@pytest.fixture
def sqlite_engine():
    init_engine_from_url("sqlite://")
    create_tables()
    yield get_engine()
    drop_tables()
    reset_engine()


class TestYesNoFlag:
    def test_as_flag(self):
        assert as_flag(True) == "S"
        assert as_flag(False) == "N"

    def test_stored_as_single_character(self, db_session, make_process):
        make_process("A", active=True)
        make_process("B", active=False)

        rows = db_session.execute(
            text("SELECT codigo, ativo FROM mcw_processo ORDER BY codigo")
        ).all()

        assert rows == [("A", "S"), ("B", "N")]

    def test_legacy_lowercase_flag_read_as_true(self, db_session):
        db_session.execute(
            text(
                "INSERT INTO mcw_processo "
                "(codigo, categoria, tipo_dado, descricao, ordem, dias, ativo) "
                "VALUES ('L', 'COM', 'P', 'legacy', 0, 0, 's')"
            )
        )

        assert db_session.get(ProcessDefinition, "L").active is True


class TestEngine:
    def test_get_engine_before_init_raises(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_engine()

    def test_session_scope_commits(self, sqlite_engine):
        with session_scope() as session:
            session.add(ClosingPeriod(month=12, year=2024, cutoff_date=date(2024, 12, 20)))

        session = get_session()
        try:
            assert session.get(ClosingPeriod, (12, 2024)) is not None
        finally:
            session.close()

    def test_session_scope_rolls_back_on_error(self, sqlite_engine):
        with pytest.raises(ValueError):
            with session_scope() as session:
                session.add(ClosingPeriod(month=11, year=2024, cutoff_date=date(2024, 11, 20)))
                session.flush()
                raise ValueError("abort")

        session = get_session()
        try:
            assert session.get(ClosingPeriod, (11, 2024)) is None
        finally:
            session.close()

    def test_schema_translate_map_applied(self):
        engine = init_engine_from_url("sqlite://", schema="gc")
        try:
            assert engine.get_execution_options()["schema_translate_map"] == {None: "gc"}
        finally:
            reset_engine()
