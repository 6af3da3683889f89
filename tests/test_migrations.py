"""
Migration Tests

Runs the alembic revision against an empty SQLite database and checks the
resulting schema lines up with the models.
"""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from models import Base

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


def _load_revision(filename):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def revision():
    return _load_revision("20261019_000001_create_payment_tables.py")


def _run(engine, step):
    with engine.begin() as connection:
        context = MigrationContext.configure(connection)
        with Operations.context(context):
            step()


class TestCreatePaymentTables:

    def test_upgrade_creates_model_tables(self, revision):
        engine = create_engine("sqlite://")
        _run(engine, revision.upgrade)

        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == set(Base.metadata.tables)
        for table_name, table in Base.metadata.tables.items():
            columns = {column["name"] for column in inspector.get_columns(table_name)}
            assert columns == set(table.columns.keys()), table_name

    def test_downgrade_drops_everything(self, revision):
        engine = create_engine("sqlite://")
        _run(engine, revision.upgrade)
        _run(engine, revision.downgrade)
        assert inspect(engine).get_table_names() == []

    def test_revision_is_root(self, revision):
        assert revision.down_revision is None
