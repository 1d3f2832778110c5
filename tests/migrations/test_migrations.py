"""
Tests for database migrations using Alembic.
"""
import pytest
from flask_migrate import upgrade, downgrade
from sqlalchemy import inspect

from extensions import db

MIGRATIONS_DIR = 'migrations'
INITIAL_REVISION = '3f1d2c9a7b10'


def column_names(table):
    return {column['name'] for column in inspect(db.engine).get_columns(table)}


@pytest.fixture
def empty_database(app):
    db.drop_all()
    yield
    downgrade(directory=MIGRATIONS_DIR, revision='base')


def test_migrations_run_without_error(empty_database):
    """
    Upgrade to head, downgrade to base and upgrade back again.
    """
    upgrade(directory=MIGRATIONS_DIR, revision='head')
    downgrade(directory=MIGRATIONS_DIR, revision='base')
    upgrade(directory=MIGRATIONS_DIR, revision='head')

    tables = set(inspect(db.engine).get_table_names())
    assert {'users', 'daycares', 'daycare_age_groups', 'daycare_features'} <= tables


def test_age_group_columns_are_dropped(empty_database):
    upgrade(directory=MIGRATIONS_DIR, revision=INITIAL_REVISION)
    assert {'vacancy', 'quality_rating'} <= column_names('daycare_age_groups')

    upgrade(directory=MIGRATIONS_DIR, revision='head')
    assert column_names('daycare_age_groups') == {'id', 'daycare_id', 'group', 'capacity'}


def test_head_matches_models(empty_database):
    upgrade(directory=MIGRATIONS_DIR, revision='head')

    for table in db.metadata.sorted_tables:
        assert column_names(table.name) == {column.name for column in table.columns}
