"""Tests for the environment-configured connection pool."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from bootwire.database import ADAPTERS, ConnectionPool, register_adapter
from bootwire.exceptions import DatabaseConfigError, UnknownAdapterError


def test_config_is_read_from_prefixed_variables():
    pool = ConnectionPool({
        'SERVICE_DATABASE_MAIN_ADAPTER': 'mysql',
        'SERVICE_DATABASE_MAIN_HOST': 'db.local',
        'SERVICE_DATABASE_MAIN_PORT': '3306',
        'SERVICE_DATABASE_MAIN_USERNAME': 'app',
        'SERVICE_DATABASE_MAIN_OPTION_TIMEOUT': '5',
        'SERVICE_DATABASE_OTHER_ADAPTER': 'sqlite',
        'UNRELATED': 'x',
    })

    config = pool.config_for('main')

    assert pool.get_prefix('main') == 'SERVICE_DATABASE_MAIN_'
    assert config.adapter == 'mysql'
    assert config.host == 'db.local'
    assert config.port == 3306
    assert config.username == 'app'
    assert config.password is None
    assert config.options == {'timeout': '5'}
    assert pool.names() == ['main', 'other']


def test_missing_adapter_raises_config_error():
    pool = ConnectionPool({'SERVICE_DATABASE_MAIN_HOST': 'db.local'})

    with pytest.raises(DatabaseConfigError):
        pool.config_for('main')


def test_sqlite_connection_is_cached_per_name():
    pool = ConnectionPool({
        'SERVICE_DATABASE_MAIN_ADAPTER': 'sqlite',
        'SERVICE_DATABASE_MAIN_DBNAME': ':memory:',
    })

    connection = pool.get('main')
    try:
        assert isinstance(connection, sqlite3.Connection)
        assert pool.get('MAIN') is connection
        assert connection.execute('select 1').fetchone() == (1,)
    finally:
        pool.close_all()

    assert pool.close('main') is False


def test_unknown_adapter_raises():
    pool = ConnectionPool({'SERVICE_DATABASE_MAIN_ADAPTER': 'oracle'})

    with pytest.raises(UnknownAdapterError):
        pool.get('main')


def test_registered_adapter_is_used():
    connection = MagicMock()
    factory = MagicMock(return_value=connection)
    register_adapter('fake', factory)

    try:
        pool = ConnectionPool({
            'SERVICE_DATABASE_REPORTS_ADAPTER': 'fake',
            'SERVICE_DATABASE_REPORTS_DBNAME': 'reports',
        })

        assert pool.get('reports') is connection
        assert factory.call_args[0][0].dbname == 'reports'

        pool.close_all()
        connection.close.assert_called_once()
    finally:
        ADAPTERS.pop('fake', None)
