"""
Funciones helper y dobles compartidos para todos los tests.

Proporciona conexiones origen y drivers en memoria para ejecutar los
migradores reales sin PostgreSQL ni MongoDB.
"""

import sys
import os
from contextlib import contextmanager

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from connections import DatabaseManager
from drivers import Driver
from migrators.resolver import ContextResolver


class FakeSourceConnection:
    """
    Conexión origen en memoria.

    Args:
        tables: dict tabla → lista de filas
        fail_with: Excepción a lanzar en fetch_all (simula caída de conexión)
    """

    def __init__(self, tables=None, fail_with=None):
        self.tables = tables or {}
        self.fail_with = fail_with
        self.fetched = []
        self.closed = False

    def fetch_all(self, table):
        self.fetched.append(table)
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.tables.get(table, []))

    def find_one(self, table, column, value):
        for row in self.tables.get(table, []):
            if str(row.get(column)) == str(value):
                return dict(row)
        return None

    def close(self):
        self.closed = True


def make_db(tables=None, fail_with=None):
    """
    DatabaseManager real con una única conexión 'default' en memoria.

    Returns:
        tuple: (DatabaseManager, FakeSourceConnection)
    """
    connection = FakeSourceConnection(tables, fail_with)
    db = DatabaseManager(
        {"default": {"driver": "fake"}}, "default", opener=lambda cfg: connection
    )
    return db, connection


class RecordingDriver(Driver):
    """
    Driver que registra cada llamada.

    Args:
        failures: dict feature → excepción a lanzar al escribir esa feature
    """

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls = []

    def set(self, feature, context, value):
        self._maybe_fail(feature)
        self.calls.append(("set", feature, context, value))

    def set_for_all_contexts(self, feature, value):
        self._maybe_fail(feature)
        self.calls.append(("set_for_all_contexts", feature, value))

    def _maybe_fail(self, feature):
        if feature in self.failures:
            raise self.failures[feature]


def make_resolver(connection, tag="App\\User", table="users"):
    """Resolver con un solo tag que busca en una tabla de la conexión fake."""
    return ContextResolver(
        {tag: lambda entity_id: connection.find_one(table, "id", entity_id)}
    )


@contextmanager
def patched_migrators(**overrides):
    """
    Sobrescribe temporalmente entradas de config.MIGRATORS.

    Ejemplo:
        with patched_migrators(pennant={'enabled': True}):
            ...
    """
    saved = {name: dict(cfg) for name, cfg in config.MIGRATORS.items()}
    try:
        for name, values in overrides.items():
            config.MIGRATORS[name].update(values)
        yield
    finally:
        for name, cfg in saved.items():
            config.MIGRATORS[name].clear()
            config.MIGRATORS[name].update(cfg)
