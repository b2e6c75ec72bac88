"""
Tests de connections.py sin bases de datos reales.

Se usan conexiones psycopg2/pymongo simuladas para validar consultas,
proyecciones y el cacheo de DatabaseManager.
"""

import sys
import os

# === RESOLUCIÓN DE PATH ===
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from psycopg2.extras import RealDictCursor

from connections import (
    DatabaseManager,
    MongoSourceConnection,
    PostgresSourceConnection,
    open_source_connection,
    table_identifier,
)


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.executed.append((query, params))

    def fetchall(self):
        return self.rows

    def fetchone(self):
        return self.rows[0] if self.rows else None


class FakePgConnection:
    def __init__(self, rows):
        self.cursor_obj = FakeCursor(rows)
        self.cursor_factories = []

    def cursor(self, cursor_factory=None):
        self.cursor_factories.append(cursor_factory)
        return self.cursor_obj


class FakeCollection:
    def __init__(self, docs):
        self.docs = docs
        self.queries = []

    def find(self, filter, projection):
        self.queries.append(("find", filter, projection))
        return iter(self.docs)

    def find_one(self, filter, projection):
        self.queries.append(("find_one", filter, projection))
        return self.docs[0] if self.docs else None


def test_table_identifier_supports_schema():
    assert table_identifier("features").strings == ("features",)
    assert table_identifier("legacy.features").strings == ("legacy", "features")


def test_postgres_fetch_all_returns_dicts():
    conn = FakePgConnection([{"name": "beta", "scope": "null", "value": "true"}])
    source = PostgresSourceConnection(conn)

    rows = source.fetch_all("features")

    assert rows == [{"name": "beta", "scope": "null", "value": "true"}]
    assert conn.cursor_factories == [RealDictCursor]
    assert conn.cursor_obj.executed[0][1] is None


def test_postgres_find_one_passes_value_as_parameter():
    conn = FakePgConnection([{"id": 7}])
    source = PostgresSourceConnection(conn)

    assert source.find_one("users", "id", "7") == {"id": 7}
    assert conn.cursor_obj.executed[0][1] == ("7",)


def test_postgres_find_one_not_found():
    source = PostgresSourceConnection(FakePgConnection([]))
    assert source.find_one("users", "id", "404") is None


def test_mongo_fetch_all_hides_object_id():
    collection = FakeCollection([{"name": "beta", "scope": "null", "value": "true"}])
    source = MongoSourceConnection({"features": collection})

    assert source.fetch_all("features") == [{"name": "beta", "scope": "null", "value": "true"}]
    assert collection.queries == [("find", {}, {"_id": 0})]


def test_mongo_find_one_matches_numeric_ids():
    collection = FakeCollection([{"id": 7}])
    source = MongoSourceConnection({"users": collection})

    source.find_one("users", "id", "7")

    assert collection.queries == [("find_one", {"id": {"$in": ["7", 7]}}, {"_id": 0})]


def test_unknown_driver_is_rejected():
    try:
        open_source_connection({"driver": "oracle"})
        assert False, "Debería lanzar ValueError"
    except ValueError as e:
        assert "oracle" in str(e)


def test_database_manager_caches_connections():
    """Cada conexión se abre una sola vez; None usa la default."""
    opened = []

    def opener(cfg):
        opened.append(cfg["driver"])
        return object()

    db = DatabaseManager(
        {"default": {"driver": "postgres"}, "mongo": {"driver": "mongo"}},
        "default",
        opener=opener,
    )

    assert db.connection() is db.connection("default")
    db.connection("mongo")

    assert opened == ["postgres", "mongo"]


def test_database_manager_unknown_connection():
    db = DatabaseManager({"default": {"driver": "postgres"}}, opener=lambda cfg: None)

    try:
        db.connection("reporting")
        assert False, "Debería lanzar KeyError"
    except KeyError as e:
        assert "reporting" in str(e)
        assert "disponibles" in str(e).lower()


def test_close_all_closes_every_connection():
    class Closable:
        closed = False

        def close(self):
            self.closed = True

    conns = []

    def opener(cfg):
        conns.append(Closable())
        return conns[-1]

    db = DatabaseManager({"a": {}, "b": {}}, "a", opener=opener)
    db.connection("a")
    db.connection("b")
    db.close_all()

    assert all(c.closed for c in conns)
