"""
Conexiones a los stores legacy de feature flags (origen).

Cada conexión expone la misma interfaz mínima que consumen los migradores:

    fetch_all(table)                 → list[dict] con todas las filas
    find_one(table, column, value)   → dict | None (lookup de entidades)

Implementaciones:
- PostgresSourceConnection: psycopg2 con RealDictCursor, en autocommit
  (solo lectura, sin transacciones abiertas entre consultas)
- MongoSourceConnection: pymongo, "tabla" = colección, sin '_id'

DatabaseManager resuelve conexiones por nombre (config.SOURCE_CONNECTIONS)
y las cachea: abrir la misma conexión dos veces retorna la misma instancia.

Uso:
    db = DatabaseManager(config.SOURCE_CONNECTIONS, config.DEFAULT_SOURCE_CONNECTION)
    rows = db.connection().fetch_all('features')
    db.close_all()
"""

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor
from pymongo import MongoClient


def table_identifier(table):
    """
    Construye el identificador SQL para 'tabla' o 'schema.tabla'.

    Ejemplo:
        table_identifier('legacy.features') → "legacy"."features"
    """
    return sql.Identifier(*table.split("."))


class PostgresSourceConnection:
    """Conexión origen sobre PostgreSQL."""

    def __init__(self, conn):
        self.conn = conn

    @classmethod
    def connect(cls, params):
        """
        Abre la conexión con los parámetros de config (sin la key 'driver').
        """
        conn = psycopg2.connect(**params)
        conn.autocommit = True
        return cls(conn)

    def fetch_all(self, table):
        query = sql.SQL("SELECT * FROM {}").format(table_identifier(table))

        with self.conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(query)
            return [dict(row) for row in cursor.fetchall()]

    def find_one(self, table, column, value):
        query = sql.SQL("SELECT * FROM {} WHERE {} = %s LIMIT 1").format(
            table_identifier(table), sql.Identifier(column)
        )

        with self.conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(query, (value,))
            row = cursor.fetchone()

        return dict(row) if row else None

    def close(self):
        self.conn.close()


class MongoSourceConnection:
    """Conexión origen sobre MongoDB (colecciones en vez de tablas)."""

    def __init__(self, database, client=None):
        self.database = database
        self.client = client

    @classmethod
    def connect(cls, params):
        client = MongoClient(params["uri"], serverSelectionTimeoutMS=5000)
        return cls(client[params["database"]], client=client)

    def fetch_all(self, table):
        return list(self.database[table].find({}, {"_id": 0}))

    def find_one(self, table, column, value):
        # Los ids de los scopes son strings; en Mongo pueden estar como número
        candidates = [value]
        if isinstance(value, str) and value.isdigit():
            candidates.append(int(value))

        return self.database[table].find_one(
            {column: {"$in": candidates}}, {"_id": 0}
        )

    def close(self):
        if self.client is not None:
            self.client.close()


CONNECTION_DRIVERS = {
    "postgres": PostgresSourceConnection,
    "mongo": MongoSourceConnection,
}


def open_source_connection(connection_config):
    """
    Abre una conexión origen según su 'driver'.

    Raises:
        ValueError: Si el driver no está soportado
    """
    params = dict(connection_config)
    driver = params.pop("driver", "postgres")

    if driver not in CONNECTION_DRIVERS:
        available = ", ".join(CONNECTION_DRIVERS.keys())
        raise ValueError(
            f"Driver de conexión '{driver}' no soportado. Disponibles: {available}"
        )

    return CONNECTION_DRIVERS[driver].connect(params)


class DatabaseManager:
    """
    Registro de conexiones origen por nombre.

    Attributes:
        connections_config (dict): nombre → configuración
        default (str): Conexión usada cuando se pide None
    """

    def __init__(self, connections_config, default="default", opener=open_source_connection):
        self.connections_config = connections_config
        self.default = default
        self.opener = opener
        self._open = {}

    def connection(self, name=None):
        """
        Retorna (abriendo si hace falta) la conexión con ese nombre.

        Raises:
            KeyError: Si la conexión no está configurada
        """
        name = name or self.default

        if name not in self._open:
            if name not in self.connections_config:
                available = ", ".join(self.connections_config.keys())
                raise KeyError(
                    f"Conexión '{name}' no está configurada.\n"
                    f"Conexiones disponibles: {available}"
                )
            self._open[name] = self.opener(self.connections_config[name])

        return self._open[name]

    def close_all(self):
        for conn in self._open.values():
            conn.close()
        self._open = {}
