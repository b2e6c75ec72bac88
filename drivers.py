"""
Drivers del flag store destino.

Contrato (lo que consumen los migradores):
    set(feature, context, value)          → valor para un contexto
    set_for_all_contexts(feature, value)  → valor global de la feature

PostgresDriver escribe en el schema creado por dbsetup.py:
    <schema>.features          (name, default_value)
    <schema>.feature_contexts  (feature, context_key, value)

DECISIONES DE DISEÑO:
- Upserts (ON CONFLICT DO UPDATE): re-ejecutar la migración es idempotente
- Commit por escritura: una escritura fallida hace rollback y NO deja la
  transacción abortada para las siguientes
- context_key = encode_scope(context): mismo formato que el store legacy
- set_for_all_contexts() solo toca default_value; los overrides por
  contexto se preservan sin importar el orden de las filas
"""

from abc import ABC, abstractmethod

from psycopg2 import sql
from psycopg2.extras import Json

from migrators.context_codec import encode_scope


class Driver(ABC):
    """Interfaz de escritura del flag store."""

    @abstractmethod
    def set(self, feature, context, value):
        pass

    @abstractmethod
    def set_for_all_contexts(self, feature, value):
        pass


class PostgresDriver(Driver):
    """
    Driver sobre PostgreSQL (psycopg2).

    Attributes:
        conn: Conexión psycopg2 al flag store
        schema (str): Schema de las tablas (default: 'flags')
    """

    def __init__(self, conn, schema="flags"):
        self.conn = conn
        self.schema = schema

    def set(self, feature, context, value):
        context_key = encode_scope(context)

        self._execute(
            [
                (
                    sql.SQL(
                        "INSERT INTO {}.features (name) VALUES (%s) "
                        "ON CONFLICT (name) DO NOTHING"
                    ).format(sql.Identifier(self.schema)),
                    (feature,),
                ),
                (
                    sql.SQL(
                        "INSERT INTO {}.feature_contexts (feature, context_key, value) "
                        "VALUES (%s, %s, %s) "
                        "ON CONFLICT (feature, context_key) "
                        "DO UPDATE SET value = EXCLUDED.value, updated_at = now()"
                    ).format(sql.Identifier(self.schema)),
                    (feature, context_key, Json(value)),
                ),
            ]
        )

    def set_for_all_contexts(self, feature, value):
        self._execute(
            [
                (
                    sql.SQL(
                        "INSERT INTO {}.features (name, default_value) VALUES (%s, %s) "
                        "ON CONFLICT (name) "
                        "DO UPDATE SET default_value = EXCLUDED.default_value, updated_at = now()"
                    ).format(sql.Identifier(self.schema)),
                    (feature, Json(value)),
                ),
            ]
        )

    def _execute(self, statements):
        """Ejecuta las sentencias en una transacción propia."""
        try:
            with self.conn.cursor() as cursor:
                for query, params in statements:
                    cursor.execute(query, params)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
