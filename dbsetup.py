# dbsetup.py
"""
Script de configuración de la base de datos PostgreSQL del flag store.
Crea el schema y las tablas donde escribe drivers.PostgresDriver.

ARQUITECTURA (schema configurable, default 'flags'):
- features: Una fila por feature, con su valor global (default_value)
- feature_contexts: Overrides por contexto (context_key = scope serializado)

CONVENCIÓN DE context_key:
Contexto                       context_key
--------------------          -------------------
EntityContext(User, 7)    →   'App\\Models\\User|7'
'team-42'                 →   'team-42'

Uso:
    python dbsetup.py
"""

import sys

import psycopg2
from psycopg2 import sql

import config


def create_connection():
    """Establece conexión con PostgreSQL."""
    try:
        conn = psycopg2.connect(**config.POSTGRES_CONFIG)
        return conn
    except psycopg2.OperationalError as e:
        print(f"❌ Error conectando a PostgreSQL: {e}", file=sys.stderr)
        return None


def setup_flag_store_schema(cursor, schema="flags"):
    """
    Crea schema y tablas del flag store (idempotente).

    DECISIONES DE DISEÑO:
    - value/default_value en JSONB: los valores de Pennant son JSON arbitrario
    - default_value NULL = la feature no tiene valor global migrado
    - FK feature_contexts.feature → features.name con ON DELETE CASCADE

    Args:
        cursor: Cursor de psycopg2
        schema: Nombre del schema destino
    """
    print(f"\n   🔧 Creando schema '{schema}'...")

    schema_id = sql.Identifier(schema)

    cursor.execute(sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(schema_id))

    cursor.execute(
        sql.SQL(
            """
        CREATE TABLE IF NOT EXISTS {}.features (
            name VARCHAR(255) PRIMARY KEY,
            default_value JSONB,
            created_at TIMESTAMP NOT NULL DEFAULT now(),
            updated_at TIMESTAMP NOT NULL DEFAULT now()
        )
    """
        ).format(schema_id)
    )

    cursor.execute(
        sql.SQL(
            """
        CREATE TABLE IF NOT EXISTS {}.feature_contexts (
            feature VARCHAR(255) NOT NULL REFERENCES {}.features(name) ON DELETE CASCADE,
            context_key TEXT NOT NULL,
            value JSONB,
            created_at TIMESTAMP NOT NULL DEFAULT now(),
            updated_at TIMESTAMP NOT NULL DEFAULT now(),
            PRIMARY KEY (feature, context_key)
        )
    """
        ).format(schema_id, schema_id)
    )

    print(f"   ✅ Schema '{schema}' listo")


def main():
    print("=" * 70)
    print("🛠️  CONFIGURACIÓN DEL FLAG STORE")
    print("=" * 70)

    conn = create_connection()
    if conn is None:
        sys.exit(1)

    try:
        with conn.cursor() as cursor:
            setup_flag_store_schema(cursor, config.FLAG_STORE_SCHEMA)
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        print(f"❌ Error creando el schema: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        conn.close()

    print("\n✅ Flag store listo para migración")


if __name__ == "__main__":
    main()
