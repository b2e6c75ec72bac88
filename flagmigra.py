r"""
Script principal de migración de feature flags legacy → flag store PostgreSQL.

Arquitectura:
- flagmigra.py: Orquestación (conexiones, selección de migradores, reporte)
- migrators/*.py: Lógica por formato de origen (implementan BaseMigrator)
- config.py: Configuración centralizada (migradores, conexiones, modelos)

Flujo de ejecución:
1. Conectar al flag store y asegurar el schema (dbsetup.py)
2. Si se indica un migrador, ejecutar solo ese (debe estar habilitado)
3. Si no, ejecutar todos los habilitados en config.MIGRATION_ORDER
4. Mostrar contadores y TODOS los errores recolectados

Prerrequisitos:
- Variables de entorno / .env (ver config.py)
- FLAGMIGRA_<NOMBRE>_ENABLED=true para cada migrador a ejecutar

Uso:
    python flagmigra.py             # todos los migradores habilitados
    python flagmigra.py pennant     # solo Pennant
"""

import sys

import psycopg2
from psycopg2 import OperationalError

import config
import dbsetup
from connections import DatabaseManager
from drivers import PostgresDriver
from migrators import MIGRATOR_CLASSES
from migrators.resolver import build_resolver
from migrators.statistics import merge_statistics

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def connect_to_flag_store():
    """
    Establece conexión al flag store usando credenciales de config.py.

    Returns:
        conexión de psycopg2

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando al flag store (PostgreSQL)...")
        conn = psycopg2.connect(**config.POSTGRES_CONFIG)
        print("✅ Conexión al flag store exitosa")
        return conn
    except OperationalError as e:
        print("❌ Error de conexión a PostgreSQL", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)


def empty_statistics():
    return {"features": 0, "contexts": 0, "errors": []}


def create_migrator(name, db, driver, resolver):
    """
    Instancia el migrador por nombre con su configuración.

    Returns:
        BaseMigrator o None si el nombre no corresponde a ningún migrador
    """
    migrator_class = MIGRATOR_CLASSES.get(name)
    if migrator_class is None:
        return None

    migrator_config = config.get_migrator_config(name)

    return migrator_class(
        db,
        driver,
        table=migrator_config["table"],
        connection=migrator_config.get("connection"),
        resolver=resolver,
    )


def execute_migrator(name, db, driver, resolver):
    """
    Ejecuta un migrador y retorna sus estadísticas.

    Un fallo fatal (ej: no se pudo leer la tabla origen) no corta la
    ejecución del resto: se informa y se reporta como un único error.

    Returns:
        dict de estadísticas, o None si el migrador no existe
    """
    migrator = create_migrator(name, db, driver, resolver)
    if migrator is None:
        return None

    try:
        migrator.migrate()
        return migrator.get_statistics()
    except Exception as e:
        print(f"❌ Migration failed: {e}", file=sys.stderr)
        return {"features": 0, "contexts": 0, "errors": [str(e)]}


def run_migrator(name, db, driver, resolver):
    """
    Ejecuta un migrador específico.

    Returns:
        int: Código de salida
    """
    if name not in MIGRATOR_CLASSES:
        print(f"❌ Unknown migrator: {name}", file=sys.stderr)
        return EXIT_FAILURE

    if not config.is_migrator_enabled(name):
        print(f"⚠️  Migrator '{name}' is disabled in configuration.")
        return EXIT_FAILURE

    print(f"\n🚚 Running {name} migrator...")
    stats = execute_migrator(name, db, driver, resolver)

    display_results(stats)
    return EXIT_SUCCESS


def run_all_migrators(db, driver, resolver):
    """
    Ejecuta todos los migradores habilitados en config.MIGRATION_ORDER.

    Returns:
        int: Código de salida (siempre éxito: los errores quedan en el reporte)
    """
    totals = empty_statistics()

    for name in config.MIGRATION_ORDER:
        if not config.is_migrator_enabled(name):
            print(f"ℹ️  Skipping {name} migrator (disabled)")
            continue

        print(f"\n🚚 Running {name} migrator...")
        stats = execute_migrator(name, db, driver, resolver)

        if stats:
            totals = merge_statistics(totals, stats)

    display_results(totals)
    return EXIT_SUCCESS


def display_results(stats):
    """Muestra el resumen de la migración."""
    if stats["features"] == 0 and stats["contexts"] == 0:
        print("\nℹ️  No features migrated.")
        return

    print(
        f"\n✅ Successfully migrated {stats['features']} feature(s) "
        f"with {stats['contexts']} context(s)."
    )

    if stats["errors"]:
        print(f"\n⚠️  Encountered {len(stats['errors'])} error(s) during migration:")
        for error in stats["errors"]:
            print(f"  - {error}")


def main(argv=None):
    """
    Función principal que coordina el flujo completo de migración.

    Exit Codes:
        0: Éxito (aunque haya errores por contexto)
        1: Error de conexión o de schema, migrador desconocido o deshabilitado
    """
    argv = sys.argv[1:] if argv is None else argv

    if len(argv) > 1:
        print("Uso: python flagmigra.py [migrador]")
        print(f"Migradores: {', '.join(config.MIGRATION_ORDER)}")
        return EXIT_FAILURE

    print("=" * 70)
    print("🚀 MIGRACIÓN DE FEATURE FLAGS → FLAG STORE")
    print("=" * 70)
    print(f"📍 Flag store: {config.POSTGRES_CONFIG['dbname']} (schema {config.FLAG_STORE_SCHEMA})")

    conn = connect_to_flag_store()
    db = DatabaseManager(config.SOURCE_CONNECTIONS, config.DEFAULT_SOURCE_CONNECTION)

    try:
        try:
            with conn.cursor() as cursor:
                dbsetup.setup_flag_store_schema(cursor, config.FLAG_STORE_SCHEMA)
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            print(f"❌ Error creando el schema: {e}", file=sys.stderr)
            return EXIT_FAILURE

        driver = PostgresDriver(conn, schema=config.FLAG_STORE_SCHEMA)
        resolver = build_resolver(db, config.CONTEXT_MODELS)

        if argv:
            return run_migrator(argv[0], db, driver, resolver)

        return run_all_migrators(db, driver, resolver)

    finally:
        print("\n🔒 Cerrando conexiones...")
        db.close_all()
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
