"""
Configuración centralizada para la migración de feature flags → flag store.

ARQUITECTURA:
- Origen: tablas legacy de feature flags (Pennant, YLSIdeas) accesibles por
  conexiones con nombre (SOURCE_CONNECTIONS): PostgreSQL o MongoDB.
- Destino: flag store en PostgreSQL (POSTGRES_CONFIG, schema FLAG_STORE_SCHEMA).

FLUJO DE MIGRACIÓN:
1. flagmigra.py lee MIGRATION_ORDER
2. Omite los migradores deshabilitados (FLAGMIGRA_<NOMBRE>_ENABLED)
3. Cada migrador lee su tabla desde su conexión y escribe en el flag store

USO DE LAS FUNCIONES HELPER:
    # Obtener configuración de un migrador
    cfg = get_migrator_config('pennant')
    table = cfg['table']  # 'features'

    # Verificar si está habilitado
    if is_migrator_enabled('ylsideas'):
        ...
"""

import os
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

TRUTHY_VALUES = ("1", "true", "yes", "si", "sí", "on")


def env_bool(name, default=False):
    """
    Lee una variable de entorno booleana.

    Args:
        name: Nombre de la variable
        default: Valor si no está definida o está vacía

    Returns:
        bool: True si el valor es uno de TRUTHY_VALUES (sin distinguir mayúsculas)

    Ejemplo:
        >>> os.environ['FLAGMIGRA_PENNANT_ENABLED'] = 'true'
        >>> env_bool('FLAGMIGRA_PENNANT_ENABLED')
        True
    """
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY_VALUES


# --- Configuración de PostgreSQL (Destino: flag store) ---
POSTGRES_CONFIG = {
    "dbname": os.getenv("POSTGRES_DB") or "",
    "user": os.getenv("POSTGRES_USER") or "",
    "password": os.getenv("POSTGRES_PASSWORD") or "",
    "host": os.getenv("POSTGRES_HOST") or "localhost",
    "port": os.getenv("POSTGRES_PORT") or "5432",
}

# Schema donde viven las tablas del flag store (ver dbsetup.py)
FLAG_STORE_SCHEMA = os.getenv("FLAG_STORE_SCHEMA") or "flags"

# --- Conexiones de Origen (stores legacy) ---
# Cada conexión define:
# - driver: 'postgres' o 'mongo'
# - parámetros propios del driver
SOURCE_CONNECTIONS = {
    "default": {
        "driver": "postgres",
        "dbname": os.getenv("LEGACY_POSTGRES_DB") or "",
        "user": os.getenv("LEGACY_POSTGRES_USER") or "",
        "password": os.getenv("LEGACY_POSTGRES_PASSWORD") or "",
        "host": os.getenv("LEGACY_POSTGRES_HOST") or "localhost",
        "port": os.getenv("LEGACY_POSTGRES_PORT") or "5432",
    },
    "mongo": {
        "driver": "mongo",
        "uri": os.getenv("LEGACY_MONGO_URI") or "mongodb://localhost:27017/",
        "database": os.getenv("LEGACY_MONGO_DB") or "legacy",
    },
}

DEFAULT_SOURCE_CONNECTION = os.getenv("LEGACY_CONNECTION") or "default"

# --- Configuración de Migradores ---
# Cada migrador define:
# - enabled: Si se ejecuta al correr todos (o si se permite correrlo por nombre)
# - table: Tabla/colección origen
# - connection: Nombre en SOURCE_CONNECTIONS (None = DEFAULT_SOURCE_CONNECTION)
# - description: Descripción del formato de origen

MIGRATORS = {
    "pennant": {
        "enabled": env_bool("FLAGMIGRA_PENNANT_ENABLED", False),
        "table": os.getenv("FLAGMIGRA_PENNANT_TABLE") or "features",
        "connection": os.getenv("FLAGMIGRA_PENNANT_CONNECTION") or None,
        "description": "Laravel Pennant (name, scope, value JSON)",
    },
    "ylsideas": {
        "enabled": env_bool("FLAGMIGRA_YLSIDEAS_ENABLED", False),
        "table": os.getenv("FLAGMIGRA_YLSIDEAS_TABLE") or "features",
        "connection": os.getenv("FLAGMIGRA_YLSIDEAS_CONNECTION") or None,
        "description": "YLSIdeas Feature Flags (feature, active_at)",
    },
}

# --- Orden de Migración ---
MIGRATION_ORDER = ["pennant", "ylsideas"]

# --- Modelos de Contexto ---
# Tag del scope serializado ('Clase|id') → tabla donde buscar la entidad.
# La clave debe coincidir exactamente con la parte izquierda del scope.
CONTEXT_MODELS = {
    "App\\Models\\User": {
        "connection": None,
        "table": "users",
        "key_column": "id",
    },
    "App\\Models\\Team": {
        "connection": None,
        "table": "teams",
        "key_column": "id",
    },
}


# --- Funciones Helper ---


def get_migrator_config(migrator_name: str) -> dict:
    """
    Obtiene la configuración de un migrador por nombre.

    Args:
        migrator_name: Nombre del migrador (ej: 'pennant')

    Returns:
        dict: Configuración con keys enabled, table, connection, description

    Raises:
        KeyError: Si el migrador no está configurado

    Ejemplo:
        >>> get_migrator_config('pennant')['table']
        'features'
    """
    if migrator_name not in MIGRATORS:
        available = ", ".join(MIGRATORS.keys())
        raise KeyError(
            f"Migrador '{migrator_name}' no está configurado.\n"
            f"Migradores disponibles: {available}"
        )
    return MIGRATORS[migrator_name]


def is_migrator_enabled(migrator_name: str) -> bool:
    """
    Verifica si un migrador está habilitado.

    Un migrador desconocido se considera deshabilitado.
    """
    if migrator_name not in MIGRATORS:
        return False
    return bool(MIGRATORS[migrator_name].get("enabled", False))


def get_connection_config(connection_name=None) -> dict:
    """
    Obtiene la configuración de una conexión origen.

    Args:
        connection_name: Nombre en SOURCE_CONNECTIONS (None = default)

    Raises:
        KeyError: Si la conexión no está configurada
    """
    name = connection_name or DEFAULT_SOURCE_CONNECTION
    if name not in SOURCE_CONNECTIONS:
        available = ", ".join(SOURCE_CONNECTIONS.keys())
        raise KeyError(
            f"Conexión '{name}' no está configurada.\n"
            f"Conexiones disponibles: {available}"
        )
    return SOURCE_CONNECTIONS[name]
