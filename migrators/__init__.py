"""
Migradores de feature flags legacy hacia el flag store PostgreSQL.

Cada migrador implementa la interfaz BaseMigrator (migrate / get_statistics)
y se instancia por nombre desde flagmigra.py según config.MIGRATORS.

Estructura:
    base.py: Clase abstracta BaseMigrator (fetch, agrupado, loop por feature)
    pennant.py: Migrador para la tabla de Laravel Pennant (name/scope/value)
    ylsideas.py: Migrador para la tabla de YLSIdeas (feature/active_at)
    context_codec.py: decode/encode del scope serializado
    resolver.py: Resolución tag|id → contexto
    records.py: Validación de filas y RecordResult
    statistics.py: Acumulador de estadísticas por ejecución
    errors.py: Excepciones

Interfaz requerida (ver BaseMigrator):
    - migrate()
    - get_statistics()
    - migrate_record(feature_name, row)
"""

from .base import BaseMigrator
from .pennant import PennantMigrator
from .ylsideas import YLSIdeasMigrator

MIGRATOR_CLASSES = {
    "pennant": PennantMigrator,
    "ylsideas": YLSIdeasMigrator,
}

__all__ = [
    "BaseMigrator",
    "PennantMigrator",
    "YLSIdeasMigrator",
    "MIGRATOR_CLASSES",
]
