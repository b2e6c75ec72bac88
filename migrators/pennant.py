"""
Migrador para la tabla de features de Laravel Pennant.

Formato de origen (tabla 'features'):
    name   VARCHAR  → nombre de la feature
    scope  VARCHAR  → contexto serializado ('null', 'Clase|id' o string)
    value  TEXT     → valor codificado en JSON

Cada fila es un contexto. 'null' escribe el valor para todos los contextos;
el resto se resuelve con el ContextResolver y se escribe con set().

Uso (desde flagmigra.py):
    migrator = PennantMigrator(db, driver, table='features', resolver=resolver)
    migrator.migrate()
    stats = migrator.get_statistics()
"""

import json

from .base import BaseMigrator
from .context_codec import decode_scope
from .errors import InvalidRecordError
from .records import PennantRecord, RecordResult, describe_scope


class PennantMigrator(BaseMigrator):
    """
    Migrador específico para Laravel Pennant.
    """

    group_key = "name"

    def migrate_record(self, feature_name, row):
        try:
            record = PennantRecord.from_row(feature_name, row)
        except InvalidRecordError as e:
            return RecordResult.failed(describe_scope(row), e)

        identity = decode_scope(record.scope)

        try:
            value = json.loads(record.value)
        except (ValueError, RecursionError) as e:
            return RecordResult.failed(record.scope, e)

        try:
            self._write_value(feature_name, identity, value)
        except Exception as e:
            return RecordResult.failed(record.scope, e)

        return RecordResult.ok(record.scope)
