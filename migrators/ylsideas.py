"""
Migrador para la tabla de features de YLSIdeas Feature Flags.

Formato de origen (tabla 'features' del gateway de base de datos):
    feature    VARCHAR    → nombre de la feature
    active_at  TIMESTAMP  → fecha de activación, NULL si está apagada

YLSIdeas no tiene contextos: cada fila es un estado global, que se migra
como set_for_all_contexts(feature, active_at is not None). El descriptor
de contexto en los mensajes de error es 'null' (scope global).
"""

from .base import BaseMigrator
from .context_codec import NULL_SCOPE
from .errors import InvalidRecordError
from .records import UNKNOWN_CONTEXT, RecordResult, YLSIdeasRecord


class YLSIdeasMigrator(BaseMigrator):
    """
    Migrador específico para YLSIdeas Feature Flags.
    """

    group_key = "feature"

    def migrate_record(self, feature_name, row):
        try:
            record = YLSIdeasRecord.from_row(feature_name, row)
        except InvalidRecordError as e:
            return RecordResult.failed(UNKNOWN_CONTEXT, e)

        try:
            self._write_value(feature_name, None, record.active)
        except Exception as e:
            return RecordResult.failed(NULL_SCOPE, e)

        return RecordResult.ok(NULL_SCOPE)
