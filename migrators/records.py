"""
Registros legacy validados y resultado por registro.

Las filas llegan como dicts con tipado dinámico. En vez de chequear campos
en cada punto de uso, cada formato valida la fila una sola vez y produce
un RecordResult:

    RecordResult.ok(descriptor)                  → contexto migrado
    RecordResult.failed(descriptor, reason)      → contexto fallido

El descriptor es el texto que identifica al contexto en los mensajes de
error: el scope original, o 'unknown' si la fila ni siquiera tiene scope.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .errors import InvalidRecordError

UNKNOWN_CONTEXT = "unknown"


@dataclass(frozen=True)
class RecordResult:
    """Resultado discriminado de migrar un registro."""

    success: bool
    descriptor: str
    reason: Optional[str] = None

    @classmethod
    def ok(cls, descriptor):
        return cls(success=True, descriptor=descriptor)

    @classmethod
    def failed(cls, descriptor, reason):
        return cls(success=False, descriptor=descriptor, reason=str(reason))


@dataclass(frozen=True)
class PennantRecord:
    """Fila de la tabla de features de Pennant ya validada."""

    name: str
    scope: str
    value: str

    @classmethod
    def from_row(cls, name, row):
        """
        Valida scope y value de una fila.

        Args:
            name: Nombre de feature (ya validado por el fetcher)
            row: dict con la fila original

        Returns:
            PennantRecord

        Raises:
            InvalidRecordError: Si scope o value faltan o no son strings
        """
        scope = row.get("scope")
        if not isinstance(scope, str):
            raise InvalidRecordError.missing_or_invalid_scope()

        value = row.get("value")
        if not isinstance(value, str):
            raise InvalidRecordError.missing_or_invalid_value()

        return cls(name=name, scope=scope, value=value)


@dataclass(frozen=True)
class YLSIdeasRecord:
    """Fila de la tabla de features de YLSIdeas ya validada."""

    feature: str
    active_at: Any

    @property
    def active(self):
        return self.active_at is not None

    @classmethod
    def from_row(cls, feature, row):
        """
        Raises:
            InvalidRecordError: Si la fila no tiene columna active_at
        """
        if "active_at" not in row:
            raise InvalidRecordError.missing_active_at()

        return cls(feature=feature, active_at=row["active_at"])


def describe_scope(row):
    """Descriptor de contexto para mensajes: scope si es string, si no 'unknown'."""
    scope = row.get("scope")
    return scope if isinstance(scope, str) else UNKNOWN_CONTEXT
