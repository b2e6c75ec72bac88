"""
Acumulador de estadísticas de una ejecución de migrate().

Cada llamada a migrate() crea una instancia nueva: nunca se acumula entre
ejecuciones ni se comparte entre migradores.
"""

from dataclasses import dataclass, field

CONTEXT_ERROR_TEMPLATE = "Failed to migrate context '{context}' for feature '{feature}': {reason}"
FATAL_ERROR_TEMPLATE = "Migration failed: {reason}"


@dataclass
class MigrationStatistics:
    """
    Estadísticas de una ejecución.

    Attributes:
        features: Features con al menos un contexto migrado
        contexts: Registros individuales migrados con éxito
        errors: Mensajes de error en orden de aparición
    """

    features: int = 0
    contexts: int = 0
    errors: list = field(default_factory=list)

    def record_context(self):
        self.contexts += 1

    def record_feature(self):
        self.features += 1

    def record_context_error(self, feature, context, reason):
        self.errors.append(
            CONTEXT_ERROR_TEMPLATE.format(context=context, feature=feature, reason=reason)
        )

    def record_fatal_error(self, reason):
        self.errors.append(FATAL_ERROR_TEMPLATE.format(reason=reason))

    def to_dict(self):
        """Snapshot de solo lectura (la lista de errores es una copia)."""
        return {
            "features": self.features,
            "contexts": self.contexts,
            "errors": list(self.errors),
        }


def merge_statistics(totals, stats):
    """
    Suma un snapshot de estadísticas sobre otro (usado por flagmigra.py al
    ejecutar todos los migradores).

    Args:
        totals: dict acumulado {'features', 'contexts', 'errors'}
        stats: dict de un migrador

    Returns:
        dict: Nuevo dict con la suma
    """
    return {
        "features": totals["features"] + stats["features"],
        "contexts": totals["contexts"] + stats["contexts"],
        "errors": [*totals["errors"], *stats["errors"]],
    }
