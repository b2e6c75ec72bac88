"""
Excepciones del motor de migración de feature flags.

Jerarquía:
    MigrationError
    ├── InvalidRecordError       (fila con estructura inválida, error por contexto)
    ├── ContextNotFoundError     (el resolver no encuentra la entidad)
    └── NoContextsMigratedError  (ningún contexto de la feature se migró)

Solo los errores de fetch (conexión, tabla inexistente) cruzan el límite
de migrate(). Todo lo demás se convierte en un string en las estadísticas.
"""


class MigrationError(Exception):
    """Error base de la migración."""


class InvalidRecordError(MigrationError):
    """
    Registro legacy con campos faltantes o de tipo incorrecto.

    Se construye con los classmethods para que el mensaje sea siempre el
    mismo (los tests comparan contra estos textos).
    """

    @classmethod
    def missing_or_invalid_scope(cls):
        return cls("Record is missing a valid 'scope' field")

    @classmethod
    def missing_or_invalid_value(cls):
        return cls("Record is missing a valid 'value' field")

    @classmethod
    def missing_active_at(cls):
        return cls("Record is missing the 'active_at' field")


class ContextNotFoundError(MigrationError):
    """No se pudo resolver una identidad tag|id a un contexto."""

    @classmethod
    def for_identity(cls, tag, entity_id):
        return cls(f"No context found for '{tag}' with id '{entity_id}'")

    @classmethod
    def unknown_tag(cls, tag):
        return cls(f"No resolver registered for context type '{tag}'")


class NoContextsMigratedError(MigrationError):
    """Señal a nivel feature: todos sus contextos fallaron."""

    @classmethod
    def for_feature(cls, feature_name):
        return cls(f"No contexts were migrated for feature '{feature_name}'")
