"""
Resolución de contextos: identidad cruda (tag|id) → contexto del flag store.

El store legacy identifica entidades por "clase|id" (ej: 'App\\Models\\User|7').
En vez de acoplar el codec a clases concretas, cada tag se registra en un
ContextResolver con un "finder": un callable id → dict | None.

Flujo:
    identity = decode_scope('App\\Models\\User|7')     # EntityIdentity
    context = resolver.resolve(identity)              # EntityContext o error

Reglas:
- None (feature global) y strings planos pasan sin cambios.
- Tag sin finder registrado → ContextNotFoundError.
- Finder que retorna None/vacío → ContextNotFoundError.
- Excepciones del finder se propagan tal cual (el migrador las registra
  como error de contexto).
"""

from dataclasses import dataclass, field

from .errors import ContextNotFoundError


@dataclass(frozen=True)
class EntityIdentity:
    """Identidad cruda decodificada de un scope 'tag|id'."""

    tag: str
    id: str


@dataclass(frozen=True)
class EntityContext:
    """Contexto resuelto, listo para el driver."""

    tag: str
    id: str
    attributes: dict = field(default_factory=dict, compare=False, hash=False)


class ContextResolver:
    """
    Registro de finders por tag.

    Attributes:
        finders (dict): tag → callable(id) que retorna dict o None
    """

    def __init__(self, finders=None):
        self.finders = dict(finders or {})

    def register(self, tag, finder):
        """Registra (o reemplaza) el finder de un tag."""
        self.finders[tag] = finder
        return self

    def resolve(self, identity):
        """
        Resuelve una identidad cruda.

        Args:
            identity: None | EntityIdentity | str

        Returns:
            None | EntityContext | str

        Raises:
            ContextNotFoundError: Si el tag no está registrado o la entidad no existe
        """
        if not isinstance(identity, EntityIdentity):
            return identity

        finder = self.finders.get(identity.tag)
        if finder is None:
            raise ContextNotFoundError.unknown_tag(identity.tag)

        found = finder(identity.id)
        if not found:
            raise ContextNotFoundError.for_identity(identity.tag, identity.id)

        if isinstance(found, EntityContext):
            return found

        return EntityContext(tag=identity.tag, id=identity.id, attributes=dict(found))


class TableEntityFinder:
    """
    Finder que busca la entidad en una tabla de una conexión origen.

    La conexión se obtiene del DatabaseManager recién en la primera búsqueda:
    un tag que nunca aparece en los datos no abre conexiones.

    Uso:
        finder = TableEntityFinder(db, None, "users", "id")
        finder("7")  # → {"id": 7, "email": ...} o None
    """

    def __init__(self, db, connection_name, table, key_column="id"):
        self.db = db
        self.connection_name = connection_name
        self.table = table
        self.key_column = key_column

    def __call__(self, entity_id):
        connection = self.db.connection(self.connection_name)
        return connection.find_one(self.table, self.key_column, entity_id)


def build_resolver(db, context_models):
    """
    Construye un ContextResolver a partir de la configuración de modelos.

    Args:
        db: DatabaseManager (ver connections.py)
        context_models: dict tag → {'connection', 'table', 'key_column'}
                        (normalmente config.CONTEXT_MODELS)

    Returns:
        ContextResolver con un TableEntityFinder por tag
    """
    resolver = ContextResolver()

    for tag, model in context_models.items():
        resolver.register(
            tag,
            TableEntityFinder(
                db,
                model.get("connection"),
                model["table"],
                model.get("key_column", "id"),
            ),
        )

    return resolver
