"""
Codec del formato serializado de contextos ("scope").

El store legacy guarda el contexto de cada valor como texto:

    'null'                  → feature global (sin contexto)
    'App\\Models\\User|7'   → contexto de entidad (tag|id)
    'team-42'               → contexto string plano

DECISIONES DE DISEÑO:
- Cualquier string que contenga '|' se interpreta como tag|id, aunque no
  haya sido la intención original. Solo el PRIMER separador es
  significativo: 'A|1|2' → tag='A', id='1|2'.
- No hay esquema de escape: un id que contenga '|' no se puede distinguir.
- decode_scope() es total: todo string decodifica a una de las tres formas.
"""

from .resolver import EntityIdentity

NULL_SCOPE = "null"
SEPARATOR = "|"


def decode_scope(serialized: str):
    """
    Decodifica un scope serializado a su identidad cruda.

    Args:
        serialized: Valor de la columna 'scope'

    Returns:
        None | EntityIdentity | str

    Ejemplo:
        >>> decode_scope('null') is None
        True
        >>> decode_scope('User|7')
        EntityIdentity(tag='User', id='7')
        >>> decode_scope('team-42')
        'team-42'
    """
    if serialized == NULL_SCOPE:
        return None

    if SEPARATOR in serialized:
        tag, entity_id = serialized.split(SEPARATOR, 1)
        return EntityIdentity(tag=tag, id=entity_id)

    return serialized


def encode_scope(context) -> str:
    """
    Inverso de decode_scope(), usado por el driver para generar la clave
    de cada contexto en el flag store.

    Acepta contextos crudos (EntityIdentity) o resueltos (EntityContext),
    strings planos, None, y cualquier objeto que exponga context_key().

    Raises:
        TypeError: Si el contexto no tiene representación serializable
    """
    if context is None:
        return NULL_SCOPE

    if isinstance(context, str):
        return context

    if hasattr(context, "tag") and hasattr(context, "id"):
        return f"{context.tag}{SEPARATOR}{context.id}"

    if callable(getattr(context, "context_key", None)):
        return str(context.context_key())

    raise TypeError(f"Cannot serialize context of type {type(context).__name__}")
