"""
Tests del codec de scopes serializados.

Verifica que:
- decode_scope es total y distingue las tres formas
- Solo el primer separador es significativo
- encode_scope es el inverso para contextos crudos y resueltos
"""

import sys
import os

# === RESOLUCIÓN DE PATH ===
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from migrators.context_codec import decode_scope, encode_scope
from migrators.resolver import EntityContext, EntityIdentity


def test_decode_null_scope():
    """'null' es la feature global."""
    print("\n=== TEST: decode 'null' ===")
    assert decode_scope("null") is None
    print("   ✅ 'null' → None")


def test_decode_entity_scope():
    """'tag|id' se separa en EntityIdentity."""
    print("\n=== TEST: decode tag|id ===")

    cases = [
        ("App\\Models\\User|123", "App\\Models\\User", "123"),
        ("Team|abc", "Team", "abc"),
        ("|7", "", "7"),
        ("User|", "User", ""),
    ]

    for serialized, tag, entity_id in cases:
        assert decode_scope(serialized) == EntityIdentity(tag=tag, id=entity_id)
        print(f"   ✅ {serialized!r} → ({tag!r}, {entity_id!r})")


def test_decode_splits_on_first_separator_only():
    """Un id con '|' queda entero del lado derecho."""
    print("\n=== TEST: primer separador ===")
    assert decode_scope("User|1|2") == EntityIdentity(tag="User", id="1|2")
    print("   ✅ 'User|1|2' → ('User', '1|2')")


def test_decode_plain_string_scope():
    """Cualquier otro string es un contexto plano."""
    print("\n=== TEST: decode string plano ===")

    for serialized in ["team-42", "NULL", "Null", "", " null", "__global"]:
        assert decode_scope(serialized) == serialized
        print(f"   ✅ {serialized!r} → {serialized!r}")


def test_encode_is_inverse_of_decode():
    """encode(decode(s)) == s para las tres formas."""
    print("\n=== TEST: encode(decode(s)) ===")

    for serialized in ["null", "App\\Models\\User|9", "team-42", "A|b|c"]:
        assert encode_scope(decode_scope(serialized)) == serialized
        print(f"   ✅ {serialized!r}")


def test_encode_resolved_context():
    """Un EntityContext se serializa como su identidad, ignorando atributos."""
    context = EntityContext(tag="App\\User", id="7", attributes={"email": "x@y.z"})
    assert encode_scope(context) == "App\\User|7"


def test_encode_custom_context_key():
    class Tenant:
        def context_key(self):
            return "tenant:acme"

    assert encode_scope(Tenant()) == "tenant:acme"


def test_encode_rejects_unserializable_context():
    """Un objeto sin representación → TypeError."""
    try:
        encode_scope(object())
        assert False, "Debería lanzar TypeError"
    except TypeError as e:
        assert "object" in str(e)
        print(f"   ✅ TypeError: {e}")


# === EJECUCIÓN ===

if __name__ == "__main__":
    tests = [
        test_decode_null_scope,
        test_decode_entity_scope,
        test_decode_splits_on_first_separator_only,
        test_decode_plain_string_scope,
        test_encode_is_inverse_of_decode,
        test_encode_resolved_context,
        test_encode_custom_context_key,
        test_encode_rejects_unserializable_context,
    ]
    failed = 0
    for test_func in tests:
        try:
            test_func()
        except AssertionError as e:
            print(f"\n❌ FALLO: {test_func.__name__}: {e}")
            failed += 1
    sys.exit(1 if failed else 0)
