"""
Suite de tests para la migración de feature flags legacy → flag store.

Los tests NO tocan bases de datos reales, solo validan:
- Sintaxis de código Python
- Codec de scopes, resolver y estadísticas
- Semántica de migrate() de cada migrador (con conexiones y drivers en memoria)
- Orquestación y reporte de flagmigra.py
"""
