"""
Módulo base para migradores de feature flags legacy → flag store.

Define el contrato común (migrate / get_statistics) y toda la lógica
compartida entre formatos de origen. Esto permite que flagmigra.py funcione
con cualquier migrador sin conocer sus detalles internos.

Patrón de diseño: Template Method
- BaseMigrator = Esqueleto (fetch → agrupar → migrar feature → estadísticas)
- PennantMigrator, YLSIdeasMigrator = Pasos concretos (validar y migrar un registro)

Flujo de migrate():
1. Estadísticas a cero (instancia nueva por ejecución)
2. Leer TODAS las filas de la tabla origen y agruparlas por feature
   (si esto falla, se registra 'Migration failed: ...' y se relanza)
3. Por cada feature, migrar registro por registro:
   - Un registro fallido NO aborta la feature
   - Una feature sin ningún contexto migrado NO aborta la ejecución
4. Estadísticas consultables con get_statistics() (también tras un fallo)

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        group_key = 'name'

        def migrate_record(self, feature_name, row):
            ...
            return RecordResult.ok(descriptor)
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from .errors import NoContextsMigratedError
from .records import RecordResult, describe_scope
from .resolver import ContextResolver
from .statistics import MigrationStatistics


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de feature flags.

    Attributes:
        db: DatabaseManager con conexiones origen (ver connections.py)
        driver: Driver del flag store destino (ver drivers.py)
        table (str): Tabla/colección origen
        connection_name (str|None): Conexión origen (None = default)
        resolver: ContextResolver para scopes tag|id
    """

    # Campo de la fila que identifica la feature (lo define cada formato)
    group_key = "name"

    def __init__(self, db, driver, table="features", connection=None, resolver=None):
        """
        Args:
            db: DatabaseManager para acceder al store legacy
            driver: Driver destino donde se escriben los valores
            table: Nombre de la tabla de features (default: 'features')
            connection: Nombre de la conexión origen (None para la default)
            resolver: ContextResolver (default: vacío, ningún tag resuelve)
        """
        self.db = db
        self.driver = driver
        self.table = table
        self.connection_name = connection
        self.resolver = resolver or ContextResolver()
        self._statistics = MigrationStatistics()

    # =========================================================================
    # MÉTODOS PÚBLICOS - CONTRATO
    # =========================================================================

    def migrate(self):
        """
        Ejecuta la migración completa del store legacy al flag store.

        Los errores por contexto se registran en las estadísticas y la
        migración continúa. Solo un fallo al leer la tabla origen se relanza:
        cualquier otro error queda acotado a su registro o a su feature.

        Raises:
            Exception: Error crítico al obtener las features del origen
        """
        self._statistics = MigrationStatistics()

        try:
            features = self._fetch_all_features()
        except Exception as e:
            self._statistics.record_fatal_error(e)
            raise

        for feature_name, records in features.items():
            try:
                self._migrate_feature(feature_name, records)
                self._statistics.record_feature()
            except Exception:
                # Errores ya registrados a nivel contexto
                continue

    def get_statistics(self):
        """
        Retorna snapshot de estadísticas.

        Returns:
            dict: {'features': int, 'contexts': int, 'errors': list[str]}
        """
        return self._statistics.to_dict()

    # =========================================================================
    # MÉTODOS ABSTRACTOS - POR FORMATO
    # =========================================================================

    @abstractmethod
    def migrate_record(self, feature_name, row):
        """
        Valida, decodifica y escribe un registro.

        No debe lanzar excepciones: todo fallo se retorna como
        RecordResult.failed(descriptor, reason).

        Args:
            feature_name: Nombre de la feature del grupo
            row: Fila original (dict)

        Returns:
            RecordResult
        """
        pass

    # =========================================================================
    # MÉTODOS PRIVADOS - LÓGICA COMPARTIDA
    # =========================================================================

    def _fetch_all_features(self):
        """
        Lee todas las filas de la tabla origen y las agrupa por feature.

        Filas sin group_key, o con group_key que no es string, se descartan
        en silencio: no son reconocibles como registros de feature.

        Returns:
            dict: nombre de feature → lista de filas
        """
        rows = self.db.connection(self.connection_name).fetch_all(self.table)

        grouped = {}
        for row in rows:
            if not isinstance(row, Mapping):
                continue

            name = row.get(self.group_key)
            if not isinstance(name, str):
                continue

            grouped.setdefault(name, []).append(row)

        return grouped

    def _migrate_feature(self, feature_name, records):
        """
        Migra todos los registros de una feature.

        Raises:
            NoContextsMigratedError: Si ningún registro se migró
        """
        success_count = 0

        for row in records:
            try:
                result = self.migrate_record(feature_name, row)
            except Exception as e:
                result = RecordResult.failed(describe_scope(row), e)

            if result.success:
                self._statistics.record_context()
                success_count += 1
            else:
                self._statistics.record_context_error(
                    feature_name, result.descriptor, result.reason
                )

        if success_count == 0:
            raise NoContextsMigratedError.for_feature(feature_name)

    def _write_value(self, feature_name, identity, value):
        """
        Escribe un valor en el driver según la identidad decodificada.

        None → set_for_all_contexts(); cualquier otra → resolver + set().
        Las excepciones (resolución o escritura) se propagan al llamador.
        """
        if identity is None:
            self.driver.set_for_all_contexts(feature_name, value)
            return

        context = self.resolver.resolve(identity)
        self.driver.set(feature_name, context, value)
