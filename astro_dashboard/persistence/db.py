import asyncio
import logging
import re
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine

from astro_dashboard.config import Settings
from astro_dashboard.errors import ConfigurationError, DashboardError, QueryError

logger = logging.getLogger("database")

# Query text is written against the "ichigo" schema; deployments may store the
# same tables under another name (DB_SCHEMA).
SCHEMA_QUALIFIER = re.compile(r"\bichigo\.")
DRIVER = "postgresql+psycopg2"


def apply_schema_alias(sql: str, schema: str) -> str:
    return SCHEMA_QUALIFIER.sub(lambda _: f"{schema}.", sql)


def build_database_url(settings: Settings, database: str) -> URL:
    return URL.create(
        DRIVER,
        username=settings.DB_USER,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=database,
    )


class DatabasePools:
    """One pooled engine per logical database, created on first use.

    Built once at application start-up and disposed at shutdown; request
    handlers receive it through ``app.state`` rather than a module global.
    """

    def __init__(self, settings: Settings, engine_factory: Optional[Callable[[str], Engine]] = None):
        self.settings = settings
        self._engine_factory = engine_factory or self._create_engine
        self._engines: Dict[str, Engine] = {}
        self._lock = threading.Lock()

    def _create_engine(self, database: str) -> Engine:
        s = self.settings
        return create_engine(
            build_database_url(s, database),
            pool_size=s.DB_POOL_SIZE,
            max_overflow=s.DB_POOL_MAX_OVERFLOW,
            pool_timeout=s.DB_POOL_TIMEOUT,
            pool_recycle=s.DB_POOL_RECYCLE,
            pool_pre_ping=True,
            connect_args={"connect_timeout": s.DB_CONNECT_TIMEOUT},
        )

    def connect(self, database: str) -> Engine:
        """Return the cached engine for ``database``, creating it if needed."""
        engine = self._engines.get(database)
        if engine is not None:
            return engine

        missing = self.settings.missing_database_settings()
        if missing:
            raise ConfigurationError(missing)

        with self._lock:
            engine = self._engines.get(database)
            if engine is None:
                engine = self._engine_factory(database)
                self._engines[database] = engine
                logger.info(f"Connection pool created for {database}")
        return engine

    def databases(self) -> List[str]:
        return list(self._engines.keys())

    def _fetch_all(self, database: str, statement, params: Mapping[str, Any]) -> List[Dict[str, Any]]:
        engine = self.connect(database)
        with engine.connect() as conn:
            result = conn.execute(statement, dict(params))
            return [dict(r._mapping) for r in result]

    async def execute(
        self,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        database: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Run a read query and return its rows as dicts.

        The blocking driver call runs in the default executor; waiting for a
        pooled connection is bounded by ``DB_POOL_TIMEOUT``.
        """
        dbname = database or self.settings.default_database()
        statement = text(apply_schema_alias(sql, self.settings.DB_SCHEMA))
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(
                None,
                lambda: self._fetch_all(dbname, statement, params or {}),
            )
        except DashboardError:
            raise
        except Exception as e:
            logger.error(f"Query error on {dbname}: {e}")
            raise QueryError(dbname, str(e)) from e

    async def health_check(self, database: Optional[str] = None) -> bool:
        dbname = database or self.settings.default_database()
        try:
            rows = await self.execute("SELECT CURRENT_TIMESTAMP AS now", database=dbname)
            logger.info(f"Database {dbname} connected successfully: {rows[0]['now']}")
            return True
        except Exception as e:
            logger.error(f"Database connection error on {dbname}: {e}")
            return False

    def dispose(self) -> None:
        with self._lock:
            for name, engine in self._engines.items():
                engine.dispose()
                logger.info(f"Connection pool disposed for {name}")
            self._engines.clear()


__all__ = ["DatabasePools", "apply_schema_alias", "build_database_url"]
