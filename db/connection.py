"""
PostgreSQL Connection Helper

Owns the psycopg2 pool used by the statistics ETL. The loader writes one
match-unit per transaction: get_connection() commits when the block
finishes and rolls back when anything inside it raises, so a unit is
never left half-written.
"""

from psycopg2 import pool, OperationalError
from contextlib import contextmanager
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """
    Process-wide pool of PostgreSQL connections.

    The ETL is sequential, so the pool stays small: one connection for
    the unit being loaded and one spare.
    """

    _pool: Optional[pool.SimpleConnectionPool] = None

    @classmethod
    def initialize(
        cls,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        statement_timeout_ms: int = 30000,
        min_connections: int = 1,
        max_connections: int = 2,
    ) -> None:
        """
        Open the pool against the statistics database.

        Every session gets a server-side statement_timeout; a statement
        that exceeds it fails like any other error and the unit rolls back.

        Args:
            host: PostgreSQL server host
            port: PostgreSQL server port
            database: Statistics database name
            user: Database user
            password: Database password
            statement_timeout_ms: Per-statement limit in milliseconds
            min_connections: Connections opened up front
            max_connections: Upper bound on open connections

        Raises:
            OperationalError: If the server cannot be reached
        """
        try:
            cls._pool = pool.SimpleConnectionPool(
                min_connections,
                max_connections,
                host=host,
                port=port,
                database=database,
                user=user,
                password=password,
                connect_timeout=10,
                application_name="gaastat-etl",
                options=f"-c statement_timeout={int(statement_timeout_ms)}",
            )
            logger.info(
                f"Connected to {database}@{host}:{port} "
                f"(pool {min_connections}-{max_connections}, statement_timeout={statement_timeout_ms}ms)"
            )
        except OperationalError as e:
            logger.error(f"Could not connect to {database}@{host}:{port}: {e}")
            raise

    @classmethod
    def is_initialized(cls) -> bool:
        """Return True once initialize() has succeeded and until close_all()."""
        return cls._pool is not None

    @classmethod
    def close_all(cls) -> None:
        if cls._pool is None:
            return
        cls._pool.closeall()
        cls._pool = None
        logger.info("Statistics database pool closed")

    @classmethod
    @contextmanager
    def get_connection(cls):
        """
        Borrow a connection for one transaction.

        Yields:
            psycopg2 connection; committed when the block exits normally,
            rolled back when it raises

        Raises:
            OperationalError: If initialize() has not been called
        """
        if cls._pool is None:
            raise OperationalError("Statistics database pool is not initialized; call initialize() first")

        conn = cls._pool.getconn()
        try:
            yield conn
            conn.commit()
            logger.debug("Unit transaction committed")
        except Exception as e:
            conn.rollback()
            logger.error(f"Unit transaction rolled back: {e}")
            raise
        finally:
            cls._pool.putconn(conn)

    @classmethod
    @contextmanager
    def get_cursor(cls):
        """
        Cursor scoped to a single transaction from get_connection().

        Example:
            with DatabaseConnection.get_cursor() as cursor:
                cursor.execute("SELECT season_id FROM seasons WHERE year = %s", (2025,))
                row = cursor.fetchone()
        """
        with cls.get_connection() as conn:
            cursor = conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()
