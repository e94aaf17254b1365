# database/connection.py
# Storage backends: PostgreSQL (connection pool) and SQLite (file or in-memory)

import os
import sqlite3
from pathlib import Path
from typing import NamedTuple

import psycopg2
from psycopg2 import pool
from dotenv import load_dotenv

from database.schema import POSTGRES_SCHEMA, SQLITE_SCHEMA
from utils.logger import get_logger

load_dotenv()

logger = get_logger()


class StorageError(Exception):
    """Raised when the storage backend is unavailable or a statement fails"""


class RunResult(NamedTuple):
    last_insert_rowid: object
    changes: int


class PostgresStorage:
    """PostgreSQL storage backed by a psycopg2 connection pool"""

    def __init__(self, host='localhost', port='5432', database='household_power',
                 user='postgres', password=None, min_conn=1, max_conn=20):
        self.params = {
            'host': host,
            'port': port,
            'database': database,
            'user': user,
            'password': password,
        }
        self.min_conn = min_conn
        self.max_conn = max_conn
        self.connection_pool = None

    def open(self):
        """Initialize database connection pool"""
        try:
            self.connection_pool = psycopg2.pool.SimpleConnectionPool(
                self.min_conn, self.max_conn, **self.params
            )
        except psycopg2.Error as e:
            logger.error(f"Database connection failed: {e}")
            raise StorageError(f"Cannot connect to PostgreSQL: {e}") from e
        logger.info(f"Database connection pool created ({self.params['host']}/{self.params['database']})")
        return self

    def close(self):
        """Close all connections in pool"""
        if self.connection_pool:
            self.connection_pool.closeall()
            self.connection_pool = None
            logger.info("Database pool closed")

    def _get_connection(self):
        if self.connection_pool is None:
            raise StorageError("Storage is not open")
        return self.connection_pool.getconn()

    def _execute(self, sql, params):
        conn = None
        try:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute(sql, params)

            if cursor.description:
                columns = [desc[0] for desc in cursor.description]
                rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
            else:
                rows = None
            rowcount = cursor.rowcount
            conn.commit()
            return rows, rowcount
        except psycopg2.Error as e:
            if conn:
                conn.rollback()
            logger.error(f"Query error: {e}")
            raise StorageError(str(e)) from e
        finally:
            if conn:
                self.connection_pool.putconn(conn)

    def query(self, sql, params=None):
        """Execute a read-only query and return rows as dicts"""
        rows, _ = self._execute(sql, params or ())
        return rows or []

    def run(self, sql, params=None):
        """Execute an INSERT/UPDATE/DELETE statement"""
        rows, rowcount = self._execute(sql, params or ())
        # INSERT ... RETURNING id hands back the generated key
        if rows:
            return RunResult(next(iter(rows[0].values())), len(rows))
        return RunResult(None, rowcount)

    def init_schema(self):
        """Create tables, constraints and default settings"""
        for statement in split_statements(POSTGRES_SCHEMA):
            self._execute(statement, None)
        logger.info("PostgreSQL schema ready")


class SQLiteStorage:
    """SQLite storage; pass ':memory:' for a throwaway in-process database"""

    def __init__(self, db_file='data/household_power.db'):
        self.db_file = db_file
        self.conn = None

    def open(self):
        try:
            if self.db_file != ':memory:':
                Path(self.db_file).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(self.db_file)
            self.conn.row_factory = sqlite3.Row
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Database connection failed: {e}")
            raise StorageError(f"Cannot open SQLite database {self.db_file}: {e}") from e
        logger.info(f"SQLite database opened: {self.db_file}")
        return self

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("SQLite database closed")

    @staticmethod
    def _translate(sql):
        # Statements are written with psycopg2-style placeholders
        return sql.replace('%s', '?')

    def _execute(self, sql, params):
        if self.conn is None:
            raise StorageError("Storage is not open")
        try:
            cursor = self.conn.execute(self._translate(sql), tuple(params))
            rows = [dict(row) for row in cursor.fetchall()] if cursor.description else None
            self.conn.commit()
            return cursor, rows
        except (sqlite3.Error, OverflowError) as e:
            self.conn.rollback()
            logger.error(f"Query error: {e}")
            raise StorageError(str(e)) from e

    def query(self, sql, params=None):
        _, rows = self._execute(sql, params or ())
        return rows or []

    def run(self, sql, params=None):
        cursor, rows = self._execute(sql, params or ())
        if rows:
            return RunResult(next(iter(rows[0].values())), len(rows))
        return RunResult(cursor.lastrowid, cursor.rowcount)

    def init_schema(self):
        if self.conn is None:
            raise StorageError("Storage is not open")
        try:
            self.conn.executescript(SQLITE_SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Schema creation failed: {e}") from e
        logger.info("SQLite schema ready")


def split_statements(script):
    """Split a SQL script on ';' and drop empty statements"""
    return [s.strip() for s in script.split(';') if s.strip()]


def open_storage(backend=None):
    """
    Build and open the storage backend selected by configuration.

    STORAGE_BACKEND=sqlite (default) uses DB_PATH;
    STORAGE_BACKEND=postgres uses DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD.
    """
    backend = (backend or os.getenv('STORAGE_BACKEND', 'sqlite')).lower()

    if backend == 'postgres':
        storage = PostgresStorage(
            host=os.getenv('DB_HOST', 'localhost'),
            port=os.getenv('DB_PORT', '5432'),
            database=os.getenv('DB_NAME', 'household_power'),
            user=os.getenv('DB_USER', 'postgres'),
            password=os.getenv('DB_PASSWORD'),
        )
    elif backend == 'sqlite':
        storage = SQLiteStorage(os.getenv('DB_PATH', 'data/household_power.db'))
    else:
        raise StorageError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'sqlite' or 'postgres')")

    storage.open()
    storage.init_schema()
    return storage
