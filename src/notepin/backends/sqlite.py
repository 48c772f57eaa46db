"""Provides the :class:`SqliteBackend` class."""

import logging
import sqlite3
from typing import Optional

from notepin.backends.base import Backend
from notepin.conf import SqliteBackendConf


logger = logging.getLogger(__name__)


_SQL_CREATE_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_SQL_SELECT_VALUE = 'SELECT value FROM kv WHERE key = ?'

_SQL_UPSERT_VALUE = ('INSERT INTO kv (key, value) VALUES (?, ?)'
                     ' ON CONFLICT(key) DO UPDATE SET value = excluded.value')

_SQL_CLEAR = 'DELETE FROM kv'


class SqliteBackend(Backend):
    """Keeps values in a single table of a SQLite database.

    Each :meth:`set` is committed immediately.

    Remember to call :meth:`close` when done with the instance, or use the instance as a context manager.

    .. attribute:: conf
       :type: notepin.conf.SqliteBackendConf
    """
    def __init__(self, conf: SqliteBackendConf):
        if not conf.cache_path:
            raise ValueError('`cache_path` must be set in SqliteBackendConf.')
        self.conf = conf
        self.connection = None
        self._connect()

    def _connect(self):
        self.connection = sqlite3.connect(self.conf.cache_path)
        self.connection.executescript(_SQL_CREATE_SCHEMA)

    def get(self, key: str) -> Optional[str]:
        cursor = self.connection.cursor()
        cursor.execute(_SQL_SELECT_VALUE, (key,))
        row = cursor.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.connection.execute(_SQL_UPSERT_VALUE, (key, value))
        self.connection.commit()
        logger.debug('Stored %d characters under key %r', len(value), key)

    def clear(self):
        self.connection.execute(_SQL_CLEAR)
        self.connection.commit()

    def close(self):
        if self.connection:
            self.connection.close()
            self.connection = None
