from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5
    connect_timeout: int = 10


class DatabaseConnection:
    """Singleton-like DB connection factory backed by a connection pool.

    The pool is created on first ``connect()`` so building the app (and the
    tests that do so) never needs a reachable server. ``close()`` on a pooled
    connection hands it back to the pool.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="employee_tracker",
                    pool_size=int(self._config.pool_size),
                    pool_reset_session=True,
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    connection_timeout=int(self._config.connect_timeout),
                    autocommit=False,
                )
            return self._pool

    def connect(self):
        return self._get_pool().get_connection()
