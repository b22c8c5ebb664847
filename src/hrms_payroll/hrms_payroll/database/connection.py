from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..common.retry import retry_call
from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_TIMEOUT_SECONDS


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_timeout: float = DEFAULT_RETRY_TIMEOUT_SECONDS


def is_transient_db_error(exc: BaseException) -> bool:
    """Connection drops and server-side timeouts are worth another attempt."""
    return isinstance(exc, (mysql_errors.InterfaceError, mysql_errors.OperationalError))


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return retry_call(
            self._open,
            is_transient=is_transient_db_error,
            max_attempts=self._config.retry_attempts,
            timeout=self._config.retry_timeout,
        )

    def _open(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
