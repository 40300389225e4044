import logging
from typing import Optional

from .database import get_db_connection


class SQLiteHandler(logging.Handler):
    """
    Persists warnings and errors (corpus load failures and the like) to the
    ``logs`` table, tagged with the module logger that raised them so they
    can be filtered per component.
    """

    def __init__(self, db_path: Optional[str] = None, level: int = logging.WARNING):
        super().__init__(level)
        self.db_path = db_path

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            conn = get_db_connection(self.db_path)
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO logs (level, logger, message) VALUES (?, ?, ?)",
                        (record.levelname, record.name, message),
                    )
            finally:
                conn.close()
        except Exception:
            self.handleError(record)
