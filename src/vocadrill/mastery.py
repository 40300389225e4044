import logging
from typing import Dict, Iterable, Optional

from .database import get_db_connection, init_db
from .models import MasteryStatus

logger = logging.getLogger(__name__)


class MasteryStore:
    """
    Per-word proficiency tags kept in the ``mastery`` table.

    A missing row means the word was never marked (``MasteryStatus.NONE``).
    Every write is committed immediately and is safe to repeat.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def init(self):
        """Creates the database directory and tables on first use."""
        init_db(self.db_path)

    def get_status(self, word_id: str) -> MasteryStatus:
        conn = get_db_connection(self.db_path)
        try:
            row = conn.execute(
                "SELECT status FROM mastery WHERE word_id = ?", (word_id,)
            ).fetchone()
        finally:
            conn.close()
        return MasteryStatus(row["status"]) if row else MasteryStatus.NONE

    def get_statuses(self, word_ids: Iterable[str]) -> Dict[str, MasteryStatus]:
        ids = list(word_ids)
        statuses = {word_id: MasteryStatus.NONE for word_id in ids}
        if not ids:
            return statuses
        placeholders = ",".join("?" for _ in ids)
        conn = get_db_connection(self.db_path)
        try:
            rows = conn.execute(
                f"SELECT word_id, status FROM mastery WHERE word_id IN ({placeholders})",
                ids,
            ).fetchall()
        finally:
            conn.close()
        for row in rows:
            statuses[row["word_id"]] = MasteryStatus(row["status"])
        return statuses

    def set_status(self, word_id: str, status: MasteryStatus):
        status = MasteryStatus(status)
        if status == MasteryStatus.NONE:
            self.clear_statuses([word_id])
            return
        conn = get_db_connection(self.db_path)
        with conn:
            conn.execute(
                """
                INSERT INTO mastery (word_id, status) VALUES (?, ?)
                ON CONFLICT(word_id) DO UPDATE SET
                    status = excluded.status,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (word_id, status.value),
            )
        conn.close()

    def clear_statuses(self, word_ids: Iterable[str]):
        ids = list(word_ids)
        if not ids:
            return
        conn = get_db_connection(self.db_path)
        with conn:
            conn.executemany(
                "DELETE FROM mastery WHERE word_id = ?", [(i,) for i in ids]
            )
        conn.close()
        logger.info(f"Cleared mastery marks for {len(ids)} words")
