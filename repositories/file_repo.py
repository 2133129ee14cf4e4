"""
repositories/file_repo.py
--------------------------
Data access layer for archived files.
All SQL queries related to the `files` table live here.
"""

from typing import Optional

from psycopg2 import errors

from db.connection import get_connection, release_connection
from models.file_record import FileRecord
from utils.logger import get_logger

logger = get_logger(__name__)


class DuplicateHandleError(Exception):
    """Raised when an insert collides with an existing handle."""

    def __init__(self, handle: str):
        super().__init__(f"Handle {handle} is already taken")
        self.handle = handle


class FileRepository:
    """Repository for insert/lookup operations on the files table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, record: FileRecord) -> FileRecord:
        """
        Insert a new file record.

        Args:
            record: The FileRecord to persist.

        Returns:
            A copy of the record with `created_at` populated.

        Raises:
            DuplicateHandleError: If the handle violates the primary key.
        """
        sql = """
            INSERT INTO files (handle, archive_message_id, archive_channel_id, uploader_id)
            VALUES (%s, %s, %s, %s)
            RETURNING created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    record.handle, record.archive_message_id,
                    record.archive_channel_id, record.uploader_id,
                ))
                created_at = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Stored file {record}")
            return FileRecord(
                handle=record.handle,
                archive_message_id=record.archive_message_id,
                archive_channel_id=record.archive_channel_id,
                uploader_id=record.uploader_id,
                created_at=created_at,
            )
        except errors.UniqueViolation as e:
            conn.rollback()
            logger.warning(f"Handle collision on insert: {record.handle}")
            raise DuplicateHandleError(record.handle) from e
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add file record {record.handle}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def exists(self, handle: str) -> bool:
        """Return True if a record with this handle is already stored."""
        sql = "SELECT 1 FROM files WHERE handle = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (handle,))
                return cur.fetchone() is not None
        finally:
            release_connection(conn)

    def get_by_handle(self, handle: str) -> Optional[FileRecord]:
        """
        Fetch a file record by its handle.

        Returns:
            FileRecord or None.
        """
        sql = """
            SELECT handle, archive_message_id, archive_channel_id, uploader_id, created_at
            FROM files WHERE handle = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (handle,))
                row = cur.fetchone()
                return self._row_to_record(row) if row else None
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_record(row: tuple) -> FileRecord:
        """Convert a database row to a FileRecord."""
        return FileRecord(
            handle=row[0],
            archive_message_id=int(row[1]),
            archive_channel_id=row[2],
            uploader_id=int(row[3]),
            created_at=row[4],
        )
