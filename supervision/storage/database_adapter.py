import uuid

import psycopg

from supervision.database.connection import get_connection
from supervision.storage.base import BaseBlobStorage
from supervision.storage.exceptions import BlobNotFoundError, StorageError


class DatabaseBlobStorage(BaseBlobStorage):
    """Stores uploads as bytea rows in the document_blobs table."""

    storage_type = "database"

    def put(self, content: bytes, filename: str) -> str:
        ref = str(uuid.uuid4())
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO document_blobs (ref, filename, content)
                    VALUES (%s, %s, %s)
                    """,
                    (ref, filename, content),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to store blob: {exc}") from exc
        return ref

    def get(self, ref: str) -> bytes:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT content FROM document_blobs WHERE ref = %s", (ref,))
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to read blob {ref}: {exc}") from exc
        if row is None:
            raise BlobNotFoundError(f"Blob {ref} not found")
        return bytes(row[0])

    def delete(self, ref: str) -> bool:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM document_blobs WHERE ref = %s", (ref,))
                    deleted = cur.rowcount > 0
                conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"Failed to delete blob {ref}: {exc}") from exc
        return deleted
