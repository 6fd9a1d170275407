import uuid
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from supervision.database.connection import get_connection
from supervision.processor.exceptions import DocumentNotFoundError, DocumentPersistenceError
from supervision.processor.models import (
    AnalysisSource,
    ConversationEntry,
    Document,
    DocumentStatus,
)

_COLUMNS = """
    id, title, description, filename, storage_ref, storage_type, status,
    extracted_text, structured_analysis, ai_analysis_text, analysis_source,
    analysis_version, error_message, processing_started, processing_completed,
    conversation, created_at, updated_at
"""


def _parse_id(document_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(document_id))
    except ValueError as exc:
        raise DocumentNotFoundError(f"Document {document_id} not found") from exc


def _row_to_document(row: dict[str, Any]) -> Document:
    source = row["analysis_source"]
    return Document(
        id=str(row["id"]),
        title=row["title"],
        description=row["description"],
        filename=row["filename"],
        storage_ref=row["storage_ref"],
        storage_type=row["storage_type"],
        status=DocumentStatus(row["status"]),
        extracted_text=row["extracted_text"],
        structured_analysis=row["structured_analysis"],
        ai_analysis_text=row["ai_analysis_text"],
        analysis_source=AnalysisSource(source) if source else None,
        analysis_version=row["analysis_version"],
        error_message=row["error_message"],
        processing_started=row["processing_started"],
        processing_completed=row["processing_completed"],
        conversation=[ConversationEntry.from_dict(item) for item in row["conversation"] or []],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentsRepository:
    """Database operations for the inspection_documents table."""

    def create(
        self,
        *,
        title: str,
        description: str,
        filename: str,
        storage_ref: str,
        storage_type: str,
    ) -> Document:
        """Insert a new pending document and return it."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO inspection_documents
                    (id, title, description, filename, storage_ref, storage_type, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        uuid.uuid4(),
                        title,
                        description,
                        filename,
                        storage_ref,
                        storage_type,
                        DocumentStatus.PENDING.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise DocumentPersistenceError(f"Insert of document '{title}' returned no row")
        return _row_to_document(row)

    def find_by_id(self, document_id: str) -> Document:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM inspection_documents WHERE id = %s",
                    (_parse_id(document_id),),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def list_page(self, offset: int, limit: int) -> tuple[list[Document], int]:
        """Return one page of documents (newest first) and the total count."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SELECT COUNT(*) AS total FROM inspection_documents")
                count_row = cur.fetchone()
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM inspection_documents
                    ORDER BY created_at DESC
                    OFFSET %s LIMIT %s
                    """,
                    (offset, limit),
                )
                rows = cur.fetchall()

        total = int(count_row["total"]) if count_row else 0
        return [_row_to_document(row) for row in rows], total

    def mark_processing(self, document_id: str) -> None:
        """Move a document to processing and stamp processing_started."""
        self._update(
            document_id,
            """
            UPDATE inspection_documents
            SET status = 'processing', processing_started = NOW(),
                error_message = NULL, updated_at = NOW()
            WHERE id = %s
            """,
            (),
        )

    def mark_completed(
        self,
        document_id: str,
        *,
        extracted_text: str,
        structured_analysis: dict[str, Any],
        ai_analysis_text: str,
        analysis_source: AnalysisSource,
        analysis_version: int,
    ) -> None:
        """Persist the extraction and analysis results and finish the document."""
        self._update(
            document_id,
            """
            UPDATE inspection_documents
            SET status = 'completed', extracted_text = %s, structured_analysis = %s,
                ai_analysis_text = %s, analysis_source = %s, analysis_version = %s,
                error_message = NULL, processing_completed = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (
                extracted_text,
                Jsonb(structured_analysis),
                ai_analysis_text,
                analysis_source.value,
                analysis_version,
            ),
        )

    def mark_failed(self, document_id: str, error: str) -> bool:
        """Move a document to error, keeping the reason as a diagnostic.

        A completed document is left as it is. Returns False when nothing
        was changed, whether the document completed or no longer exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE inspection_documents
                    SET status = 'error', error_message = %s, updated_at = NOW()
                    WHERE id = %s AND status <> 'completed'
                    """,
                    (error, _parse_id(document_id)),
                )
                updated = cur.rowcount > 0
            conn.commit()
        return updated

    def update_analysis(
        self,
        document_id: str,
        *,
        structured_analysis: dict[str, Any],
        ai_analysis_text: str,
        analysis_source: AnalysisSource,
        analysis_version: int,
    ) -> None:
        """Replace the stored analysis without touching the document status."""
        self._update(
            document_id,
            """
            UPDATE inspection_documents
            SET structured_analysis = %s, ai_analysis_text = %s,
                analysis_source = %s, analysis_version = %s, updated_at = NOW()
            WHERE id = %s
            """,
            (
                Jsonb(structured_analysis),
                ai_analysis_text,
                analysis_source.value,
                analysis_version,
            ),
        )

    def clear_analysis(self, document_id: str) -> None:
        self._update(
            document_id,
            """
            UPDATE inspection_documents
            SET structured_analysis = NULL, ai_analysis_text = '',
                analysis_source = NULL, analysis_version = 0, updated_at = NOW()
            WHERE id = %s
            """,
            (),
        )

    def append_conversation(self, document_id: str, entries: list[ConversationEntry]) -> None:
        """Append entries to the conversation log in a single statement."""
        self._update(
            document_id,
            """
            UPDATE inspection_documents
            SET conversation = conversation || %s, updated_at = NOW()
            WHERE id = %s
            """,
            (Jsonb([entry.to_dict() for entry in entries]),),
        )

    def delete(self, document_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM inspection_documents WHERE id = %s",
                    (_parse_id(document_id),),
                )
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def _update(self, document_id: str, sql: str, params: tuple[Any, ...]) -> None:
        """Run an UPDATE whose last parameter is the document id.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (*params, _parse_id(document_id)))
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
