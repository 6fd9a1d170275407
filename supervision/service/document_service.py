"""Document lifecycle: upload, background processing triggers and analysis retrieval.

Status moves pending -> processing -> completed | error; error goes back to
processing when analysis is requested again. Retrieval returns the stored
analysis when it is current, re-triggers stalled or unfinished processing,
and regenerates stale analyses of completed documents synchronously.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from supervision.ai.chat import ChatResponder
from supervision.ai.exceptions import AiError
from supervision.database.repositories.documents_repository import DocumentsRepository
from supervision.inspection.analyzer import ANALYSIS_VERSION
from supervision.logging.logger import Log
from supervision.processor.exceptions import DocumentNotReadyError, InvalidRequestError
from supervision.processor.models import AnalysisSource, ConversationEntry, Document, DocumentStatus
from supervision.service.analysis_builder import AnalysisBuilder, AnalysisOutcome
from supervision.storage.factory import StorageRegistry
from supervision.worker.job_queue import JobQueue

DEFAULT_STALL_THRESHOLD_SECONDS = 120
MAX_PAGE_SIZE = 100
PDF_MAGIC = b"%PDF"

CHAT_UNAVAILABLE_REPLY = "Lo siento, no pude procesar tu pregunta en este momento."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class AnalysisPending:
    """Analysis is not available yet; the caller should poll again."""

    status: str
    message: str
    estimated_time: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis": self.message,
            "status": self.status,
            "estimatedTime": self.estimated_time,
        }


@dataclass(frozen=True)
class AnalysisReady:
    document_id: str
    title: str
    status: str
    analysis: str
    source: str
    elements: list[dict[str, Any]] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentId": self.document_id,
            "title": self.title,
            "status": self.status,
            "analysis": self.analysis,
            "elements": list(self.elements),
            "summary": dict(self.summary),
            "source": self.source,
        }


class DocumentService:
    """Operations behind the /documents API."""

    def __init__(
        self,
        *,
        doc_repo: DocumentsRepository,
        storage: StorageRegistry,
        job_queue: JobQueue,
        builder: AnalysisBuilder,
        chat: ChatResponder,
        stall_threshold_seconds: int = DEFAULT_STALL_THRESHOLD_SECONDS,
        max_upload_bytes: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._doc_repo = doc_repo
        self._storage = storage
        self._job_queue = job_queue
        self._builder = builder
        self._chat = chat
        self._stall_threshold_seconds = stall_threshold_seconds
        self._max_upload_bytes = max_upload_bytes
        self._clock = clock

    def upload(
        self,
        content: bytes,
        filename: str,
        title: str,
        description: str = "",
    ) -> dict[str, Any]:
        """Store the PDF, create a pending document and queue it for processing."""
        title = title.strip()
        if not title:
            raise InvalidRequestError("El título es obligatorio")
        if not content:
            raise InvalidRequestError("No se ha subido ningún archivo")
        if not content.startswith(PDF_MAGIC):
            raise InvalidRequestError("El archivo no es un PDF válido")
        if self._max_upload_bytes is not None and len(content) > self._max_upload_bytes:
            raise InvalidRequestError(
                f"El archivo supera el tamaño máximo de {self._max_upload_bytes} bytes"
            )

        backend = self._storage.default
        storage_ref = backend.put(content, filename)
        try:
            document = self._doc_repo.create(
                title=title,
                description=description.strip(),
                filename=filename,
                storage_ref=storage_ref,
                storage_type=backend.storage_type,
            )
        except Exception:
            backend.delete(storage_ref)
            raise

        self._job_queue.enqueue(document.id)
        Log.info(f"Document {document.id} uploaded ({len(content)} bytes), queued for processing")
        return {
            "id": document.id,
            "title": document.title,
            "status": document.status.value,
            "message": "Documento subido correctamente. El análisis comenzará en breve.",
            "estimatedTime": "1-3 minutos",
        }

    def list_documents(self, page: int = 1, limit: int = 10) -> dict[str, Any]:
        if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
            raise InvalidRequestError(
                f"page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}"
            )
        documents, total = self._doc_repo.list_page(offset=(page - 1) * limit, limit=limit)
        total_pages = math.ceil(total / limit) if total else 0
        return {
            "documents": [self._list_projection(document) for document in documents],
            "pagination": {
                "totalDocuments": total,
                "totalPages": total_pages,
                "currentPage": page,
                "pageSize": limit,
                "hasNextPage": page < total_pages,
                "hasPrevPage": page > 1,
            },
        }

    def get_document(self, document_id: str) -> dict[str, Any]:
        document = self._doc_repo.find_by_id(document_id)
        projection = self._list_projection(document)
        projection.update(
            {
                "extractedText": document.extracted_text,
                "analysis": document.structured_analysis,
                "aiAnalysisText": document.ai_analysis_text,
                "analysisSource": (
                    document.analysis_source.value if document.analysis_source else None
                ),
                "analysisVersion": document.analysis_version,
                "errorMessage": document.error_message,
                "conversation": [entry.to_dict() for entry in document.conversation],
                "processingStarted": _iso(document.processing_started),
                "processingCompleted": _iso(document.processing_completed),
            }
        )
        return projection

    def get_analysis(
        self,
        document_id: str,
        force_refresh: bool = False,
    ) -> AnalysisPending | AnalysisReady:
        """Return the analysis, or tell the caller to come back while it is produced."""
        document = self._doc_repo.find_by_id(document_id)

        if not force_refresh and self._is_current(document):
            Log.debug(f"Returning stored analysis for document {document_id}")
            return self._ready(document, document.structured_analysis or {}, source="stored")

        if document.status is DocumentStatus.PROCESSING:
            if self._is_stalled(document):
                Log.warning(
                    f"Document {document_id} processing for over "
                    f"{self._stall_threshold_seconds}s, re-triggering"
                )
                self._doc_repo.mark_processing(document_id)
                self._job_queue.enqueue(document_id)
                return AnalysisPending(
                    status="reprocessing",
                    message="El procesamiento tardó demasiado y se ha reiniciado.",
                    estimated_time="1-2 minutos",
                )
            return AnalysisPending(
                status="processing",
                message="El documento se está procesando. Intente de nuevo en 5-10 segundos.",
                estimated_time="5-10 segundos",
            )

        if document.status in (DocumentStatus.PENDING, DocumentStatus.ERROR):
            Log.info(f"Document {document_id} is {document.status.value}, starting processing")
            self._doc_repo.mark_processing(document_id)
            self._job_queue.enqueue(document_id)
            return AnalysisPending(
                status="processing",
                message="El documento está siendo procesado. Intente nuevamente en unos momentos.",
                estimated_time="1-3 minutos",
            )

        Log.info(f"Regenerating analysis for document {document_id} (forced={force_refresh})")
        outcome = self._builder.build(document.extracted_text, force_refresh=force_refresh)
        self._store_outcome(document_id, outcome)
        source = "gemini" if outcome.source is AnalysisSource.AI else "regenerated"
        return self._ready(document, outcome.structured, source=source, text=outcome.analysis_text)

    def fix_analysis(self, document_id: str) -> dict[str, Any]:
        """Throw away the stored analysis and rebuild it from the extracted text.

        Raises:
            DocumentNotReadyError: if the document has no extracted text yet.
            NoElementsDetectedError: if neither path finds anything.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document.status is not DocumentStatus.COMPLETED or not document.extracted_text:
            raise DocumentNotReadyError("El documento aún no ha sido procesado")

        self._doc_repo.clear_analysis(document_id)
        outcome = self._builder.build(
            document.extracted_text,
            force_refresh=True,
            require_result=True,
        )
        self._store_outcome(document_id, outcome)
        Log.info(f"Analysis of document {document_id} rebuilt: {len(outcome.elements)} elements")
        return {
            "success": True,
            "elementsFound": len(outcome.elements),
            "analysis": outcome.analysis_text,
            "summary": outcome.summary.to_dict(),
        }

    def chat(self, document_id: str, message: str) -> str:
        """Answer a question about a processed document and log the exchange."""
        message = message.strip()
        if not message:
            raise InvalidRequestError("El mensaje es obligatorio")
        document = self._doc_repo.find_by_id(document_id)
        if document.status is not DocumentStatus.COMPLETED:
            raise DocumentNotReadyError("El documento aún no ha sido procesado")

        asked_at = self._clock()
        try:
            reply = self._chat.respond(message, document.extracted_text, document.ai_analysis_text)
        except AiError as exc:
            Log.warning(f"Chat reply for document {document_id} failed: {exc}")
            reply = CHAT_UNAVAILABLE_REPLY

        self._doc_repo.append_conversation(
            document_id,
            [
                ConversationEntry(message=message, from_user=True, timestamp=asked_at),
                ConversationEntry(message=reply, from_user=False, timestamp=self._clock()),
            ],
        )
        return reply

    def view(self, document_id: str) -> tuple[bytes, str]:
        """Return the stored PDF bytes and the original file name."""
        document = self._doc_repo.find_by_id(document_id)
        backend = self._storage.resolve(document.storage_type)
        return backend.get(document.storage_ref), document.filename

    def delete(self, document_id: str) -> None:
        document = self._doc_repo.find_by_id(document_id)
        backend = self._storage.resolve(document.storage_type)
        if not backend.delete(document.storage_ref):
            Log.warning(
                f"Blob {document.storage_ref} of document {document_id} was already gone"
            )
        self._doc_repo.delete(document_id)
        Log.info(f"Document {document_id} deleted")

    def _is_current(self, document: Document) -> bool:
        return (
            document.status is DocumentStatus.COMPLETED
            and document.analysis_version == ANALYSIS_VERSION
            and document.has_analysis
        )

    def _is_stalled(self, document: Document) -> bool:
        if document.processing_started is None:
            return True
        elapsed = (self._clock() - document.processing_started).total_seconds()
        return elapsed > self._stall_threshold_seconds

    def _store_outcome(self, document_id: str, outcome: AnalysisOutcome) -> None:
        self._doc_repo.update_analysis(
            document_id,
            structured_analysis=outcome.structured,
            ai_analysis_text=outcome.analysis_text,
            analysis_source=outcome.source,
            analysis_version=ANALYSIS_VERSION,
        )

    @staticmethod
    def _ready(
        document: Document,
        structured: dict[str, Any],
        *,
        source: str,
        text: str | None = None,
    ) -> AnalysisReady:
        return AnalysisReady(
            document_id=document.id,
            title=document.title,
            status=DocumentStatus.COMPLETED.value,
            analysis=text if text is not None else document.ai_analysis_text,
            source=source,
            elements=list(structured.get("elements") or []),
            summary=dict(structured.get("summary") or {}),
        )

    @staticmethod
    def _list_projection(document: Document) -> dict[str, Any]:
        projection: dict[str, Any] = {
            "id": document.id,
            "title": document.title,
            "description": document.description,
            "filename": document.filename,
            "status": document.status.value,
            "hasAnalysis": document.has_analysis,
            "hasConversation": bool(document.conversation),
            "createdAt": _iso(document.created_at),
            "updatedAt": _iso(document.updated_at),
        }
        processing_time = document.processing_time_seconds
        if processing_time is not None:
            projection["processingTime"] = processing_time
        return projection
