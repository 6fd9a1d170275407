"""FastAPI application factory for the inspection API."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from supervision.ai.exceptions import AiError
from supervision.ai.factory import AiClientFactory
from supervision.api.routers.documents import router as documents_router
from supervision.config.settings import Settings
from supervision.database.connection import close_pool, ensure_schema, init_pool
from supervision.database.repositories.documents_repository import DocumentsRepository
from supervision.logging.logger import Log
from supervision.pdf.exceptions import PdfExtractionError
from supervision.processor.exceptions import (
    DocumentNotFoundError,
    DocumentNotReadyError,
    InvalidRequestError,
    NoElementsDetectedError,
)
from supervision.processor.processor import build_analysis_builder, build_processor
from supervision.service.document_service import DocumentService
from supervision.storage.exceptions import BlobNotFoundError, StorageError
from supervision.storage.factory import StorageRegistry
from supervision.worker.job_queue import JobQueue
from supervision.worker.job_runner import JobRunner
from supervision.worker.worker import WorkerPool


def build_runtime(settings: Settings) -> tuple[DocumentService, WorkerPool]:
    """Wire repositories, adapters, the job queue and its workers."""
    doc_repo = DocumentsRepository()
    storage = StorageRegistry.build(settings)
    builder = build_analysis_builder(settings)
    job_queue = JobQueue()
    processor = build_processor(settings, storage=storage, builder=builder, doc_repo=doc_repo)
    workers = WorkerPool(job_queue, JobRunner(processor, doc_repo), settings)
    service = DocumentService(
        doc_repo=doc_repo,
        storage=storage,
        job_queue=job_queue,
        builder=builder,
        chat=AiClientFactory.create_chat(settings),
        stall_threshold_seconds=settings.stall_threshold_seconds,
        max_upload_bytes=settings.max_upload_bytes,
    )
    return service, workers


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DocumentNotFoundError)
    async def handle_not_found(_: Request, exc: DocumentNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Documento no encontrado", str(exc))

    @app.exception_handler(BlobNotFoundError)
    async def handle_blob_not_found(_: Request, exc: BlobNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Contenido del PDF no disponible", str(exc))

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid(_: Request, exc: InvalidRequestError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Solicitud inválida", str(exc))

    @app.exception_handler(DocumentNotReadyError)
    async def handle_not_ready(_: Request, exc: DocumentNotReadyError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, "Documento no procesado", str(exc))

    @app.exception_handler(NoElementsDetectedError)
    async def handle_no_elements(_: Request, exc: NoElementsDetectedError) -> JSONResponse:
        return _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "No se detectaron elementos",
            str(exc),
        )

    @app.exception_handler(StorageError)
    @app.exception_handler(PdfExtractionError)
    @app.exception_handler(AiError)
    async def handle_upstream(_: Request, exc: Exception) -> JSONResponse:
        Log.error(f"Upstream service failure: {exc}")
        return _error(
            status.HTTP_502_BAD_GATEWAY,
            "Servicio externo no disponible",
            "No se pudo completar la operación con un servicio externo.",
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Log.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error interno del servidor",
            "Ocurrió un error inesperado. Intente nuevamente.",
        )


def create_app(
    settings: Settings | None = None,
    document_service: DocumentService | None = None,
) -> FastAPI:
    """Create the API application.

    Passing a document_service skips database and worker start-up; the
    caller owns those resources.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if document_service is not None:
            yield
            return

        init_pool(settings)
        ensure_schema()
        service, workers = build_runtime(settings)
        app.state.document_service = service
        workers.start()
        Log.info(f"Inspection API ready (env {settings.app_env}, version {settings.app_version})")
        try:
            yield
        finally:
            workers.stop()
            close_pool()
            Log.info("Inspection API shut down")

    app = FastAPI(
        title="Supervision Inspection API",
        description="Cleaning-status analysis of inspection PDF forms.",
        version=settings.app_version,
        lifespan=lifespan,
    )
    if document_service is not None:
        app.state.document_service = document_service

    register_exception_handlers(app)
    app.include_router(documents_router)

    @app.get("/health", tags=["Health"])
    def health() -> dict[str, str]:
        return {"status": "ok", "version": settings.app_version}

    return app
