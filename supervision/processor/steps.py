from supervision.database.repositories.documents_repository import DocumentsRepository
from supervision.inspection.analyzer import ANALYSIS_VERSION
from supervision.logging.logger import Log
from supervision.pdf.base import BasePdfExtractor
from supervision.processor.exceptions import EmptyExtractionError
from supervision.processor.pipeline import PipelineContext, PipelineStep
from supervision.service.analysis_builder import AnalysisBuilder
from supervision.storage.factory import StorageRegistry


class MarkProcessingStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._doc_repo.mark_processing(context.document_id)
        Log.info(f"Document {context.document_id} marked as processing")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if self._doc_repo.mark_failed(context.document_id, context.error_message):
            Log.error(f"Document {context.document_id} marked as error: {context.error_message}")
        else:
            Log.warning(
                f"Document {context.document_id} already completed, "
                f"ignoring late failure: {context.error_message}"
            )
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository, storage: StorageRegistry) -> None:
        self._doc_repo = doc_repo
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.document_id)
        backend = self._storage.resolve(document.storage_type)
        context.document = document
        context.raw_bytes = backend.get(document.storage_ref)
        Log.info(
            f"Loaded {len(context.raw_bytes)} bytes for document {context.document_id} "
            f"from {document.storage_type} storage"
        )
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        text = self._pdf_extractor.extract(context.raw_bytes)
        if not text.strip():
            raise EmptyExtractionError(
                f"Text extraction returned no text for document {context.document_id}"
            )
        context.extracted_text = text
        Log.info(
            f"Extracted {len(text)} chars from document {context.document_id} "
            f"with {self._pdf_extractor.engine}"
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, builder: AnalysisBuilder) -> None:
        self._builder = builder

    def run(self, context: PipelineContext) -> PipelineContext:
        context.outcome = self._builder.build(context.extracted_text)
        Log.info(
            f"Analyzed document {context.document_id}: "
            f"{len(context.outcome.elements)} elements, source {context.outcome.source.value}"
        )
        return context


class PersistCompletedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.outcome is None:
            raise ValueError("PipelineContext.outcome must be set before persist")
        self._doc_repo.mark_completed(
            context.document_id,
            extracted_text=context.extracted_text,
            structured_analysis=context.outcome.structured,
            ai_analysis_text=context.outcome.analysis_text,
            analysis_source=context.outcome.source,
            analysis_version=ANALYSIS_VERSION,
        )
        Log.info(f"Document {context.document_id} completed")
        return context
