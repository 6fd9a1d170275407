from supervision.ai.factory import AiClientFactory
from supervision.config.settings import Settings
from supervision.database.repositories.documents_repository import DocumentsRepository
from supervision.inspection.analyzer import CleaningStatusAnalyzer
from supervision.inspection.cache import AnalysisCacheFactory
from supervision.logging.logger import Log
from supervision.pdf.factory import PdfExtractorFactory
from supervision.processor.pipeline import PipelineContext, PipelineStep
from supervision.processor.steps import (
    AnalyzeStep,
    ExtractTextStep,
    LoadDocumentStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistCompletedStep,
)
from supervision.service.analysis_builder import AnalysisBuilder
from supervision.storage.factory import StorageRegistry


class Processor:
    """Runs the processing pipeline for one document.

    Pipeline: mark processing -> load -> extract -> analyze -> persist.
    On any step error the failed step records the message and the error is
    re-raised to the caller.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: str) -> PipelineContext:
        Log.info(f"Processing document {document_id}")
        context = PipelineContext(document_id=document_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or exc.__class__.__name__
            self._failed_step.run(context)
            raise
        return context


def build_analysis_builder(settings: Settings) -> AnalysisBuilder:
    """Wire the analyzer, its cache and the AI fallback from settings."""
    analyzer = CleaningStatusAnalyzer(
        cache=AnalysisCacheFactory.create(settings),
        cache_ttl_seconds=settings.analysis_cache_ttl_seconds,
        context_lines=settings.context_window_lines,
        alternative_factor=settings.alternative_confidence_factor,
    )
    return AnalysisBuilder(
        analyzer,
        fallback=AiClientFactory.create_fallback(settings),
        min_elements=settings.ai_fallback_min_elements,
    )


def build_processor(
    settings: Settings,
    *,
    storage: StorageRegistry,
    builder: AnalysisBuilder,
    doc_repo: DocumentsRepository | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    doc_repo = doc_repo or DocumentsRepository()
    steps: list[PipelineStep] = [
        MarkProcessingStep(doc_repo),
        LoadDocumentStep(doc_repo, storage),
        ExtractTextStep(PdfExtractorFactory.create(settings)),
        AnalyzeStep(builder),
        PersistCompletedStep(doc_repo),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(doc_repo))
