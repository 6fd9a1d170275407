from abc import ABC, abstractmethod
from dataclasses import dataclass

from supervision.processor.models import Document
from supervision.service.analysis_builder import AnalysisOutcome


@dataclass(slots=True)
class PipelineContext:
    document_id: str
    document: Document | None = None
    raw_bytes: bytes = b""
    extracted_text: str = ""
    outcome: AnalysisOutcome | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
