from dataclasses import dataclass
from typing import Any

from supervision.ai.exceptions import AiError
from supervision.ai.fallback import AiFallbackAdapter
from supervision.inspection.analyzer import CleaningStatusAnalyzer
from supervision.inspection.models import CleaningSummary, InspectionElement
from supervision.inspection.summary import format_analysis_text, generate_summary
from supervision.logging.logger import Log
from supervision.processor.exceptions import NoElementsDetectedError
from supervision.processor.models import AnalysisSource


@dataclass(frozen=True)
class AnalysisOutcome:
    elements: list[InspectionElement]
    summary: CleaningSummary
    analysis_text: str
    source: AnalysisSource

    @property
    def structured(self) -> dict[str, Any]:
        """JSON-ready {elements, summary} payload as stored on the document."""
        return {
            "elements": [item.to_dict() for item in self.elements],
            "summary": self.summary.to_dict(),
        }


class AnalysisBuilder:
    """Runs the heuristic analyzer and escalates to the AI fallback on thin results."""

    def __init__(
        self,
        analyzer: CleaningStatusAnalyzer,
        fallback: AiFallbackAdapter | None = None,
        min_elements: int = 1,
    ) -> None:
        self._analyzer = analyzer
        self._fallback = fallback
        self._min_elements = min_elements

    def build(
        self,
        text: str,
        *,
        force_refresh: bool = False,
        require_result: bool = False,
    ) -> AnalysisOutcome:
        """Analyze text into elements, summary and the report to store.

        An AI failure never discards the heuristic result. With
        require_result, finding nothing on either path raises
        NoElementsDetectedError.
        """
        elements = self._analyzer.analyze(text, force_refresh=force_refresh)
        summary = generate_summary(elements)
        analysis_text = format_analysis_text(elements, summary)
        source = AnalysisSource.HEURISTIC

        if len(elements) < self._min_elements and self._fallback is not None:
            Log.info(
                f"Heuristic analysis found {len(elements)} elements, "
                f"below {self._min_elements}; using AI fallback"
            )
            try:
                analysis_text = self._fallback.analyze(text)
                source = AnalysisSource.AI
            except AiError as exc:
                Log.warning(f"AI fallback failed, keeping heuristic result: {exc}")

        if require_result and not elements and source is AnalysisSource.HEURISTIC:
            raise NoElementsDetectedError(
                "No se pudieron detectar elementos de limpieza en el documento"
            )
        return AnalysisOutcome(
            elements=elements,
            summary=summary,
            analysis_text=analysis_text,
            source=source,
        )
