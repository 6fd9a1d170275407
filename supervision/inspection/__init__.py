from supervision.inspection.analyzer import ANALYSIS_VERSION, CleaningStatusAnalyzer
from supervision.inspection.models import CleaningSummary, InspectionElement
from supervision.inspection.states import InspectionState, normalize_state
from supervision.inspection.summary import format_analysis_text, generate_summary

__all__ = [
    "ANALYSIS_VERSION",
    "CleaningStatusAnalyzer",
    "CleaningSummary",
    "InspectionElement",
    "InspectionState",
    "format_analysis_text",
    "generate_summary",
    "normalize_state",
]
