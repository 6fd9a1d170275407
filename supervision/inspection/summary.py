import math
from collections.abc import Sequence

from supervision.inspection.models import CleaningSummary, InspectionElement
from supervision.inspection.states import ORDERED_STATES, InspectionState

MAX_OBSERVATIONS = 10

_THRESHOLDS: tuple[tuple[float, InspectionState], ...] = (
    (3.5, InspectionState.EXCELENTE),
    (2.5, InspectionState.BUENO),
    (1.5, InspectionState.REGULAR),
)

NO_ELEMENTS_TEXT = "No se detectaron elementos de limpieza en el documento."


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def generate_summary(elements: Sequence[InspectionElement]) -> CleaningSummary:
    """Reduce per-element results into counts, percentages and an overall state."""
    counts = {state.value: 0 for state in InspectionState}
    observations: list[str] = []
    for item in elements:
        counts[InspectionState.coerce(item.state).value] += 1
        if item.observation:
            observations.append(f"{item.element}: {item.observation}")

    total = len(elements)
    percentages = {
        label: _round_half_up(count * 100 / total) if total else 0
        for label, count in counts.items()
    }

    determined = total - counts[InspectionState.UNDETERMINED.value]
    overall = InspectionState.UNDETERMINED
    if determined > 0:
        score = sum(counts[s.value] * s.weight for s in ORDERED_STATES) / determined
        overall = InspectionState.DEFICIENTE
        for threshold, state in _THRESHOLDS:
            if score >= threshold:
                overall = state
                break

    return CleaningSummary(
        overall_status=overall,
        status_counts=counts,
        status_percentages=percentages,
        elements_count=total,
        observations=observations[:MAX_OBSERVATIONS],
    )


def format_analysis_text(
    elements: Sequence[InspectionElement],
    summary: CleaningSummary | None = None,
) -> str:
    """Render the human-readable report stored alongside the structured result."""
    if not elements:
        return NO_ELEMENTS_TEXT
    if summary is None:
        summary = generate_summary(elements)

    lines = ["Resultado análisis:"]
    lines.extend(f'El estado del "{item.element}" es {item.state.value}' for item in elements)

    notes = [f"• {item.element}: {item.observation}" for item in elements if item.observation]
    if notes:
        lines.append("")
        lines.append("Observaciones:")
        lines.extend(notes)

    lines.append("")
    lines.append("Resumen:")
    lines.append(f"• Estado general: {summary.overall_status.value}")
    lines.append(f"• Elementos analizados: {summary.elements_count}")
    for state in ORDERED_STATES:
        lines.append(
            f"• {state.value}: {summary.status_counts[state.value]} "
            f"({summary.status_percentages[state.value]}%)"
        )
    return "\n".join(lines)
