from dataclasses import dataclass, field
from typing import Any

from supervision.inspection.states import InspectionState


@dataclass(frozen=True)
class LineDetection:
    """What the line-context scanner recovered from one line."""

    state: InspectionState = InspectionState.UNDETERMINED
    confidence: float = 0.0
    observation: str = ""
    detection_method: str = "none"


@dataclass(frozen=True)
class InspectionElement:
    """A dictionary element and the state detected for it in one document."""

    element: str
    state: InspectionState
    observation: str = ""
    confidence: float = 0.0
    detection_method: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return {
            "element": self.element,
            "state": self.state.value,
            "observation": self.observation,
            "confidence": self.confidence,
            "detectionMethod": self.detection_method,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InspectionElement":
        return cls(
            element=str(data["element"]),
            state=InspectionState.coerce(data.get("state")),
            observation=str(data.get("observation") or ""),
            confidence=float(data.get("confidence") or 0.0),
            detection_method=str(data.get("detectionMethod") or "none"),
        )


@dataclass(frozen=True)
class CleaningSummary:
    """Aggregate view over the elements of one document."""

    overall_status: InspectionState
    status_counts: dict[str, int] = field(default_factory=dict)
    status_percentages: dict[str, int] = field(default_factory=dict)
    elements_count: int = 0
    observations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallStatus": self.overall_status.value,
            "statusCounts": dict(self.status_counts),
            "statusPercentages": dict(self.status_percentages),
            "elementsCount": self.elements_count,
            "observations": list(self.observations),
        }
