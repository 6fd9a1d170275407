from enum import Enum


class InspectionState(str, Enum):
    """Canonical condition of an inspected element."""

    EXCELENTE = "Excelente"
    BUENO = "Bueno"
    REGULAR = "Regular"
    DEFICIENTE = "Deficiente"
    UNDETERMINED = "No determinado"

    @property
    def weight(self) -> int:
        """Score used by the weighted summary; 0 for undetermined."""
        return _WEIGHTS[self]

    @classmethod
    def coerce(cls, label: str | None) -> "InspectionState":
        """Map any label to a member, falling back to UNDETERMINED."""
        for member in cls:
            if label == member.value:
                return member
        return cls.UNDETERMINED


_WEIGHTS = {
    InspectionState.EXCELENTE: 4,
    InspectionState.BUENO: 3,
    InspectionState.REGULAR: 2,
    InspectionState.DEFICIENTE: 1,
    InspectionState.UNDETERMINED: 0,
}

# Ordered as the checkbox columns appear on the paper form.
ORDERED_STATES: tuple[InspectionState, ...] = (
    InspectionState.EXCELENTE,
    InspectionState.BUENO,
    InspectionState.REGULAR,
    InspectionState.DEFICIENTE,
)

_LETTER_STATES = {
    "E": InspectionState.EXCELENTE,
    "B": InspectionState.BUENO,
    "R": InspectionState.REGULAR,
    "D": InspectionState.DEFICIENTE,
}

_PASSTHROUGH_LABELS = frozenset({"NO MARCADA", "NO DETERMINADO"})


def normalize_state(token: str | None) -> str:
    """Map a raw captured token to a canonical state label.

    Single letters E/B/R/D and any token containing a full state word map to
    that state. "No marcada" / "No determinado" are returned as given
    (trimmed). Anything else, including empty input, is "No determinado".
    Never raises.
    """
    if not token:
        return InspectionState.UNDETERMINED
    stripped = token.strip()
    normalized = stripped.upper()

    if normalized in _LETTER_STATES:
        return _LETTER_STATES[normalized]
    for state in ORDERED_STATES:
        if state.value.upper() in normalized:
            return state
    if normalized in _PASSTHROUGH_LABELS:
        return stripped
    return InspectionState.UNDETERMINED
