import re
from collections.abc import Sequence

from supervision.inspection.elements import (
    BOX_PATTERN,
    CHECKBOX_PATTERNS,
    EXPLICIT_PATTERNS,
    OBSERVATION_PATTERNS,
    contains_element,
)
from supervision.inspection.models import LineDetection
from supervision.inspection.states import ORDERED_STATES, InspectionState, normalize_state

CHECKBOX_CONTEXT_CONFIDENCE = 0.9
EXPLICIT_CONFIDENCE = 0.8
CHECKBOX_POSITION_CONFIDENCE = 0.7

_MIN_KEYWORDS_FOR_CONTEXT = 3
_MAX_IMPLICIT_OBSERVATION_LENGTH = 100
_MIN_IMPLICIT_OBSERVATION_LENGTH = 4

_KEYWORD_PATTERNS: dict[InspectionState, tuple[re.Pattern[str], ...]] = {
    state: (
        re.compile(state.value.lower()),
        re.compile(rf"(?<![a-záéíóúñ]){state.value[0].lower()}\)"),
    )
    for state in ORDERED_STATES
}


class LineContextScanner:
    """Detects a state marker and an observation for one element line."""

    def scan(
        self,
        line: str,
        preceding: Sequence[str] = (),
        following: Sequence[str] = (),
    ) -> LineDetection:
        """Inspect a line and its neighbours.

        Args:
            line: The line naming the element.
            preceding: Lines above, nearest first.
            following: Lines below, nearest first.
        """
        state, confidence, method = self._detect_checkbox(line)
        if state is InspectionState.UNDETERMINED:
            state, confidence, method = self._detect_explicit(line)
        observation = self._find_observation(line, preceding, following)
        return LineDetection(
            state=state,
            confidence=confidence,
            observation=observation,
            detection_method=method,
        )

    def _detect_checkbox(self, line: str) -> tuple[InspectionState, float, str]:
        mark = self._find_marked_box(line)
        if mark is None:
            return InspectionState.UNDETERMINED, 0.0, "none"

        keyword_spans = self._keyword_spans(line.lower())
        if len(keyword_spans) >= _MIN_KEYWORDS_FOR_CONTEXT:
            state = self._closest_keyword(mark, keyword_spans, self._labels_follow_boxes(line))
            return state, CHECKBOX_CONTEXT_CONFIDENCE, "checkbox-context"

        ordinal = self._ordinal_of(mark, line)
        if ordinal < len(ORDERED_STATES):
            return ORDERED_STATES[ordinal], CHECKBOX_POSITION_CONFIDENCE, "checkbox-position"
        return InspectionState.UNDETERMINED, 0.0, "none"

    @staticmethod
    def _find_marked_box(line: str) -> re.Match[str] | None:
        for pattern in CHECKBOX_PATTERNS:
            match = pattern.search(line)
            if match:
                return match
        return None

    @staticmethod
    def _keyword_spans(lowered: str) -> dict[InspectionState, tuple[int, int]]:
        spans: dict[InspectionState, tuple[int, int]] = {}
        for state, patterns in _KEYWORD_PATTERNS.items():
            for pattern in patterns:
                match = pattern.search(lowered)
                if match:
                    spans[state] = match.span()
                    break
        return spans

    @staticmethod
    def _labels_follow_boxes(line: str) -> bool:
        first_box = BOX_PATTERN.search(line)
        lowered = line.lower()
        positions = [lowered.find(state.value.lower()) for state in ORDERED_STATES]
        first_label = min((p for p in positions if p >= 0), default=-1)
        return first_box is not None and 0 <= first_box.start() < first_label

    @staticmethod
    def _closest_keyword(
        mark: re.Match[str],
        spans: dict[InspectionState, tuple[int, int]],
        labels_follow_boxes: bool,
    ) -> InspectionState:
        """Keyword with the smallest character gap to the mark.

        On a tie the label on the side the form layout puts labels wins.
        """
        mark_start, mark_end = mark.span()
        ranked: list[tuple[int, int, InspectionState]] = []
        for state in ORDERED_STATES:
            if state not in spans:
                continue
            start, end = spans[state]
            if end <= mark_start:
                gap, after = mark_start - end, False
            elif start >= mark_end:
                gap, after = start - mark_end, True
            else:
                gap, after = 0, labels_follow_boxes
            ranked.append((gap, 0 if after == labels_follow_boxes else 1, state))
        if not ranked:
            return InspectionState.UNDETERMINED
        return min(ranked, key=lambda item: (item[0], item[1]))[2]

    @staticmethod
    def _ordinal_of(mark: re.Match[str], line: str) -> int:
        for index, box in enumerate(BOX_PATTERN.finditer(line)):
            if box.start() <= mark.start() < box.end():
                return index
        return len(ORDERED_STATES)

    @staticmethod
    def _detect_explicit(line: str) -> tuple[InspectionState, float, str]:
        for pattern in EXPLICIT_PATTERNS:
            match = pattern.search(line)
            if match:
                state = InspectionState.coerce(normalize_state(match.group(1)))
                if state is not InspectionState.UNDETERMINED:
                    return state, EXPLICIT_CONFIDENCE, "explicit"
        return InspectionState.UNDETERMINED, 0.0, "none"

    def _find_observation(
        self,
        line: str,
        preceding: Sequence[str],
        following: Sequence[str],
    ) -> str:
        labeled = self._labeled_observation(line)
        if labeled:
            return labeled

        window = [*preceding, *following]
        for near_line in window:
            labeled = self._labeled_observation(near_line)
            if labeled:
                return labeled
        for near_line in window:
            if self._is_implicit_observation(near_line):
                return near_line.strip()
        return ""

    @staticmethod
    def _labeled_observation(line: str) -> str:
        for pattern in OBSERVATION_PATTERNS:
            match = pattern.search(line)
            if match and match.group(1).strip():
                return match.group(1).strip()
        return ""

    @staticmethod
    def _is_implicit_observation(line: str) -> bool:
        stripped = line.strip()
        return (
            _MIN_IMPLICIT_OBSERVATION_LENGTH <= len(stripped) < _MAX_IMPLICIT_OBSERVATION_LENGTH
            and not BOX_PATTERN.search(stripped)
            and not contains_element(stripped)
        )
