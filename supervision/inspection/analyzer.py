"""Heuristic cleaning-status analyzer over extracted document text."""

import hashlib

from supervision.inspection.cache import BaseAnalysisCache, NullAnalysisCache
from supervision.inspection.elements import find_element, find_element_loose, has_state_marker
from supervision.inspection.models import InspectionElement
from supervision.inspection.scanner import LineContextScanner
from supervision.inspection.states import InspectionState
from supervision.logging.logger import Log

# Bump whenever detection rules change so stored analyses are regenerated.
ANALYSIS_VERSION = 3

DEFAULT_CACHE_TTL_SECONDS = 3600
DEFAULT_CONTEXT_LINES = 3
DEFAULT_ALTERNATIVE_FACTOR = 0.8


def text_fingerprint(text: str) -> str:
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return f"v{ANALYSIS_VERSION}:{digest}"


class CleaningStatusAnalyzer:
    """Finds dictionary elements in a document and the state marked for each."""

    def __init__(
        self,
        *,
        scanner: LineContextScanner | None = None,
        cache: BaseAnalysisCache | None = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        alternative_factor: float = DEFAULT_ALTERNATIVE_FACTOR,
    ) -> None:
        self._scanner = scanner or LineContextScanner()
        self._cache = cache if cache is not None else NullAnalysisCache()
        self._cache_ttl_seconds = cache_ttl_seconds
        self._context_lines = context_lines
        self._alternative_factor = alternative_factor

    def analyze(self, text: str, force_refresh: bool = False) -> list[InspectionElement]:
        """Return one InspectionElement per element found in the text.

        Results are cached per text fingerprint; force_refresh drops the
        cached entry and recomputes.
        """
        if not text:
            return []

        key = text_fingerprint(text)
        if force_refresh:
            Log.debug(f"Forcing fresh cleaning analysis for {key}")
            self._cache.invalidate(key)
        else:
            cached = self._cache.get(key)
            if cached is not None:
                Log.debug(f"Cleaning analysis cache hit for {key}")
                return [InspectionElement.from_dict(item) for item in cached]

        lines = split_lines(text)
        elements = self._primary_pass(lines)
        if not elements:
            Log.info("No elements in primary pass, running alternative pass")
            elements = self._alternative_pass(lines)

        Log.info(f"Cleaning analysis found {len(elements)} elements")
        self._cache.set(key, [item.to_dict() for item in elements], self._cache_ttl_seconds)
        return elements

    def _primary_pass(self, lines: list[str]) -> list[InspectionElement]:
        elements: list[InspectionElement] = []
        seen: set[str] = set()
        for index, line in enumerate(lines):
            name = find_element(line)
            if name is None or name in seen:
                continue
            preceding, following = self._context(lines, index)
            detection = self._scanner.scan(line, preceding, following)
            elements.append(
                InspectionElement(
                    element=name,
                    state=detection.state,
                    observation=detection.observation,
                    confidence=detection.confidence,
                    detection_method=detection.detection_method,
                )
            )
            seen.add(name)
        return elements

    def _alternative_pass(self, lines: list[str]) -> list[InspectionElement]:
        elements: list[InspectionElement] = []
        seen: set[str] = set()
        for index, line in enumerate(lines):
            if not has_state_marker(line):
                continue
            preceding, following = self._context(lines, index)
            detection = self._scanner.scan(line, preceding, following)
            if detection.state is InspectionState.UNDETERMINED:
                continue
            name = self._nearest_unrecorded(lines, index, seen)
            if name is None:
                continue
            elements.append(
                InspectionElement(
                    element=name,
                    state=detection.state,
                    observation=detection.observation,
                    confidence=round(detection.confidence * self._alternative_factor, 4),
                    detection_method=f"alternative-{detection.detection_method}",
                )
            )
            seen.add(name)
        return elements

    def _nearest_unrecorded(self, lines: list[str], index: int, seen: set[str]) -> str | None:
        # Distance 0 covers element names mangled on the marker line itself.
        for distance in range(self._context_lines + 1):
            position = index - distance
            if position < 0:
                break
            name = find_element_loose(lines[position], exclude=seen)
            if name is not None:
                return name
        return None

    def _context(self, lines: list[str], index: int) -> tuple[list[str], list[str]]:
        start = max(0, index - self._context_lines)
        preceding = lines[start:index][::-1]
        following = lines[index + 1 : index + 1 + self._context_lines]
        return preceding, following


def split_lines(text: str) -> list[str]:
    """Trimmed, non-empty lines of the text."""
    return [stripped for stripped in (line.strip() for line in text.splitlines()) if stripped]
