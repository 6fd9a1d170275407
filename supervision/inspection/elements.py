"""Inspection element dictionary and the line-local pattern families."""

import re
import unicodedata

CLEANING_ELEMENTS: tuple[str, ...] = (
    "Techos", "Sobretechos", "Bajo Silos", "Sobre Silos", "Azoteas", "Tuberías",
    "Rocas", "Vidrios", "Escalera", "Rejillas", "Mallas", "Elevadores", "Paredes",
    "Rack", "Puntos Muertos", "Pisos", "Santamaría", "Extintores", "Lámparas",
    "Puertas", "Cortinas", "Portones", "Plataformas", "Defensas", "Vigas",
    "Baños", "Nevera", "Micro Ondas", "Comedor", "Canaletas", "Canales",
    "Camineria", "Avisos", "Silos", "Umbrales de Ventanas", "Ventanas",
    "Drenajes", "Desagües", "Alcantarillas", "Trampas", "Sumideros",
    "Áreas Verdes", "Jardines", "Estacionamiento", "Pasillos", "Oficinas",
    "Almacén", "Depósito", "Área de Producción", "Área de Empaque", "Área de Despacho",
)

_STATE_WORDS = "Excelente|Bueno|Regular|Deficiente"

# Horizontal whitespace only: no pattern may span a line break.
CHECKBOX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\[[ \t]*([X*/\\+\-|✓✔])[ \t]*\]", re.IGNORECASE),
    re.compile(r"\[[ \t]*(marcad[ao]|check|s[ií])[ \t]*\]", re.IGNORECASE),
    re.compile(r"\[[ \t]*([0-9EBRD])[ \t]*\]", re.IGNORECASE),
)

EXPLICIT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b([EBRD])\b"),
    re.compile(rf"\b({_STATE_WORDS})\b", re.IGNORECASE),
    re.compile(rf"Estado:?[ \t]*({_STATE_WORDS}|[EBRD])\b", re.IGNORECASE),
    re.compile(rf"\bes[ \t]+({_STATE_WORDS}|[EBRD])\b", re.IGNORECASE),
    re.compile(rf"\bestá[ \t]+({_STATE_WORDS}|[EBRD])\b", re.IGNORECASE),
)

OBSERVATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Observaci[oó]n[: \t]+(.*)", re.IGNORECASE),
    re.compile(r"Comentario[: \t]+(.*)", re.IGNORECASE),
    re.compile(r"Nota[: \t]+(.*)", re.IGNORECASE),
)

# Any bracket pair short enough to be a form checkbox, marked or not.
BOX_PATTERN = re.compile(r"\[[^\[\]\n]{0,10}\]")


def _element_pattern(name: str) -> re.Pattern[str]:
    words = [re.escape(word) for word in name.split()]
    return re.compile(r"\b" + r"[ \t]+".join(words) + r"\b", re.IGNORECASE)


_ELEMENT_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (name, _element_pattern(name)) for name in CLEANING_ELEMENTS
)


def fold(text: str) -> str:
    """Lowercase, strip accents and all whitespace for loose comparisons."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(stripped.split())


_FOLDED_BY_LENGTH: tuple[tuple[str, str], ...] = tuple(
    sorted(
        ((name, fold(name)) for name in CLEANING_ELEMENTS),
        key=lambda pair: len(pair[1]),
        reverse=True,
    )
)


def find_element(line: str) -> str | None:
    """Return the first dictionary element named on the line, in dictionary order."""
    for name, pattern in _ELEMENT_PATTERNS:
        if pattern.search(line):
            return name
    return None


def contains_element(line: str) -> bool:
    return find_element(line) is not None


def find_element_loose(line: str, exclude: set[str] | frozenset[str] = frozenset()) -> str | None:
    """Accent, case and spacing insensitive lookup, longest name first."""
    folded_line = fold(line)
    if not folded_line:
        return None
    for name, folded_name in _FOLDED_BY_LENGTH:
        if name in exclude:
            continue
        if folded_name in folded_line:
            return name
    return None


def has_state_marker(line: str) -> bool:
    """True when the line carries a checkbox mark or an explicit state token."""
    return any(p.search(line) for p in CHECKBOX_PATTERNS) or any(
        p.search(line) for p in EXPLICIT_PATTERNS
    )
