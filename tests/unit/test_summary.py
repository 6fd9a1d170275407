from supervision.inspection.models import InspectionElement
from supervision.inspection.states import InspectionState
from supervision.inspection.summary import (
    MAX_OBSERVATIONS,
    NO_ELEMENTS_TEXT,
    format_analysis_text,
    generate_summary,
)


def _make_element(
    name: str,
    state: InspectionState,
    observation: str = "",
) -> InspectionElement:
    return InspectionElement(element=name, state=state, observation=observation, confidence=0.7)


class TestGenerateSummary:
    def test_weighted_overall_status(self) -> None:
        elements = [
            _make_element("Techos", InspectionState.EXCELENTE),
            _make_element("Pisos", InspectionState.EXCELENTE),
            _make_element("Paredes", InspectionState.BUENO),
            _make_element("Vidrios", InspectionState.REGULAR),
        ]

        summary = generate_summary(elements)

        assert summary.overall_status is InspectionState.BUENO
        assert summary.elements_count == 4
        assert summary.status_counts["Excelente"] == 2
        assert summary.status_percentages == {
            "Excelente": 50,
            "Bueno": 25,
            "Regular": 25,
            "Deficiente": 0,
            "No determinado": 0,
        }

    def test_undetermined_excluded_from_score(self) -> None:
        elements = [
            _make_element("Techos", InspectionState.EXCELENTE),
            _make_element("Pisos", InspectionState.UNDETERMINED),
        ]

        summary = generate_summary(elements)

        assert summary.overall_status is InspectionState.EXCELENTE
        assert summary.status_percentages["No determinado"] == 50

    def test_all_undetermined(self) -> None:
        summary = generate_summary([_make_element("Techos", InspectionState.UNDETERMINED)])
        assert summary.overall_status is InspectionState.UNDETERMINED

    def test_low_score_is_deficiente(self) -> None:
        elements = [
            _make_element("Techos", InspectionState.DEFICIENTE),
            _make_element("Pisos", InspectionState.DEFICIENTE),
            _make_element("Paredes", InspectionState.REGULAR),
        ]
        assert generate_summary(elements).overall_status is InspectionState.DEFICIENTE

    def test_percentages_round_half_up(self) -> None:
        elements = [
            _make_element("Techos", InspectionState.BUENO),
            _make_element("Pisos", InspectionState.BUENO),
            _make_element("Paredes", InspectionState.REGULAR),
        ]

        summary = generate_summary(elements)

        assert summary.status_percentages["Bueno"] == 67
        assert summary.status_percentages["Regular"] == 33

    def test_empty(self) -> None:
        summary = generate_summary([])

        assert summary.overall_status is InspectionState.UNDETERMINED
        assert summary.elements_count == 0
        assert set(summary.status_percentages.values()) == {0}

    def test_observations_capped(self) -> None:
        elements = [
            _make_element(f"Elemento {i}", InspectionState.BUENO, observation="sucio")
            for i in range(MAX_OBSERVATIONS + 5)
        ]

        summary = generate_summary(elements)

        assert len(summary.observations) == MAX_OBSERVATIONS
        assert summary.observations[0] == "Elemento 0: sucio"

    def test_to_dict_keys(self) -> None:
        data = generate_summary([_make_element("Techos", InspectionState.BUENO)]).to_dict()
        assert data["overallStatus"] == "Bueno"
        assert data["elementsCount"] == 1
        assert data["statusCounts"]["Bueno"] == 1


class TestFormatAnalysisText:
    def test_lists_every_element(self) -> None:
        text = format_analysis_text(
            [
                _make_element("Techos", InspectionState.BUENO, observation="agrietado"),
                _make_element("Pisos", InspectionState.EXCELENTE),
            ]
        )

        assert text.startswith("Resultado análisis:")
        assert 'El estado del "Techos" es Bueno' in text
        assert 'El estado del "Pisos" es Excelente' in text
        assert "Observaciones:\n• Techos: agrietado" in text
        assert "• Estado general: Excelente" in text
        assert "• Bueno: 1 (50%)" in text

    def test_no_observation_section_without_notes(self) -> None:
        text = format_analysis_text([_make_element("Techos", InspectionState.BUENO)])
        assert "Observaciones:" not in text

    def test_no_elements(self) -> None:
        assert format_analysis_text([]) == NO_ELEMENTS_TEXT
