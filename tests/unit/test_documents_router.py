from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from supervision.ai.exceptions import AiNetworkError
from supervision.api.app import create_app
from supervision.config.settings import Settings
from supervision.processor.exceptions import (
    DocumentNotFoundError,
    DocumentNotReadyError,
    InvalidRequestError,
    NoElementsDetectedError,
)
from supervision.service.document_service import AnalysisPending, AnalysisReady
from supervision.storage.exceptions import BlobNotFoundError

DOC_ID = "550e8400-e29b-41d4-a716-446655440000"


def _make_client(raise_server_exceptions: bool = True) -> tuple[TestClient, MagicMock]:
    service = MagicMock()
    app = create_app(Settings(app_version="9.9.9"), document_service=service)
    return TestClient(app, raise_server_exceptions=raise_server_exceptions), service


def _make_ready() -> AnalysisReady:
    return AnalysisReady(
        document_id=DOC_ID,
        title="Inspección",
        status="completed",
        analysis="Resultado análisis:",
        source="stored",
        elements=[{"element": "Techos", "state": "Bueno"}],
        summary={"overallStatus": "Bueno"},
    )


class TestHealth:
    def test_health(self) -> None:
        client, _service = _make_client()

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": "9.9.9"}


class TestUpload:
    def test_multipart_upload(self) -> None:
        client, service = _make_client()
        service.upload.return_value = {"id": DOC_ID, "status": "pending"}

        response = client.post(
            "/documents",
            files={"file": ("inspeccion.pdf", b"%PDF-1.4", "application/pdf")},
            data={"title": "Inspección", "description": "Planta norte"},
        )

        assert response.status_code == 201
        assert response.json()["id"] == DOC_ID
        service.upload.assert_called_once_with(
            b"%PDF-1.4",
            filename="inspeccion.pdf",
            title="Inspección",
            description="Planta norte",
        )

    def test_invalid_upload_is_400(self) -> None:
        client, service = _make_client()
        service.upload.side_effect = InvalidRequestError("El título es obligatorio")

        response = client.post(
            "/documents",
            files={"file": ("a.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "El título es obligatorio"


class TestReadEndpoints:
    def test_list_passes_paging(self) -> None:
        client, service = _make_client()
        service.list_documents.return_value = {"documents": [], "pagination": {}}

        response = client.get("/documents", params={"page": 2, "limit": 5})

        assert response.status_code == 200
        service.list_documents.assert_called_once_with(page=2, limit=5)

    def test_get_document(self) -> None:
        client, service = _make_client()
        service.get_document.return_value = {"id": DOC_ID}

        assert client.get(f"/documents/{DOC_ID}").json() == {"id": DOC_ID}

    def test_not_found_is_404(self) -> None:
        client, service = _make_client()
        service.get_document.side_effect = DocumentNotFoundError("Document x not found")

        response = client.get("/documents/x")

        assert response.status_code == 404
        assert response.json()["error"] == "Documento no encontrado"


class TestAnalyze:
    def test_ready_is_200(self) -> None:
        client, service = _make_client()
        service.get_analysis.return_value = _make_ready()

        response = client.post(f"/documents/{DOC_ID}/analyze")

        assert response.status_code == 200
        assert response.json()["documentId"] == DOC_ID
        assert response.json()["source"] == "stored"
        service.get_analysis.assert_called_once_with(DOC_ID, force_refresh=False)

    def test_pending_is_202(self) -> None:
        client, service = _make_client()
        service.get_analysis.return_value = AnalysisPending(
            status="processing",
            message="El documento se está procesando.",
            estimated_time="5-10 segundos",
        )

        response = client.post(f"/documents/{DOC_ID}/analyze")

        assert response.status_code == 202
        assert response.json() == {
            "analysis": "El documento se está procesando.",
            "status": "processing",
            "estimatedTime": "5-10 segundos",
        }

    def test_refresh_flag(self) -> None:
        client, service = _make_client()
        service.get_analysis.return_value = _make_ready()

        client.post(f"/documents/{DOC_ID}/analyze", params={"refresh": "true"})

        service.get_analysis.assert_called_once_with(DOC_ID, force_refresh=True)


class TestFixAnalysis:
    def test_success(self) -> None:
        client, service = _make_client()
        service.fix_analysis.return_value = {"success": True, "elementsFound": 3}

        response = client.post(f"/documents/{DOC_ID}/fix-analysis")

        assert response.status_code == 200
        assert response.json()["elementsFound"] == 3

    def test_nothing_detected_is_422(self) -> None:
        client, service = _make_client()
        service.fix_analysis.side_effect = NoElementsDetectedError("nada")

        response = client.post(f"/documents/{DOC_ID}/fix-analysis")

        assert response.status_code == 422
        assert response.json()["error"] == "No se detectaron elementos"

    def test_not_ready_is_409(self) -> None:
        client, service = _make_client()
        service.fix_analysis.side_effect = DocumentNotReadyError("no procesado")

        assert client.post(f"/documents/{DOC_ID}/fix-analysis").status_code == 409


class TestChat:
    def test_returns_reply(self) -> None:
        client, service = _make_client()
        service.chat.return_value = "Bueno"

        response = client.post(f"/documents/{DOC_ID}/chat", json={"message": "¿Techos?"})

        assert response.json() == {"response": "Bueno"}
        service.chat.assert_called_once_with(DOC_ID, "¿Techos?")

    def test_missing_message_is_rejected(self) -> None:
        client, _service = _make_client()
        assert client.post(f"/documents/{DOC_ID}/chat", json={}).status_code == 422


class TestViewAndDelete:
    def test_view_streams_pdf(self) -> None:
        client, service = _make_client()
        service.view.return_value = (b"%PDF-data", "inspección norte.pdf")

        response = client.get(f"/documents/{DOC_ID}/view")

        assert response.status_code == 200
        assert response.content == b"%PDF-data"
        assert response.headers["content-type"] == "application/pdf"
        assert "filename*=UTF-8''inspecci%C3%B3n%20norte.pdf" in response.headers[
            "content-disposition"
        ]

    def test_view_missing_blob_is_404(self) -> None:
        client, service = _make_client()
        service.view.side_effect = BlobNotFoundError("gone")

        assert client.get(f"/documents/{DOC_ID}/view").status_code == 404

    def test_delete(self) -> None:
        client, service = _make_client()

        response = client.delete(f"/documents/{DOC_ID}")

        assert response.json() == {"message": "Documento eliminado correctamente"}
        service.delete.assert_called_once_with(DOC_ID)


class TestErrorMapping:
    def test_upstream_failure_is_502(self) -> None:
        client, service = _make_client()
        service.get_analysis.side_effect = AiNetworkError("timeout")

        response = client.post(f"/documents/{DOC_ID}/analyze")

        assert response.status_code == 502
        assert "timeout" not in response.text

    @pytest.mark.parametrize("exc", [RuntimeError("secret detail"), KeyError("k")])
    def test_unexpected_error_is_500_without_details(self, exc: Exception) -> None:
        client, service = _make_client(raise_server_exceptions=False)
        service.get_document.side_effect = exc

        response = client.get(f"/documents/{DOC_ID}")

        assert response.status_code == 500
        assert response.json()["error"] == "Error interno del servidor"
        assert "secret detail" not in response.text
