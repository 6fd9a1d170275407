"""Document upload, analysis and chat endpoints.

Handlers are plain functions so FastAPI runs them in its threadpool; none of
them waits on text extraction.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from supervision.api.dependencies import get_document_service
from supervision.service.document_service import AnalysisPending, DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])


class ChatRequest(BaseModel):
    message: str


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_document(
    file: UploadFile = File(...),
    title: str = Form(""),
    description: str = Form(""),
    service: DocumentService = Depends(get_document_service),
) -> JSONResponse:
    content = file.file.read()
    result = service.upload(
        content,
        filename=file.filename or "document.pdf",
        title=title,
        description=description,
    )
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=result)


@router.get("")
def list_documents(
    page: int = Query(1),
    limit: int = Query(10),
    service: DocumentService = Depends(get_document_service),
) -> dict[str, object]:
    return service.list_documents(page=page, limit=limit)


@router.get("/{document_id}")
def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> dict[str, object]:
    return service.get_document(document_id)


@router.post("/{document_id}/analyze")
def analyze_document(
    document_id: str,
    refresh: bool = Query(False),
    service: DocumentService = Depends(get_document_service),
) -> JSONResponse:
    """Return the analysis (200) or a processing notice to poll again (202)."""
    result = service.get_analysis(document_id, force_refresh=refresh)
    status_code = (
        status.HTTP_202_ACCEPTED if isinstance(result, AnalysisPending) else status.HTTP_200_OK
    )
    return JSONResponse(status_code=status_code, content=result.to_dict())


@router.post("/{document_id}/fix-analysis")
def fix_analysis(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> dict[str, object]:
    return service.fix_analysis(document_id)


@router.post("/{document_id}/chat")
def chat_with_document(
    document_id: str,
    body: ChatRequest,
    service: DocumentService = Depends(get_document_service),
) -> dict[str, str]:
    return {"response": service.chat(document_id, body.message)}


@router.get("/{document_id}/view")
def view_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Response:
    content, filename = service.view(document_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(filename)}"},
    )


@router.delete("/{document_id}")
def delete_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> dict[str, str]:
    service.delete(document_id)
    return {"message": "Documento eliminado correctamente"}
