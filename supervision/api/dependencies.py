from fastapi import Request

from supervision.service.document_service import DocumentService


def get_document_service(request: Request) -> DocumentService:
    """Return the service wired in the application lifespan."""
    return request.app.state.document_service
