from supervision.database.repositories.documents_repository import DocumentsRepository
from supervision.logging.logger import Log
from supervision.processor.models import DocumentStatus
from supervision.processor.processor import Processor


class JobRunner:
    """Run one background job and keep its failures inside the worker."""

    def __init__(self, processor: Processor, doc_repo: DocumentsRepository) -> None:
        self._processor = processor
        self._doc_repo = doc_repo

    def run(self, document_id: str) -> bool:
        """Process a document. Returns True when the pipeline completed.

        The completed-status check is advisory: two jobs for the same id that
        start before either writes can both run.
        """
        try:
            document = self._doc_repo.find_by_id(document_id)
            if document.status is DocumentStatus.COMPLETED:
                Log.info(f"Document {document_id} already completed, skipping")
                return False
            self._processor.process(document_id)
            Log.info(f"Document {document_id} processed successfully")
            return True
        except Exception as exc:
            Log.error(f"Processing of document {document_id} failed: {exc}")
            return False
