from datetime import datetime, tzinfo
from pathlib import Path

from ledger.config.settings import Settings
from ledger.database.repositories.documents_repository import DocumentsRepository
from ledger.logging.logger import Log
from ledger.pdf.base import BaseDocumentStamper
from ledger.pdf.exceptions import StampError
from ledger.pdf.factory import DocumentStamperFactory
from ledger.pdf.models import StampOptions
from ledger.pdf.stamp_text import resolve_attribution
from ledger.records.exceptions import RecordError, RecordNumberConflictError
from ledger.records.models import DocumentRecord, NewDocument
from ledger.records.record_number import generate_record_number
from ledger.storage.document_storage import DocumentStorageFactory, LocalDocumentStorage
from ledger.storage.exceptions import StorageError
from ledger.upload.exceptions import RecordNumberExhaustedError, UploadError
from ledger.upload.guard import UploadGuard
from ledger.upload.models import PDF_MIME_TYPE, UploadRequest, UploadResult


class UploadWorkflow:
    """Records one uploaded file: stamp -> number -> persist -> store.

    Failures are logged and reported through UploadResult, never raised.
    """

    def __init__(
        self,
        stamper: BaseDocumentStamper,
        doc_repo: DocumentsRepository,
        storage: LocalDocumentStorage,
        guard: UploadGuard,
        settings: Settings,
        tz: tzinfo | None = None,
    ) -> None:
        self._stamper = stamper
        self._doc_repo = doc_repo
        self._storage = storage
        self._guard = guard
        self._settings = settings
        self._tz = tz

    def upload(self, request: UploadRequest) -> UploadResult:
        Log.info(
            f"Upload of '{request.file_name}' ({len(request.file_bytes)} bytes) "
            f"for user {request.user_id}"
        )
        try:
            with self._guard.hold(request.session_id):
                document = self._record(request)
        except (UploadError, StampError, RecordError, StorageError, OSError, ValueError) as exc:
            Log.error(f"Upload of '{request.file_name}' failed: {exc}")
            return UploadResult(success=False, error=str(exc))
        except Exception as exc:
            Log.exception(f"Upload of '{request.file_name}' failed unexpectedly: {exc}")
            return UploadResult(success=False, error=str(exc))

        Log.info(f"Recorded '{document.title}' as {document.record_number}")
        return UploadResult(success=True, document=document)

    def _record(self, request: UploadRequest) -> DocumentRecord:
        if not request.resolved_title:
            raise ValueError("Document title must not be empty")
        now = datetime.now(self._tz)
        submitter_name = resolve_attribution(
            request.submitter_name or request.trustee_name,
            is_trustee_upload=request.is_trustee_upload,
            trustee_name=request.trustee_name,
            client_name=request.client_name,
        )

        data = request.file_bytes
        if request.mime_type == PDF_MIME_TYPE:
            data = self._stamper.stamp(
                data,
                StampOptions(
                    submitter_name=submitter_name,
                    is_trustee_upload=request.is_trustee_upload,
                    trustee_name=request.trustee_name,
                    client_name=request.client_name,
                    stamped_at=now,
                ),
            )
        else:
            Log.info(f"Storing '{request.file_name}' unstamped ({request.mime_type})")

        document = self._insert(request, submitter_name, now)
        try:
            self._storage.save(document.file_path, data)
        except Exception:
            Log.error(f"Storing {document.record_number} failed, removing its record")
            try:
                self._doc_repo.delete(document.id)
            except Exception as cleanup_exc:
                Log.error(f"Removing record {document.record_number} failed: {cleanup_exc}")
            raise
        return document

    def _insert(
        self,
        request: UploadRequest,
        submitter_name: str,
        now: datetime,
    ) -> DocumentRecord:
        """Claim the next record number of the day, retrying on collisions."""
        attempts = self._settings.max_record_number_attempts
        for attempt in range(1, attempts + 1):
            last_sequence = self._doc_repo.last_sequence_for_day(now.date())
            record_number = generate_record_number(last_sequence, now.date())
            new_document = NewDocument(
                title=request.resolved_title,
                submitter_name=submitter_name,
                user_id=request.user_id,
                file_name=request.file_name,
                file_path=self._storage.path_for(
                    request.user_id, record_number, request.file_name
                ),
                mime_type=request.mime_type,
                is_public=request.is_public,
                client_name=request.client_name,
                client_email=request.client_email,
                private_note=request.private_note,
                trustee_id=request.trustee_id,
                trustee_name=request.trustee_name,
                folder_id=request.folder_id,
            )
            try:
                return self._doc_repo.insert(new_document, record_number, now)
            except RecordNumberConflictError:
                Log.warning(
                    f"Record number {record_number} taken (attempt {attempt}/{attempts})"
                )
        raise RecordNumberExhaustedError(
            f"No free record number after {attempts} attempts"
        )


def build_workflow(
    settings: Settings,
    files_root: Path | None = None,
    guard: UploadGuard | None = None,
) -> UploadWorkflow:
    """Build an UploadWorkflow with all required adapters."""
    storage = DocumentStorageFactory.create(settings)
    if files_root is not None:
        storage = LocalDocumentStorage(files_root=files_root)
    return UploadWorkflow(
        stamper=DocumentStamperFactory.create(settings),
        doc_repo=DocumentsRepository(),
        storage=storage,
        guard=guard if guard is not None else UploadGuard(),
        settings=settings,
        tz=settings.tz,
    )
