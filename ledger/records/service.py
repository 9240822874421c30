from ledger.config.settings import Settings
from ledger.database.repositories.documents_repository import DocumentsRepository
from ledger.logging.logger import Log
from ledger.records import links
from ledger.records.models import DocumentRecord, SearchParams
from ledger.storage.document_storage import DocumentStorageFactory, LocalDocumentStorage


class RecordService:
    """Read and housekeeping operations over recorded documents."""

    def __init__(
        self,
        doc_repo: DocumentsRepository,
        storage: LocalDocumentStorage,
        settings: Settings,
    ) -> None:
        self._doc_repo = doc_repo
        self._storage = storage
        self._base_url = settings.public_base_url

    def find(self, record_number: str) -> DocumentRecord:
        return self._doc_repo.find_by_record_number(record_number)

    def search(self, params: SearchParams) -> list[DocumentRecord]:
        results = self._doc_repo.search_public(params)
        Log.info(f"Public search returned {len(results)} documents")
        return results

    def dashboard(self, user_id: str) -> list[DocumentRecord]:
        return self._doc_repo.list_for_user(user_id)

    def trustee_dashboard(
        self,
        trustee_id: str,
        folder_id: int | None = None,
    ) -> list[DocumentRecord]:
        return self._doc_repo.list_for_trustee(trustee_id, folder_id=folder_id)

    def move_to_folder(self, document: DocumentRecord, folder_id: int | None) -> None:
        self._doc_repo.move_to_folder(document.id, folder_id)
        Log.info(f"Moved {document.record_number} to folder {folder_id}")

    def set_visibility(self, document: DocumentRecord, is_public: bool) -> None:
        self._doc_repo.set_visibility(document.id, is_public)
        Log.info(f"Set {document.record_number} public={is_public}")

    def delete(self, document: DocumentRecord) -> None:
        """Remove the stored file, then the row.

        A failure to remove the file is logged; the row is deleted regardless.
        """
        try:
            self._storage.delete(document.file_path)
        except OSError as exc:
            Log.error(f"Could not remove file of {document.record_number}: {exc}")
        self._doc_repo.delete(document.id)
        Log.info(f"Deleted {document.record_number}")

    def share_url(self, record_number: str) -> str:
        return links.share_url(self._base_url, record_number)

    def viewable_url(self, document: DocumentRecord) -> str:
        return links.viewable_url(self._base_url, document.file_path)


def build_record_service(settings: Settings) -> RecordService:
    return RecordService(
        doc_repo=DocumentsRepository(),
        storage=DocumentStorageFactory.create(settings),
        settings=settings,
    )
