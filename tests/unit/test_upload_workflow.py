from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from ledger.database.repositories.documents_repository import DocumentsRepository
from ledger.pdf.base import BaseDocumentStamper
from ledger.pdf.exceptions import DocumentParseError
from ledger.records.exceptions import RecordNumberConflictError
from ledger.records.models import DocumentRecord, NewDocument
from ledger.storage.document_storage import LocalDocumentStorage, document_file_path
from ledger.upload.guard import UploadGuard
from ledger.upload.models import UploadRequest
from ledger.upload.workflow import UploadWorkflow, build_workflow


def _make_request(**overrides: object) -> UploadRequest:
    values: dict[str, object] = {
        "session_id": "session-a",
        "user_id": "user-1",
        "file_name": "deed.pdf",
        "file_bytes": b"%PDF-raw",
        "title": "Deed",
        "submitter_name": "Jane Doe",
        "is_public": True,
    }
    values.update(overrides)
    return UploadRequest(**values)  # type: ignore[arg-type]


def _record_from(document: NewDocument, record_number: str, created_at: datetime) -> DocumentRecord:
    return DocumentRecord(
        id=11,
        record_number=record_number,
        title=document.title,
        submitter_name=document.submitter_name,
        user_id=document.user_id,
        file_name=document.file_name,
        file_path=document.file_path,
        mime_type=document.mime_type,
        is_public=document.is_public,
        created_at=created_at,
        client_name=document.client_name,
        trustee_id=document.trustee_id,
        trustee_name=document.trustee_name,
        folder_id=document.folder_id,
    )


def _make_workflow(
    max_attempts: int = 3,
    guard: UploadGuard | None = None,
) -> tuple[UploadWorkflow, MagicMock, MagicMock, MagicMock]:
    """Create an UploadWorkflow with mocked stamper, repository and storage."""
    stamper = MagicMock(spec=BaseDocumentStamper)
    stamper.stamp.return_value = b"%PDF-stamped"
    doc_repo = MagicMock(spec=DocumentsRepository)
    doc_repo.last_sequence_for_day.return_value = 0
    doc_repo.insert.side_effect = _record_from
    storage = MagicMock(spec=LocalDocumentStorage)
    storage.path_for.side_effect = document_file_path
    settings = MagicMock(max_record_number_attempts=max_attempts)
    workflow = UploadWorkflow(
        stamper=stamper,
        doc_repo=doc_repo,
        storage=storage,
        guard=guard if guard is not None else UploadGuard(),
        settings=settings,
        tz=timezone.utc,
    )
    return workflow, stamper, doc_repo, storage


class TestSuccessfulUpload:
    def test_returns_recorded_document(self) -> None:
        workflow, _stamper, _repo, _storage = _make_workflow()

        result = workflow.upload(_make_request())

        assert result.success is True
        assert result.error is None
        assert result.document is not None
        assert result.document.record_number.endswith("-0001")
        assert result.document.title == "Deed"
        assert result.document.is_public is True

    def test_stores_stamped_bytes(self) -> None:
        workflow, _stamper, _repo, storage = _make_workflow()

        result = workflow.upload(_make_request())

        assert result.document is not None
        storage.save.assert_called_once_with(result.document.file_path, b"%PDF-stamped")

    def test_stamp_and_record_number_share_one_timestamp(self) -> None:
        workflow, stamper, doc_repo, _storage = _make_workflow()

        workflow.upload(_make_request())

        options = stamper.stamp.call_args.args[1]
        _document, record_number, created_at = doc_repo.insert.call_args.args
        assert options.stamped_at == created_at
        assert record_number.startswith(f"SR-{created_at:%Y%m%d}-")
        doc_repo.last_sequence_for_day.assert_called_once_with(created_at.date())

    def test_sequence_follows_last_issued_sequence(self) -> None:
        workflow, _stamper, doc_repo, _storage = _make_workflow()
        doc_repo.last_sequence_for_day.return_value = 41

        result = workflow.upload(_make_request())

        assert result.document is not None
        assert result.document.record_number.endswith("-0042")

    def test_title_defaults_to_file_stem(self) -> None:
        workflow, _stamper, _repo, _storage = _make_workflow()

        result = workflow.upload(_make_request(title="  ", file_name="lease-2025.pdf"))

        assert result.document is not None
        assert result.document.title == "lease-2025"

    def test_non_pdf_is_stored_unstamped(self) -> None:
        workflow, stamper, _repo, storage = _make_workflow()

        result = workflow.upload(
            _make_request(file_name="photo.png", file_bytes=b"PNG", mime_type="image/png")
        )

        assert result.success is True
        stamper.stamp.assert_not_called()
        assert storage.save.call_args.args[1] == b"PNG"


class TestTrusteeUpload:
    def test_submitter_name_is_composed_before_stamping(self) -> None:
        workflow, stamper, doc_repo, _storage = _make_workflow()

        workflow.upload(
            _make_request(
                submitter_name=None,
                is_trustee_upload=True,
                trustee_id="t-1",
                trustee_name="Acme Co",
                client_name="John Smith",
                folder_id=7,
            )
        )

        options = stamper.stamp.call_args.args[1]
        document = doc_repo.insert.call_args.args[0]
        assert options.submitter_name == "Acme Co on behalf of John Smith"
        assert document.submitter_name == "Acme Co on behalf of John Smith"
        assert document.client_name == "John Smith"
        assert document.trustee_id == "t-1"
        assert document.folder_id == 7

    def test_trustee_without_client_is_recorded_under_trustee_name(self) -> None:
        workflow, _stamper, doc_repo, _storage = _make_workflow()

        workflow.upload(_make_request(submitter_name=None, trustee_name="Acme Co"))

        assert doc_repo.insert.call_args.args[0].submitter_name == "Acme Co"


class TestRecordNumberConflicts:
    def test_retries_with_fresh_sequence(self) -> None:
        workflow, _stamper, doc_repo, _storage = _make_workflow(max_attempts=3)
        doc_repo.last_sequence_for_day.side_effect = [0, 1]

        def insert(document: NewDocument, record_number: str, created_at: datetime) -> DocumentRecord:
            if record_number.endswith("-0001"):
                raise RecordNumberConflictError("taken")
            return _record_from(document, record_number, created_at)

        doc_repo.insert.side_effect = insert

        result = workflow.upload(_make_request())

        assert result.success is True
        assert result.document is not None
        assert result.document.record_number.endswith("-0002")
        assert doc_repo.insert.call_count == 2

    def test_gap_left_by_deleted_record_is_not_reused(self) -> None:
        workflow, _stamper, doc_repo, _storage = _make_workflow(max_attempts=3)
        taken = {"0002", "0003"}
        doc_repo.last_sequence_for_day.side_effect = lambda on: max(int(seq) for seq in taken)

        def insert(document: NewDocument, record_number: str, created_at: datetime) -> DocumentRecord:
            sequence = record_number.rsplit("-", 1)[1]
            if sequence in taken:
                raise RecordNumberConflictError("taken")
            taken.add(sequence)
            return _record_from(document, record_number, created_at)

        doc_repo.insert.side_effect = insert

        result = workflow.upload(_make_request())

        assert result.success is True
        assert result.document is not None
        assert result.document.record_number.endswith("-0004")
        assert doc_repo.insert.call_count == 1

    def test_gives_up_after_max_attempts(self) -> None:
        workflow, _stamper, doc_repo, storage = _make_workflow(max_attempts=2)
        doc_repo.insert.side_effect = RecordNumberConflictError("taken")

        result = workflow.upload(_make_request())

        assert result.success is False
        assert result.error == "No free record number after 2 attempts"
        assert doc_repo.insert.call_count == 2
        storage.save.assert_not_called()


class TestFailures:
    def test_parse_error_is_reported(self) -> None:
        workflow, stamper, doc_repo, storage = _make_workflow()
        stamper.stamp.side_effect = DocumentParseError("not a pdf")

        result = workflow.upload(_make_request())

        assert result.success is False
        assert result.error == "not a pdf"
        doc_repo.insert.assert_not_called()
        storage.save.assert_not_called()

    def test_storage_failure_removes_record(self) -> None:
        workflow, _stamper, doc_repo, storage = _make_workflow()
        storage.save.side_effect = OSError("disk full")

        result = workflow.upload(_make_request())

        assert result.success is False
        assert result.error == "disk full"
        doc_repo.delete.assert_called_once_with(11)

    def test_failed_record_removal_keeps_storage_error(self) -> None:
        workflow, _stamper, doc_repo, storage = _make_workflow()
        storage.save.side_effect = OSError("disk full")
        doc_repo.delete.side_effect = RuntimeError("connection lost")

        result = workflow.upload(_make_request())

        assert result.success is False
        assert result.error == "disk full"
        doc_repo.delete.assert_called_once_with(11)

    def test_missing_title_and_file_name_is_rejected(self) -> None:
        workflow, stamper, _repo, _storage = _make_workflow()

        result = workflow.upload(_make_request(title="", file_name=""))

        assert result.success is False
        assert result.error is not None
        assert "title" in result.error
        stamper.stamp.assert_not_called()


class TestSessionGuard:
    def test_rejects_upload_while_session_busy(self) -> None:
        guard = UploadGuard()
        workflow, stamper, _repo, _storage = _make_workflow(guard=guard)
        guard.acquire("session-a")

        result = workflow.upload(_make_request())

        assert result.success is False
        assert result.error == "Upload already in progress"
        stamper.stamp.assert_not_called()

    def test_other_session_proceeds(self) -> None:
        guard = UploadGuard()
        workflow, _stamper, _repo, _storage = _make_workflow(guard=guard)
        guard.acquire("session-b")

        result = workflow.upload(_make_request(session_id="session-a"))

        assert result.success is True

    def test_session_released_after_failure(self) -> None:
        guard = UploadGuard()
        workflow, stamper, _repo, _storage = _make_workflow(guard=guard)
        stamper.stamp.side_effect = DocumentParseError("not a pdf")

        workflow.upload(_make_request())

        assert guard.is_active("session-a") is False


class TestBuildWorkflow:
    def test_wires_configured_adapters(self, tmp_path: Path) -> None:
        settings = MagicMock(
            stamp_engine="pymupdf",
            stamp_batch_size=10,
            storage_disk="local",
            files_root=str(tmp_path),
            tz=timezone.utc,
        )

        with patch("ledger.upload.workflow.DocumentsRepository") as repo_cls:
            workflow = build_workflow(settings)

        assert isinstance(workflow, UploadWorkflow)
        repo_cls.assert_called_once_with()


class TestStoragePath:
    def test_non_pdf_keeps_its_suffix(self) -> None:
        workflow, _stamper, _repo, _storage = _make_workflow()

        result = workflow.upload(
            _make_request(file_name="Photo.PNG", file_bytes=b"PNG", mime_type="image/png")
        )

        assert result.document is not None
        assert result.document.file_path.endswith(f"{result.document.record_number}.png")
