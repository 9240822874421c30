from dataclasses import dataclass, field
from pathlib import PurePath

from ledger.records.models import DocumentRecord

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class UploadRequest:
    """A file submitted for recording, with its submitter metadata."""

    session_id: str
    user_id: str
    file_name: str
    file_bytes: bytes = field(repr=False)
    mime_type: str = PDF_MIME_TYPE
    title: str = ""
    submitter_name: str | None = None
    is_public: bool = False
    is_trustee_upload: bool = False
    trustee_id: str | None = None
    trustee_name: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    private_note: str | None = None
    folder_id: int | None = None

    @property
    def resolved_title(self) -> str:
        """The user-supplied title, or the file name without its extension."""
        title = self.title.strip()
        return title if title else PurePath(self.file_name).stem


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one upload: the recorded document, or the error message."""

    success: bool
    document: DocumentRecord | None = None
    error: str | None = None
