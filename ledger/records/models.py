from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NewDocument:
    """Everything needed to insert a document row, minus its record number."""

    title: str
    submitter_name: str
    user_id: str
    file_name: str
    file_path: str
    mime_type: str
    is_public: bool = False
    client_name: str | None = None
    client_email: str | None = None
    private_note: str | None = None
    trustee_id: str | None = None
    trustee_name: str | None = None
    folder_id: int | None = None


@dataclass(frozen=True)
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    record_number: str
    title: str
    submitter_name: str
    user_id: str
    file_name: str
    file_path: str
    mime_type: str
    is_public: bool
    created_at: datetime
    client_name: str | None = None
    client_email: str | None = None
    private_note: str | None = None
    trustee_id: str | None = None
    trustee_name: str | None = None
    folder_id: int | None = None


@dataclass(frozen=True)
class ClientFolder:
    """Represents a row from the client_folders table."""

    id: int
    name: str
    trustee_id: str
    client_email: str | None = None
    created_at: datetime | None = None
    document_count: int = 0


@dataclass(frozen=True)
class SearchParams:
    """Public search filters. Empty fields are ignored."""

    record_number: str = ""
    title: str = ""
    name: str = ""
