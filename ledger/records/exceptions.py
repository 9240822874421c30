class RecordError(Exception):
    """Base exception for record persistence errors."""


class DocumentNotFoundError(RecordError):
    """Raised when a document cannot be found in the database."""


class FolderNotFoundError(RecordError):
    """Raised when a client folder cannot be found in the database."""


class RecordNumberConflictError(RecordError):
    """Raised when another document already holds the record number."""
