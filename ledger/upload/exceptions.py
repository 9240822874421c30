class UploadError(Exception):
    """Base exception for upload workflow errors."""


class UploadInProgressError(UploadError):
    """Raised when a session starts an upload while its previous one is running."""


class RecordNumberExhaustedError(UploadError):
    """Raised when every attempt to claim a free record number collided."""
