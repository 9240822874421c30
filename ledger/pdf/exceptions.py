class StampError(Exception):
    """Base exception for all stamping errors."""


class DocumentParseError(StampError):
    """Raised when the input bytes cannot be opened as a PDF document."""


class PageStampError(StampError):
    """Raised when no page of the document could be stamped."""
