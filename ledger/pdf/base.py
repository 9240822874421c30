from abc import ABC, abstractmethod

from ledger.pdf.models import StampOptions


class BaseDocumentStamper(ABC):
    """Contract for all PDF stamping adapters."""

    @abstractmethod
    def stamp(self, pdf_bytes: bytes, options: StampOptions) -> bytes:
        """Overlay the attribution block on every page of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.
            options: Submitter metadata and optional stamp timestamp.

        Returns:
            Bytes of the stamped PDF, same page count as the input.

        Raises:
            DocumentParseError: if the input is not a readable PDF.
            PageStampError: if no page could be stamped.
        """
