from ledger.pdf.base import BaseDocumentStamper
from ledger.pdf.factory import DocumentStamperFactory
from ledger.pdf.models import StampOptions
from ledger.pdf.pymupdf_stamper import PyMuPdfStamper

__all__ = ["BaseDocumentStamper", "DocumentStamperFactory", "PyMuPdfStamper", "StampOptions"]
