from datetime import datetime, tzinfo

import pymupdf

from ledger.logging.logger import Log
from ledger.pdf.base import BaseDocumentStamper
from ledger.pdf.exceptions import DocumentParseError, PageStampError
from ledger.pdf.models import StampOptions
from ledger.pdf.stamp_text import format_stamp_timestamp, resolve_attribution

STAMP_FONT = "hebo"  # Helvetica-Bold, one of the base-14 fonts
STAMP_COLOR = (0.8, 0.0, 0.0)
LABEL_FONT_SIZE = 11
VALUE_FONT_SIZE = 10

# Anchor of the stamp block, in points from the bottom-right corner.
STAMP_RIGHT_OFFSET = 250
STAMP_BASELINE = 35


class PyMuPdfStamper(BaseDocumentStamper):
    """Stamps PDFs using PyMuPDF."""

    DEFAULT_BATCH_SIZE = 10

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        tz: tzinfo | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._batch_size = batch_size
        self._tz = tz

    def stamp(self, pdf_bytes: bytes, options: StampOptions) -> bytes:
        attribution = resolve_attribution(
            options.submitter_name,
            is_trustee_upload=options.is_trustee_upload,
            trustee_name=options.trustee_name,
            client_name=options.client_name,
        )
        moment = options.stamped_at or datetime.now(self._tz)
        lines = _stamp_lines(attribution, format_stamp_timestamp(moment))

        with self._open(pdf_bytes) as doc:
            total = doc.page_count
            Log.info(f"Stamping {total} pages with '{attribution}'")
            stamped = 0
            for batch_start in range(0, total, self._batch_size):
                batch_end = min(batch_start + self._batch_size, total)
                Log.debug(f"Stamping pages {batch_start + 1} to {batch_end}")
                for index in range(batch_start, batch_end):
                    try:
                        _stamp_page(doc[index], lines)
                        stamped += 1
                    except Exception as exc:
                        Log.warning(f"Failed to stamp page {index + 1}: {exc}")

            if stamped == 0:
                raise PageStampError(f"None of the {total} pages could be stamped")
            if stamped < total:
                Log.warning(f"Stamped {stamped} of {total} pages")

            stamped_bytes = doc.tobytes(encryption=pymupdf.PDF_ENCRYPT_NONE)

        Log.info(f"Stamped PDF saved, size: {len(stamped_bytes)} bytes")
        return stamped_bytes

    def _open(self, pdf_bytes: bytes) -> pymupdf.Document:
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise DocumentParseError(f"pymupdf could not open document: {exc}") from exc

        # Owner-password-only files open with an empty user password.
        if doc.needs_pass and not doc.authenticate(""):
            doc.close()
            raise DocumentParseError("Document is password protected")
        if doc.page_count == 0:
            doc.close()
            raise DocumentParseError("Document has no pages")
        return doc


def _stamp_lines(attribution: str, timestamp: str) -> list[tuple[str, int, int]]:
    """Return (text, rise above baseline, font size) for each stamp line."""
    return [
        ("Recorded by:", 25, LABEL_FONT_SIZE),
        (attribution, 10, VALUE_FONT_SIZE),
        ("Recorded on:", -5, LABEL_FONT_SIZE),
        (timestamp, -20, VALUE_FONT_SIZE),
    ]


def _stamp_page(page: pymupdf.Page, lines: list[tuple[str, int, int]]) -> None:
    # page.rect is the visual (rotated) page; drawing happens in unrotated space.
    rect = page.rect
    x = max(rect.width - STAMP_RIGHT_OFFSET, 0)
    for text, rise, font_size in lines:
        point = pymupdf.Point(x, rect.height - (STAMP_BASELINE + rise))
        page.insert_text(
            point * page.derotation_matrix,
            text,
            fontsize=font_size,
            fontname=STAMP_FONT,
            color=STAMP_COLOR,
            rotate=page.rotation,
        )
