from ledger.config.settings import Settings
from ledger.pdf.base import BaseDocumentStamper
from ledger.pdf.pymupdf_stamper import PyMuPdfStamper


class DocumentStamperFactory:
    """Creates the correct document stamper based on settings."""

    ADAPTERS: dict[str, type[PyMuPdfStamper]] = {
        "pymupdf": PyMuPdfStamper,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStamper:
        engine = settings.stamp_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown stamp engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(batch_size=settings.stamp_batch_size, tz=settings.tz)
