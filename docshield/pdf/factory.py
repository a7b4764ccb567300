from typing import ClassVar

from docshield.logging.logger import Log
from docshield.pdf.base import BasePdfExtractor
from docshield.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docshield.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Maps a configured engine name to a paginated text layer extractor."""

    ADAPTERS: ClassVar[dict[str, type[BasePdfExtractor]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def engines(cls) -> list[str]:
        return sorted(cls.ADAPTERS)

    @classmethod
    def create(cls, engine: str) -> BasePdfExtractor:
        key = engine.strip().lower()
        adapter_cls = cls.ADAPTERS.get(key)
        if adapter_cls is None:
            raise ValueError(f"Unknown PDF engine '{engine}'. Choose from: {cls.engines()}")
        Log.debug(f"PDF text layer engine: {key}")
        return adapter_cls()
