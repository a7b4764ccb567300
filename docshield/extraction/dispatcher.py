"""Format dispatch: picks a decode strategy per document and builds an ExtractionResult."""

import asyncio
from pathlib import PurePath
from typing import ClassVar

from docshield.config.settings import Settings
from docshield.extraction.docx_adapter import DocxAdapter
from docshield.extraction.models import (
    Document,
    DocumentKind,
    ExtractionResult,
    PageSource,
    PageUnit,
)
from docshield.extraction.xlsx_adapter import XlsxAdapter
from docshield.logging.logger import Log
from docshield.ocr.fallback import OcrFallback, page_block
from docshield.ocr.tesseract_adapter import TesseractAdapter
from docshield.pdf.base import BasePdfExtractor
from docshield.pdf.factory import PdfExtractorFactory
from docshield.pdf.form_fields import FormFieldExtractor


class FormatDispatcher:
    """Routes a document to the PDF, image, flow, tabular or plain-text pipeline.

    Decode failures in the PDF, flow and tabular pipelines surface as
    DecodeError; they are never retried as plain text.
    """

    PDF_MIME_TYPES: ClassVar[frozenset[str]] = frozenset({"application/pdf"})
    FLOW_MIME_TYPES: ClassVar[frozenset[str]] = frozenset({
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    })
    TABULAR_MIME_TYPES: ClassVar[frozenset[str]] = frozenset({
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    })

    PDF_EXTENSIONS: ClassVar[frozenset[str]] = frozenset({".pdf"})
    IMAGE_EXTENSIONS: ClassVar[frozenset[str]] = frozenset(
        {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tif", ".tiff"}
    )
    FLOW_EXTENSIONS: ClassVar[frozenset[str]] = frozenset({".docx"})
    TABULAR_EXTENSIONS: ClassVar[frozenset[str]] = frozenset({".xlsx", ".xls"})

    def __init__(
        self,
        *,
        pdf_extractor: BasePdfExtractor,
        form_extractor: FormFieldExtractor,
        ocr_fallback: OcrFallback,
        docx_adapter: DocxAdapter | None = None,
        xlsx_adapter: XlsxAdapter | None = None,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._form_extractor = form_extractor
        self._ocr_fallback = ocr_fallback
        self._docx_adapter = docx_adapter or DocxAdapter()
        self._xlsx_adapter = xlsx_adapter or XlsxAdapter()

    @classmethod
    def detect_kind(cls, document: Document) -> DocumentKind:
        mime = (document.declared_mime_type or "").lower().split(";")[0].strip()
        ext = PurePath(document.name or "").suffix.lower()

        if mime in cls.PDF_MIME_TYPES or ext in cls.PDF_EXTENSIONS:
            return DocumentKind.PDF
        if mime.startswith("image/") or ext in cls.IMAGE_EXTENSIONS:
            return DocumentKind.IMAGE
        if mime in cls.FLOW_MIME_TYPES or ext in cls.FLOW_EXTENSIONS:
            return DocumentKind.FLOW
        if mime in cls.TABULAR_MIME_TYPES or ext in cls.TABULAR_EXTENSIONS:
            return DocumentKind.TABULAR
        return DocumentKind.TEXT

    async def extract(self, document: Document) -> ExtractionResult:
        """Decode *document* into a context header, body text and page units.

        Raises:
            DecodeError: if a PDF, DOCX or spreadsheet cannot be decoded.
        """
        kind = self.detect_kind(document)
        Log.info(
            f"Extracting {document.name!r} ({document.declared_mime_type or 'unknown'}) "
            f"as {kind.value}, {len(document.raw_bytes)} bytes"
        )

        if kind is DocumentKind.PDF:
            result = await self._extract_pdf(document.raw_bytes)
        elif kind is DocumentKind.IMAGE:
            result = await self._ocr_fallback.recognize_image(document.raw_bytes)
        elif kind is DocumentKind.FLOW:
            result = await self._extract_flow(document.raw_bytes)
        elif kind is DocumentKind.TABULAR:
            result = await self._extract_tabular(document.raw_bytes)
        else:
            result = ExtractionResult(body_text=document.raw_bytes.decode("utf-8", errors="replace"))

        Log.info(
            f"Extracted {len(result.text)} chars from {document.name!r} "
            f"({len(result.page_units)} page units)"
        )
        return result

    async def _extract_pdf(self, pdf_bytes: bytes) -> ExtractionResult:
        header = await asyncio.to_thread(self._form_extractor.extract_header, pdf_bytes)
        pages = await asyncio.to_thread(self._pdf_extractor.extract_pages, pdf_bytes)

        result = ExtractionResult(context_header=header)
        blocks: list[str] = []
        for index, raw_text in enumerate(pages):
            text = raw_text.strip()
            if text:
                result.page_units.append(PageUnit(index=index, text=text, source=PageSource.TEXT))
                blocks.append(page_block(index, text))
            else:
                result.page_units.append(
                    PageUnit(index=index, text="", source=PageSource.UNSCANNED)
                )
                blocks.append(f"[Page {index + 1}: no extractable text]")
        result.body_text = "\n\n".join(blocks)

        return await self._ocr_fallback.apply(pdf_bytes, result)

    async def _extract_flow(self, docx_bytes: bytes) -> ExtractionResult:
        text = await asyncio.to_thread(self._docx_adapter.extract, docx_bytes)
        return ExtractionResult(body_text=text)

    async def _extract_tabular(self, workbook_bytes: bytes) -> ExtractionResult:
        sheets = await asyncio.to_thread(self._xlsx_adapter.extract_sheets, workbook_bytes)
        blocks = [f"[Sheet: {name}]\n{text}" for name, text in sheets]
        return ExtractionResult(body_text="\n\n".join(blocks))


def build_dispatcher(settings: Settings) -> FormatDispatcher:
    """Build a FormatDispatcher with the configured adapters."""
    engine = TesseractAdapter(
        languages=settings.ocr_languages,
        tesseract_cmd=settings.tesseract_cmd,
    )
    return FormatDispatcher(
        pdf_extractor=PdfExtractorFactory.create(settings.pdf_engine),
        form_extractor=FormFieldExtractor(
            checked_label=settings.form_checkbox_checked_label,
            unchecked_label=settings.form_checkbox_unchecked_label,
            multi_value_separator=settings.form_multi_value_separator,
        ),
        ocr_fallback=OcrFallback(
            engine,
            enabled=settings.ocr_enabled,
            min_text_chars=settings.ocr_min_text_chars,
            render_scale=settings.ocr_render_scale,
            image_max_dim=settings.ocr_image_max_dim,
        ),
    )
