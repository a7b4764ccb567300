import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from docshield.config.settings import Settings
from docshield.extraction.dispatcher import FormatDispatcher, build_dispatcher
from docshield.extraction.docx_adapter import DocxAdapter
from docshield.extraction.exceptions import DecodeError
from docshield.extraction.models import Document, DocumentKind, PageSource
from docshield.extraction.xlsx_adapter import XlsxAdapter
from docshield.ocr.base import BaseOcrEngine
from docshield.ocr.fallback import OcrFallback
from docshield.pdf.form_fields import FormFieldExtractor
from docshield.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docshield.pdf.pymupdf_adapter import PyMuPdfAdapter


def _make_dispatcher(
    ocr_text: str = "Scanned Mario Rossi",
    ocr_enabled: bool = True,
) -> tuple[FormatDispatcher, MagicMock]:
    engine = MagicMock(spec=BaseOcrEngine)
    engine.recognize.return_value = ocr_text
    dispatcher = FormatDispatcher(
        pdf_extractor=PdfPlumberAdapter(),
        form_extractor=FormFieldExtractor(),
        ocr_fallback=OcrFallback(engine, enabled=ocr_enabled, render_scale=1.0),
    )
    return dispatcher, engine


def _doc(name: str, mime: str, data: bytes = b"") -> Document:
    return Document(name=name, declared_mime_type=mime, raw_bytes=data)


class TestDetectKind:
    @pytest.mark.parametrize(
        ("name", "mime", "kind"),
        [
            ("report.pdf", "", DocumentKind.PDF),
            ("upload", "application/pdf", DocumentKind.PDF),
            ("scan.JPG", "", DocumentKind.IMAGE),
            ("upload", "image/webp", DocumentKind.IMAGE),
            ("letter.docx", "", DocumentKind.FLOW),
            (
                "upload",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                DocumentKind.FLOW,
            ),
            ("book.xlsx", "", DocumentKind.TABULAR),
            ("legacy.xls", "application/vnd.ms-excel", DocumentKind.TABULAR),
            ("notes.txt", "text/plain", DocumentKind.TEXT),
            ("", "", DocumentKind.TEXT),
        ],
    )
    def test_detects_kind(self, name: str, mime: str, kind: DocumentKind) -> None:
        assert FormatDispatcher.detect_kind(_doc(name, mime)) is kind

    def test_mime_parameters_are_ignored(self) -> None:
        doc = _doc("upload", "application/pdf; charset=binary")
        assert FormatDispatcher.detect_kind(doc) is DocumentKind.PDF


class TestExtractPdf:
    @pytest.mark.asyncio
    async def test_labels_pages(self, multi_page_pdf_bytes: bytes) -> None:
        dispatcher, _engine = _make_dispatcher(ocr_enabled=False)
        result = await dispatcher.extract(_doc("r.pdf", "application/pdf", multi_page_pdf_bytes))

        assert result.body_text.startswith("[Page 1]\nPage one content")
        assert "\n\n[Page 2]\nPage two content" in result.body_text
        assert [u.source for u in result.page_units] == [PageSource.TEXT, PageSource.TEXT]

    @pytest.mark.asyncio
    async def test_blank_page_is_marked(self, empty_pdf_bytes: bytes) -> None:
        dispatcher, _engine = _make_dispatcher(ocr_enabled=False)
        result = await dispatcher.extract(_doc("r.pdf", "application/pdf", empty_pdf_bytes))

        assert result.body_text == "[Page 1: no extractable text]"
        assert result.page_units[0].source is PageSource.UNSCANNED

    @pytest.mark.asyncio
    async def test_form_header_precedes_body(self, form_pdf_bytes: bytes) -> None:
        dispatcher, _engine = _make_dispatcher(ocr_enabled=False)
        result = await dispatcher.extract(_doc("f.pdf", "application/pdf", form_pdf_bytes))

        assert result.text.startswith("--- FORM DATA ---\nSurname: Rossi\n")
        assert "mario@example.com" in result.body_text

    @pytest.mark.asyncio
    async def test_sparse_pdf_runs_ocr(self, sparse_pdf_bytes: bytes) -> None:
        dispatcher, engine = _make_dispatcher()
        result = await dispatcher.extract(_doc("s.pdf", "application/pdf", sparse_pdf_bytes))

        engine.recognize.assert_called_once()
        assert "[Page 1 (OCR)]\nScanned Mario Rossi" in result.body_text

    @pytest.mark.asyncio
    async def test_dense_pdf_skips_ocr(self, dense_pdf_bytes: bytes) -> None:
        dispatcher, engine = _make_dispatcher()
        await dispatcher.extract(_doc("d.pdf", "application/pdf", dense_pdf_bytes))

        engine.recognize.assert_not_called()

    @pytest.mark.asyncio
    async def test_corrupt_pdf_raises_decode_error(self) -> None:
        dispatcher, _engine = _make_dispatcher()
        with pytest.raises(DecodeError):
            await dispatcher.extract(_doc("bad.pdf", "application/pdf", b"not a pdf"))


class TestExtractOtherFormats:
    @pytest.mark.asyncio
    async def test_docx_keeps_body_order(self, docx_bytes: bytes) -> None:
        dispatcher, _engine = _make_dispatcher()
        result = await dispatcher.extract(_doc("letter.docx", "", docx_bytes))

        assert result.body_text.splitlines() == [
            "Patient: Mario Rossi",
            "Phone\t+39 333 1234567",
            "City\tTorino",
            "End of record",
        ]

    @pytest.mark.asyncio
    async def test_xlsx_labels_sheets_and_skips_empty(self, xlsx_bytes: bytes) -> None:
        dispatcher, _engine = _make_dispatcher()
        result = await dispatcher.extract(_doc("book.xlsx", "", xlsx_bytes))

        assert result.body_text.startswith("[Sheet: Contacts]\nName\tEmail\n")
        assert "Mario Rossi\tmario@example.com" in result.body_text
        assert "[Sheet: Empty]" not in result.body_text

    @pytest.mark.asyncio
    async def test_corrupt_docx_is_not_decoded_as_text(self) -> None:
        dispatcher, _engine = _make_dispatcher()
        with pytest.raises(DecodeError):
            await dispatcher.extract(_doc("letter.docx", "", b"plain words"))

    @pytest.mark.asyncio
    async def test_corrupt_xlsx_is_not_decoded_as_text(self) -> None:
        dispatcher, _engine = _make_dispatcher()
        with pytest.raises(DecodeError):
            await dispatcher.extract(_doc("book.xlsx", "", b"plain words"))

    @pytest.mark.asyncio
    async def test_image_goes_through_ocr(self) -> None:
        buf = io.BytesIO()
        Image.new("RGB", (200, 100), "white").save(buf, format="PNG")
        dispatcher, engine = _make_dispatcher()
        result = await dispatcher.extract(_doc("scan.png", "image/png", buf.getvalue()))

        engine.recognize.assert_called_once()
        assert result.body_text == "[Page 1 (OCR)]\nScanned Mario Rossi"

    @pytest.mark.asyncio
    async def test_text_fallback_replaces_invalid_bytes(self) -> None:
        dispatcher, _engine = _make_dispatcher()
        result = await dispatcher.extract(_doc("notes.txt", "", b"caf\xc3\xa9 \xff ok"))

        assert result.body_text == "caf\u00e9 \ufffd ok"
        assert result.context_header == ""


class TestBuildDispatcher:
    def test_uses_configured_pdf_engine(self, settings: Settings) -> None:
        dispatcher = build_dispatcher(settings.model_copy(update={"pdf_engine": "pymupdf"}))
        assert isinstance(dispatcher._pdf_extractor, PyMuPdfAdapter)
        assert isinstance(dispatcher._docx_adapter, DocxAdapter)
        assert isinstance(dispatcher._xlsx_adapter, XlsxAdapter)
