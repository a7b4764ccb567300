"""OCR fallback for documents without a usable text layer.

Only the first page of a PDF is probed. This keeps the cost of a scanned
upload bounded to one render and one recognition; text on later pages of a
scanned document is not recovered.
"""

import asyncio
import io

from PIL import Image

from docshield.extraction.models import ExtractionResult, PageSource, PageUnit
from docshield.logging.logger import Log
from docshield.ocr.base import BaseOcrEngine
from docshield.ocr.exceptions import OcrError
from docshield.pdf.renderer import render_page

_PROBE_PAGE_INDEX = 0


def text_density(result: ExtractionResult) -> int:
    """Count non-whitespace characters extracted from page units (labels excluded)."""
    return sum(len("".join(unit.text.split())) for unit in result.page_units)


def page_block(index: int, text: str, *, ocr: bool = False) -> str:
    suffix = " (OCR)" if ocr else ""
    return f"[Page {index + 1}{suffix}]\n{text}"


def append_block(result: ExtractionResult, block: str) -> None:
    result.body_text = f"{result.body_text}\n\n{block}" if result.body_text else block


def append_diagnostic(result: ExtractionResult, reason: str) -> None:
    result.context_header += f"[OCR unavailable: {reason}]\n"


class OcrFallback:
    """Recovers text from rasters when the text layer is too thin."""

    def __init__(
        self,
        engine: BaseOcrEngine,
        *,
        enabled: bool = True,
        min_text_chars: int = 50,
        render_scale: float = 2.0,
        image_max_dim: int = 1600,
    ) -> None:
        self._engine = engine
        self._enabled = enabled
        self._min_text_chars = min_text_chars
        self._render_scale = render_scale
        self._image_max_dim = image_max_dim

    def should_run(self, result: ExtractionResult) -> bool:
        if not self._enabled or not result.page_units:
            return False
        return text_density(result) < self._min_text_chars

    async def apply(self, pdf_bytes: bytes, result: ExtractionResult) -> ExtractionResult:
        """Probe the first page with OCR if the extracted text is too sparse."""
        if not self.should_run(result):
            return result

        Log.info(
            f"Text density {text_density(result)} below {self._min_text_chars}, "
            f"running OCR on page {_PROBE_PAGE_INDEX + 1}"
        )
        try:
            image = await asyncio.to_thread(
                render_page, pdf_bytes, _PROBE_PAGE_INDEX, self._render_scale
            )
            text = await self._recognize(image)
        except OcrError as exc:
            Log.warning(f"OCR fallback failed: {exc}")
            append_diagnostic(result, str(exc))
            return result

        append_block(result, page_block(_PROBE_PAGE_INDEX, text, ocr=True))
        result.page_units.append(
            PageUnit(index=_PROBE_PAGE_INDEX, text=text, source=PageSource.OCR)
        )
        Log.info(f"OCR recovered {len(text)} chars from page {_PROBE_PAGE_INDEX + 1}")
        return result

    async def recognize_image(self, image_bytes: bytes) -> ExtractionResult:
        """OCR an uploaded picture as a single page."""
        result = ExtractionResult()
        if not self._enabled:
            append_diagnostic(result, "OCR disabled")
            return result
        try:
            image = await asyncio.to_thread(self._load_image, image_bytes)
            text = await self._recognize(image)
        except OcrError as exc:
            Log.warning(f"Image OCR failed: {exc}")
            append_diagnostic(result, str(exc))
            return result

        result.body_text = page_block(0, text, ocr=True)
        result.page_units.append(PageUnit(index=0, text=text, source=PageSource.OCR))
        return result

    async def _recognize(self, image: Image.Image) -> str:
        text = (await asyncio.to_thread(self._engine.recognize, image)).strip()
        if not text:
            raise OcrError("no text recognized")
        return text

    def _load_image(self, image_bytes: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except Exception as exc:
            raise OcrError(f"Image decode failed: {exc}") from exc
        image = image.convert("RGB")
        image.thumbnail((self._image_max_dim, self._image_max_dim))
        return image
