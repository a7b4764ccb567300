import pytesseract
from PIL import Image

from docshield.ocr.base import BaseOcrEngine
from docshield.ocr.exceptions import OcrError


class TesseractAdapter(BaseOcrEngine):
    """Recognizes text with the Tesseract binary through pytesseract."""

    def __init__(self, *, languages: str = "eng", tesseract_cmd: str = "") -> None:
        self._languages = languages
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: Image.Image) -> str:
        try:
            return pytesseract.image_to_string(image, lang=self._languages)
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"tesseract recognition failed: {exc}") from exc
