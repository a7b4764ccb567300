import io

import pymupdf
from PIL import Image

from docshield.ocr.exceptions import OcrError


def render_page(pdf_bytes: bytes, page_index: int = 0, scale: float = 2.0) -> Image.Image:
    """Render one PDF page to an RGB raster at the given upscale factor.

    Raises:
        OcrError: if the page cannot be rendered.
    """
    try:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            page = doc[page_index]
            pix = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
            png_bytes = pix.tobytes("png")
        return Image.open(io.BytesIO(png_bytes)).convert("RGB")
    except Exception as exc:
        raise OcrError(f"Page {page_index + 1} render failed: {exc}") from exc
