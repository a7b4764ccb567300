from docshield.extraction.exceptions import ExtractionError


class OcrError(ExtractionError):
    """Raised when a page cannot be rendered or its raster cannot be recognized."""
