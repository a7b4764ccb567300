from docshield.extraction.exceptions import DecodeError


class PdfExtractionError(DecodeError):
    """Raised when the PDF text layer cannot be read."""
