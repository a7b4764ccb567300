class ExtractionError(Exception):
    """Base exception for all extraction-related errors."""


class DecodeError(ExtractionError):
    """Raised when a document is corrupt or cannot be decoded by its format's pipeline."""


class FieldExtractionError(ExtractionError):
    """Raised when a form field, or the whole form, cannot be read."""
