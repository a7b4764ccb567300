class ScanError(Exception):
    """Raised when a PII scan cannot be configured or started."""


class ChunkRequestError(ScanError):
    """Raised when one chunk's model call fails; absorbed by the scheduler."""


class ModelNetworkError(ChunkRequestError):
    """Raised when the model endpoint is unreachable, times out, or answers non-2xx."""


class ModelResponseError(ChunkRequestError):
    """Raised when the model answers but the payload has no usable content."""
