from dataclasses import dataclass, field
from enum import Enum


class DocumentKind(str, Enum):
    """Decode strategy selected for a document."""

    PDF = "pdf"
    IMAGE = "image"
    FLOW = "flow"
    TABULAR = "tabular"
    TEXT = "text"


class PageSource(str, Enum):
    """Where the text of a page unit came from."""

    TEXT = "text"
    OCR = "ocr"
    UNSCANNED = "unscanned"


@dataclass(frozen=True)
class Document:
    """An uploaded file as received from the caller."""

    name: str
    declared_mime_type: str
    raw_bytes: bytes = field(repr=False)


@dataclass(frozen=True)
class PageUnit:
    """Text of a single page (0-based index) and how it was obtained."""

    index: int
    text: str
    source: PageSource


@dataclass
class ExtractionResult:
    """Output of the extraction step."""

    context_header: str = ""
    body_text: str = ""
    page_units: list[PageUnit] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.context_header + self.body_text
