from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text layer adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Extract the raw text of every page, in document order.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One string per page. Pages without a text layer yield "".

        Raises:
            PdfExtractionError: if the document cannot be opened or read.
        """
