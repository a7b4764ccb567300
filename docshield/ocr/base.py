from abc import ABC, abstractmethod

from PIL import Image


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def recognize(self, image: Image.Image) -> str:
        """Recognize the text in a raster image.

        Args:
            image: Rendered page or uploaded picture.

        Returns:
            Recognized text (possibly empty).

        Raises:
            OcrError: if recognition fails for any reason.
        """
