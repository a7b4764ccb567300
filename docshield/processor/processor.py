import asyncio
import contextlib

from docshield.extraction.dispatcher import FormatDispatcher
from docshield.extraction.models import Document
from docshield.extraction.text_normalizer import normalize_text
from docshield.logging.logger import Log
from docshield.scan.models import ScanResult
from docshield.scan.scanner import PiiScanner


class Processor:
    """Orchestrates the full document pipeline.

    Pipeline: extract -> normalize -> chunk -> scan.
    """

    def __init__(
        self,
        dispatcher: FormatDispatcher,
        scanner: PiiScanner,
        extraction_lock: asyncio.Lock | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._scanner = scanner
        self._extraction_lock = extraction_lock

    async def process(
        self,
        document: Document,
        cancel_event: asyncio.Event | None = None,
    ) -> ScanResult:
        """Extract *document* and scan its text for PII.

        Raises:
            DecodeError: if the document cannot be decoded.
        """
        Log.info(f"Processing document {document.name!r}")

        # Step 1: Extract context header + body text (one extraction at a time)
        guard = self._extraction_lock or contextlib.nullcontext()
        async with guard:
            extraction = await self._dispatcher.extract(document)

        # Step 2: Normalize
        text = normalize_text(extraction.text)
        Log.info(f"Normalized text of {document.name!r}: {len(text)} chars")

        # Step 3: Chunk + scan
        result = await self._scanner.scan(text, cancel_event)
        Log.info(f"Document {document.name!r}: {len(result.findings)} findings")
        return result
