"""Request handlers for the message channel.

Handlers keep no per-request state: a redelivered request produces the same
response. Expected failures are reported as ``{"success": False, ...}``;
anything else propagates to the worker loop.
"""

import asyncio
import base64
import binascii
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from docshield import __version__
from docshield.config.settings import Settings
from docshield.extraction.dispatcher import FormatDispatcher
from docshield.extraction.exceptions import DecodeError
from docshield.extraction.models import Document
from docshield.extraction.text_normalizer import normalize_text
from docshield.logging.logger import Log
from docshield.messaging.models import ExtractAndScanRequest, ExtractionRequest, PiiScanRequest
from docshield.processor.processor import Processor
from docshield.scan.client_base import BaseChatClient
from docshield.scan.exceptions import ChunkRequestError, ScanError
from docshield.scan.factory import ChatClientFactory
from docshield.scan.models import ScanResult
from docshield.scan.scanner import build_scanner

ClientFactory = Callable[[str | None], BaseChatClient]
Response = dict[str, Any]

# Replies to these always carry a findings list, failures included.
SCAN_MESSAGE_TYPES = frozenset({"PII_SCAN", "EXTRACT_AND_SCAN"})


def decode_file(file_base64: str) -> bytes:
    """Decode base64 file content, accepting an optional ``data:...;base64,`` prefix.

    Raises:
        DecodeError: if the payload is not valid base64.
    """
    payload = file_base64.split(",", 1)[1] if file_base64.startswith("data:") else file_base64
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 file content: {exc}") from exc


def scan_response(result: ScanResult) -> Response:
    return {
        "success": True,
        "findings": [{"category": f.category, "value": f.value} for f in result.findings],
        "totalChunks": result.total_chunks,
        "failedChunks": result.failed_chunks,
    }


class MessageHandlers:
    """Maps message types to the extraction and PII scan entry points."""

    def __init__(
        self,
        settings: Settings,
        dispatcher: FormatDispatcher,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._dispatcher = dispatcher
        self._client_factory = client_factory or (
            lambda url: ChatClientFactory.create(settings, base_url=url)
        )
        # Extractions run one at a time; decoders are memory-heavy.
        self._extraction_lock = asyncio.Lock()
        self._routes: dict[str, Callable[[dict[str, Any]], Awaitable[Response]]] = {
            "EXTRACT": self.handle_extract,
            "PII_SCAN": self.handle_pii_scan,
            "EXTRACT_AND_SCAN": self.handle_extract_and_scan,
            "PING": self.handle_ping,
            "GET_VERSION": self.handle_version,
        }

    async def dispatch(self, message: dict[str, Any]) -> Response:
        message_type = str(message.get("type", ""))
        handler = self._routes.get(message_type)
        if handler is None:
            return {"success": False, "error": f"Unknown message type '{message_type}'"}
        return await handler(message)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_extract(self, payload: dict[str, Any]) -> Response:
        try:
            request = ExtractionRequest.model_validate(payload)
            text = await self._extract_text(request)
        except (ValidationError, DecodeError) as exc:
            Log.error(f"Extraction failed: {exc}")
            return {"success": False, "error": str(exc)}
        return {"success": True, "text": text}

    async def handle_pii_scan(self, payload: dict[str, Any]) -> Response:
        try:
            request = PiiScanRequest.model_validate(payload)
        except ValidationError as exc:
            return {"success": False, "findings": [], "error": str(exc)}

        client = None
        try:
            client = self._client_factory(request.url)
            scanner = build_scanner(
                self._settings,
                client,
                model=ChatClientFactory.resolve_model_name(self._settings, request.model),
                system_prompt=request.system_prompt,
            )
            result = await scanner.scan(request.text)
        except (ScanError, ValueError) as exc:
            Log.error(f"PII scan failed: {exc}")
            return {"success": False, "findings": [], "error": str(exc)}
        finally:
            if client is not None:
                await client.aclose()
        return scan_response(result)

    async def handle_extract_and_scan(self, payload: dict[str, Any]) -> Response:
        try:
            request = ExtractAndScanRequest.model_validate(payload)
            raw_bytes = decode_file(request.file_base64)
        except (ValidationError, DecodeError) as exc:
            return {"success": False, "findings": [], "error": str(exc)}

        document = Document(
            name=request.file_name,
            declared_mime_type=request.file_type,
            raw_bytes=raw_bytes,
        )
        client = None
        try:
            client = self._client_factory(request.url)
            scanner = build_scanner(
                self._settings,
                client,
                model=ChatClientFactory.resolve_model_name(self._settings, request.model),
                system_prompt=request.system_prompt,
            )
            processor = Processor(self._dispatcher, scanner, self._extraction_lock)
            result = await processor.process(document)
        except (DecodeError, ScanError, ValueError) as exc:
            Log.error(f"Extract-and-scan failed: {exc}")
            return {"success": False, "findings": [], "error": str(exc)}
        finally:
            if client is not None:
                await client.aclose()
        return scan_response(result)

    async def handle_ping(self, payload: dict[str, Any]) -> Response:
        """Check that the model endpoint answers and serves the configured model."""
        url = payload.get("url")
        model = ChatClientFactory.resolve_model_name(self._settings, payload.get("model"))
        client = None
        try:
            client = self._client_factory(url if isinstance(url, str) else None)
            models = await client.list_models()
        except (ChunkRequestError, ScanError) as exc:
            Log.debug(f"Model endpoint unreachable: {exc}")
            return {"success": False, "error": str(exc)}
        finally:
            if client is not None:
                await client.aclose()

        wanted = model.lower()
        available = any(
            name.lower() == wanted or name.lower().startswith(f"{wanted}:") for name in models
        )
        if not available:
            Log.warning(f"Model '{model}' not installed on endpoint; found {models}")
        return {"success": True, "model": model, "modelAvailable": available, "models": models}

    async def handle_version(self, payload: dict[str, Any]) -> Response:
        _ = payload
        return {"success": True, "version": __version__}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _extract_text(self, request: ExtractionRequest) -> str:
        document = Document(
            name=request.file_name,
            declared_mime_type=request.file_type,
            raw_bytes=decode_file(request.file_base64),
        )
        async with self._extraction_lock:
            result = await self._dispatcher.extract(document)
        return normalize_text(result.text)
