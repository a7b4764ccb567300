import asyncio
from pathlib import Path

from docshield.config.settings import Settings
from docshield.extraction.text_normalizer import normalize_text
from docshield.logging.logger import Log
from docshield.scan.chunker import chunk_text
from docshield.scan.client_base import BaseChatClient
from docshield.scan.models import GenerationOptions, ScanResult
from docshield.scan.prompt_loader import load_system_prompt
from docshield.scan.scheduler import BatchScheduler


class PiiScanner:
    """Normalizes and chunks text, then hands the chunks to the batch scheduler."""

    def __init__(
        self,
        *,
        scheduler: BatchScheduler,
        chunk_size: int,
        chunk_overlap: int,
    ) -> None:
        self._scheduler = scheduler
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    async def scan(self, text: str, cancel_event: asyncio.Event | None = None) -> ScanResult:
        normalized = normalize_text(text)
        chunks = chunk_text(normalized, self._chunk_size, self._chunk_overlap)
        Log.info(f"Scanning {len(normalized)} chars as {len(chunks)} chunks")
        result = await self._scheduler.scan(chunks, cancel_event)
        Log.info(
            f"PII scan complete: {len(result.findings)} findings, "
            f"{result.failed_chunks}/{result.total_chunks} chunks failed"
        )
        return result


def build_scanner(
    settings: Settings,
    client: BaseChatClient,
    *,
    model: str,
    system_prompt: str | None = None,
) -> PiiScanner:
    """Build a PiiScanner; *system_prompt* overrides the configured base prompt."""
    if not system_prompt:
        prompt_path = settings.scan_system_prompt_path
        system_prompt = load_system_prompt(Path(prompt_path) if prompt_path else None)
    scheduler = BatchScheduler(
        client=client,
        model=model,
        system_prompt=system_prompt,
        options=GenerationOptions(
            temperature=settings.model_temperature,
            num_ctx=settings.model_num_ctx,
            num_predict=settings.model_num_predict,
        ),
        concurrency=settings.scan_concurrency,
        known_values_window=settings.scan_known_values_window,
        strict_placeholder_filter=settings.scan_strict_placeholder_filter,
        sequential_context=settings.scan_sequential_context,
    )
    return PiiScanner(
        scheduler=scheduler,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )
