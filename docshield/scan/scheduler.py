"""Concurrency-bounded batch scheduler for PII scans.

Processing flow:
1. Partition chunks into sequential batches of at most ``concurrency`` chunks.
2. Read the recent known values once per batch and build every prompt.
3. Dispatch the batch's model calls concurrently and wait for all of them.
4. Merge replies in chunk order into a new ScanState (single writer).
5. Repeat for the next batch; return the accumulated findings.

Values discovered in a batch are only visible to later batches: sibling
chunks of one batch are prompted with the same known values.
"""

from __future__ import annotations

import asyncio

from docshield.logging.logger import Log
from docshield.scan.client_base import BaseChatClient
from docshield.scan.exceptions import ChunkRequestError, ScanError
from docshield.scan.models import (
    Chunk,
    ChunkFailed,
    ChunkOutcome,
    ChunkSucceeded,
    GenerationOptions,
    ScanResult,
)
from docshield.scan.response_parser import parse_response
from docshield.scan.state import ScanState

KNOWN_VALUES_HINT = (
    "ALREADY IDENTIFIED (do not repeat these values, look for other personal data): "
)


def partition(chunks: list[Chunk], size: int) -> list[list[Chunk]]:
    """Split chunks into consecutive batches of at most *size*, preserving order."""
    return [chunks[i : i + size] for i in range(0, len(chunks), size)]


def build_user_prompt(chunk: Chunk) -> str:
    return f"<INPUT_DATA>\n{chunk.text}\n</INPUT_DATA>"


class BatchScheduler:
    """Runs model calls batch by batch and merges their findings."""

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        system_prompt: str,
        options: GenerationOptions | None = None,
        concurrency: int = 3,
        known_values_window: int = 50,
        strict_placeholder_filter: bool = False,
        sequential_context: bool = False,
    ) -> None:
        if concurrency < 1:
            raise ScanError("concurrency must be at least 1")
        self._client = client
        self._model = model
        self._system_prompt = system_prompt
        self._options = options or GenerationOptions()
        # Batches of one give every chunk the discoveries of all earlier chunks.
        self._batch_size = 1 if sequential_context else concurrency
        self._known_values_window = known_values_window
        self._strict = strict_placeholder_filter

    def build_system_prompt(self, known_values: list[str]) -> str:
        if not known_values:
            return self._system_prompt
        return f"{self._system_prompt}\n\n{KNOWN_VALUES_HINT}{', '.join(known_values)}"

    async def scan(
        self,
        chunks: list[Chunk],
        cancel_event: asyncio.Event | None = None,
    ) -> ScanResult:
        """Scan *chunks* and return findings in (batch, chunk) order.

        A chunk whose call fails contributes no findings and is counted in
        ``failed_chunks``. When *cancel_event* is set the scan stops at the
        next batch boundary and returns what was merged so far.
        """
        batches = partition(chunks, self._batch_size)
        state = ScanState()
        failed = 0
        cancelled = False

        Log.info(
            f"PII scan: {len(chunks)} chunks in {len(batches)} batches "
            f"(batch size {self._batch_size})"
        )

        for batch_number, batch in enumerate(batches):
            if cancel_event is not None and cancel_event.is_set():
                Log.warning(f"PII scan cancelled before batch {batch_number + 1}/{len(batches)}")
                cancelled = True
                break

            system_prompt = self.build_system_prompt(
                state.recent_known_values(self._known_values_window)
            )
            outcomes = await asyncio.gather(
                *(self._run_chunk(chunk, system_prompt) for chunk in batch)
            )
            state, batch_failed = self._merge(state, outcomes)
            failed += batch_failed

            Log.info(
                f"Batch {batch_number + 1}/{len(batches)} merged: "
                f"{len(state.findings)} findings so far, {batch_failed} chunks failed"
            )

        return ScanResult(
            findings=list(state.findings),
            total_chunks=len(chunks),
            failed_chunks=failed,
            cancelled=cancelled,
        )

    async def _run_chunk(self, chunk: Chunk, system_prompt: str) -> ChunkOutcome:
        user_prompt = build_user_prompt(chunk)
        Log.debug(f"Chunk {chunk.index} prompt:\n{system_prompt}\n{user_prompt}")
        try:
            raw = await self._client.create_chat_completion(
                model=self._model,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                options=self._options,
            )
        except ChunkRequestError as exc:
            Log.warning(f"Chunk {chunk.index} failed: {exc}")
            return ChunkFailed(chunk_index=chunk.index, reason=str(exc))
        except Exception as exc:
            Log.exception(f"Chunk {chunk.index} failed unexpectedly: {exc}")
            return ChunkFailed(chunk_index=chunk.index, reason=f"unexpected error: {exc}")

        Log.debug(f"Chunk {chunk.index} raw response:\n{raw}")
        return ChunkSucceeded(chunk_index=chunk.index, raw_response=raw)

    def _merge(
        self,
        state: ScanState,
        outcomes: list[ChunkOutcome],
    ) -> tuple[ScanState, int]:
        failed = 0
        for outcome in outcomes:
            if isinstance(outcome, ChunkFailed):
                failed += 1
                continue
            state = state.merge(parse_response(outcome.raw_response, strict=self._strict))
        return state, failed
