import asyncio
import json
import sys
import threading
from typing import Any, TextIO

from docshield.logging.logger import Log
from docshield.messaging.handlers import SCAN_MESSAGE_TYPES, MessageHandlers

_ReadItem = str | BaseException | None


class MessageWorker:
    """Read loop: readline -> dispatch -> write response line."""

    def __init__(self, handlers: MessageHandlers) -> None:
        self._handlers = handlers
        self._write_lock = asyncio.Lock()

    async def run(
        self,
        reader: TextIO | None = None,
        writer: TextIO | None = None,
        max_messages: int | None = None,
    ) -> None:
        """Main read loop. Runs until EOF on *reader*.

        If max_messages is set, stop reading after that many lines (for testing).
        Messages are handled concurrently; all pending ones finish before return.
        """
        reader = reader or sys.stdin
        writer = writer or sys.stdout
        Log.info("Worker started, reading messages")

        lines = self._start_reader(reader)
        tasks: set[asyncio.Task[None]] = set()
        messages_read = 0
        while max_messages is None or messages_read < max_messages:
            line = await lines.get()
            if isinstance(line, BaseException):
                raise line
            if line is None:
                Log.info("Input closed, draining pending messages")
                break
            if not line.strip():
                continue
            messages_read += 1
            task = asyncio.create_task(self._handle_line(line, writer))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        if tasks:
            await asyncio.gather(*tasks)
        Log.info(f"Worker stopped after {messages_read} messages")

    @staticmethod
    def _start_reader(reader: TextIO) -> "asyncio.Queue[_ReadItem]":
        """Feed reader lines into a queue from a daemon thread.

        The queue ends with ``None`` on EOF, or with the exception readline raised.
        """
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue[_ReadItem] = asyncio.Queue()

        def put(item: _ReadItem) -> bool:
            try:
                loop.call_soon_threadsafe(lines.put_nowait, item)
            except RuntimeError:
                # Loop already closed.
                return False
            return True

        def pump() -> None:
            try:
                while True:
                    line = reader.readline()
                    if not put(line or None) or not line:
                        return
            except Exception as exc:
                put(exc)

        threading.Thread(target=pump, name="docshield-reader", daemon=True).start()
        return lines

    async def _handle_line(self, line: str, writer: TextIO) -> None:
        try:
            message = json.loads(line)
            if not isinstance(message, dict):
                raise ValueError("message must be a JSON object")
        except ValueError as exc:
            Log.warning(f"Malformed message: {exc}")
            await self._write(writer, {"success": False, "error": f"Malformed message: {exc}"})
            return

        message_id: Any = message.get("id")
        try:
            response = await self._handlers.dispatch(message)
        except Exception as exc:
            Log.exception(f"Message {message_id} failed: {exc}")
            response = {"success": False, "error": str(exc)}
            if message.get("type") in SCAN_MESSAGE_TYPES:
                response["findings"] = []

        if message_id is not None:
            response = {"id": message_id, **response}
        await self._write(writer, response)

    async def _write(self, writer: TextIO, response: dict[str, Any]) -> None:
        async with self._write_lock:
            writer.write(json.dumps(response, ensure_ascii=False) + "\n")
            writer.flush()
