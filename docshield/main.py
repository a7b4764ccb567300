import asyncio

from docshield.config.settings import Settings
from docshield.extraction.dispatcher import build_dispatcher
from docshield.logging.logger import Log
from docshield.messaging.handlers import MessageHandlers
from docshield.worker.worker import MessageWorker


def main() -> None:
    """Entry point: load settings -> build dependencies -> start message loop."""
    settings = Settings()
    Log.configure(settings.log_level)

    handlers = MessageHandlers(settings, build_dispatcher(settings))
    worker = MessageWorker(handlers)
    try:
        asyncio.run(worker.run())
    except KeyboardInterrupt:
        Log.info("Worker shutting down gracefully")


if __name__ == "__main__":
    main()
