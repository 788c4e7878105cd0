"""Logging setup shared by every entry point."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once with a timestamped format.

    Noisy HTTP client loggers are capped at WARNING so request lines do
    not drown out the chat session's own messages.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("faster_whisper").setLevel(logging.WARNING)
