"""
Abstract base class for Speech-to-Text providers.

The chat session talks to capture only through this interface, so a test
double can replay partial transcripts and failures deterministically.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from satark.core.exceptions import TranscriptionError

PartialCallback = Callable[[str], None]
ErrorCallback = Callable[[TranscriptionError], None]


class BaseTranscriber(ABC):
    """Interface that every STT provider must implement."""

    @property
    @abstractmethod
    def is_capturing(self) -> bool:
        """True between a successful ``start`` and the next ``stop``."""

    @abstractmethod
    async def start(self, on_partial: PartialCallback, on_error: ErrorCallback) -> None:
        """Begin capturing audio.

        Each ``on_partial`` call carries the full transcript so far and
        replaces the previous one. ``on_error`` is called at most once for
        a failure that happens after capture started. Calling ``start``
        while already capturing is a no-op.

        Raises:
            TranscriptionAuthError: Audio capture is not permitted.
            TranscriptionRuntimeError: The audio input or engine cannot start.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Finalize capture and release audio resources.

        Safe to call if ``start`` failed or was never called; idempotent.
        """

    async def drain(self) -> None:
        """Wait until a finite source (a recorded clip) has been fully transcribed.

        Live capture never drains on its own, so the default returns at once.
        """
