"""Audio sources feeding the transcriber.

An ``AudioSource`` is the capture tap: it is opened when recording starts,
yields raw 16 kHz mono PCM chunks, and is closed on every exit path.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from satark.services.audio.processor import AudioProcessor


class AudioSource(ABC):
    """Interface for a capture device or a pre-recorded clip."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the capture device.

        Raises:
            PermissionError: If audio capture is not permitted.
            OSError: If the device cannot be opened.
            ValueError: If recorded audio cannot be decoded.
        """

    @abstractmethod
    def chunks(self) -> AsyncIterator[bytes]:
        """Yield raw PCM chunks until capture ends."""

    @abstractmethod
    async def close(self) -> None:
        """Release the capture device. Must be safe to call repeatedly."""


class ClipSource(AudioSource):
    """Replays an already captured clip, e.g. from a browser recorder.

    Args:
        data: Raw 16-bit mono 16 kHz PCM, or an encoded file when ``encoded``.
        chunk_bytes: PCM bytes per yielded chunk (default one second).
        encoded: Decode ``data`` (WAV, FLAC, OGG) on ``open``.
    """

    def __init__(self, data: bytes, chunk_bytes: int = 32000, encoded: bool = False) -> None:
        self._data = data
        self._pcm = b"" if encoded else data
        self._encoded = encoded
        self._chunk_bytes = chunk_bytes
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> None:
        if self._encoded and not self._pcm:
            self._pcm = AudioProcessor().decode_clip(self._data)
        self._closed = False

    async def chunks(self) -> AsyncIterator[bytes]:
        offset = 0
        while offset < len(self._pcm) and not self._closed:
            yield self._pcm[offset : offset + self._chunk_bytes]
            offset += self._chunk_bytes

    async def close(self) -> None:
        self._closed = True
