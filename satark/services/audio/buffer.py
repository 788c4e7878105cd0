"""Audio buffering for incremental transcription.

Accumulates the PCM bytes of one utterance and reports when enough new
audio has arrived to refresh the partial transcript.
"""

import numpy as np

from satark.services.audio.processor import AudioProcessor


class AudioBuffer:
    """Accumulates PCM audio bytes for a single utterance.

    Every snapshot covers the whole utterance so far, which lets each
    partial transcript replace the previous one instead of extending it.
    """

    def __init__(
        self,
        chunk_duration: float = 1.0,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
        min_duration: float = 0.5,
    ) -> None:
        self._chunk_duration = chunk_duration
        self._sample_rate = sample_rate
        self._sample_width = sample_width
        self._channels = channels
        self._min_duration = min_duration
        self._buffer = bytearray()
        self._consumed = 0
        self._processor = AudioProcessor(sample_rate, sample_width, channels)

    @property
    def _bytes_per_second(self) -> int:
        return self._sample_rate * self._sample_width * self._channels

    @property
    def chunk_size_bytes(self) -> int:
        """Number of new bytes that triggers a partial transcript."""
        return int(self._chunk_duration * self._bytes_per_second)

    @property
    def buffered_duration(self) -> float:
        """Duration of the whole utterance in seconds."""
        return len(self._buffer) / self._bytes_per_second

    def add_bytes(self, data: bytes) -> None:
        """Append raw PCM bytes to the utterance."""
        self._buffer.extend(data)

    def has_chunk(self) -> bool:
        """Check if a full chunk of new audio arrived since the last snapshot."""
        return len(self._buffer) - self._consumed >= self.chunk_size_bytes

    def has_pending(self) -> bool:
        """Check if unsnapshotted audio remains and the utterance is long enough."""
        return (
            len(self._buffer) > self._consumed
            and self.buffered_duration >= self._min_duration
        )

    def snapshot(self) -> np.ndarray:
        """Return the whole utterance as float32 samples and mark it consumed."""
        frame_size = self._sample_width * self._channels
        usable = len(self._buffer) - (len(self._buffer) % frame_size)
        self._consumed = len(self._buffer)
        return self._processor.pcm_to_ndarray(bytes(self._buffer[:usable]))

    def reset(self) -> None:
        """Clear the buffer."""
        self._buffer.clear()
        self._consumed = 0
