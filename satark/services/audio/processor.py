"""Audio processing utilities for PCM data.

Converts recorded clips to 16 kHz mono PCM, PCM bytes to numpy arrays,
and provides silence detection.
"""

import io

import numpy as np
import soundfile as sf


class AudioProcessor:
    """Handles PCM audio data conversion and analysis.

    Whisper expects 16 kHz mono float32 samples; everything captured for
    voice input is normalised to 16-bit PCM at that rate first.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        """Initialize the audio processor.

        Args:
            sample_rate: Audio sample rate in Hz (default: 16 kHz).
            sample_width: Bytes per sample (2 = 16-bit signed PCM).
            channels: Number of audio channels (1 = mono).
        """
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    def pcm_to_ndarray(self, pcm_data: bytes) -> np.ndarray:
        """Convert raw PCM bytes (16-bit signed) to float32 numpy array.

        Args:
            pcm_data: Raw PCM bytes (16-bit, mono).

        Returns:
            Float32 numpy array normalized to [-1.0, 1.0].

        Raises:
            ValueError: If data length is not aligned to sample frame size.
        """
        frame_size = self.sample_width * self.channels
        if len(pcm_data) % frame_size != 0:
            raise ValueError(
                f"PCM data length ({len(pcm_data)}) is not aligned to frame size ({frame_size})"
            )
        return np.frombuffer(pcm_data, dtype=np.int16).astype(np.float32) / 32768.0

    def decode_clip(self, audio_bytes: bytes) -> bytes:
        """Read an encoded clip (WAV, FLAC, OGG) and return 16 kHz mono PCM int16.

        Args:
            audio_bytes: Complete encoded audio file contents.

        Returns:
            Raw PCM bytes at ``self.sample_rate``.

        Raises:
            ValueError: If the clip cannot be decoded.
        """
        try:
            data, sample_rate = sf.read(io.BytesIO(audio_bytes), dtype="float32")
        except (sf.LibsndfileError, RuntimeError) as exc:
            raise ValueError(f"Unsupported or corrupt audio clip: {exc}") from exc

        if data.ndim > 1:
            data = data.mean(axis=1)

        if sample_rate != self.sample_rate and len(data) > 0:
            duration = len(data) / sample_rate
            num_samples = int(duration * self.sample_rate)
            indices = np.linspace(0, len(data) - 1, num_samples)
            data = np.interp(indices, np.arange(len(data)), data)

        pcm = (data * 32767).clip(-32768, 32767).astype(np.int16)
        return pcm.tobytes()

    def is_silent(self, audio: np.ndarray, threshold: float = 0.01) -> bool:
        """Check if an audio segment is silence based on RMS energy.

        Args:
            audio: Float32 numpy array of audio samples.
            threshold: RMS energy below this value is considered silence.

        Returns:
            True if the audio is silence.
        """
        if len(audio) == 0:
            return True
        rms = np.sqrt(np.mean(audio**2))
        return float(rms) < threshold
