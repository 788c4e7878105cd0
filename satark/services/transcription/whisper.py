"""Whisper STT implementation using faster-whisper.

Reads PCM chunks from an ``AudioSource`` in a background task and, every
time a chunk of new audio has arrived, re-transcribes the whole utterance
so that each partial transcript replaces the previous one. The
WhisperModel is loaded lazily and cached at module level to avoid
repeated initialization overhead.
"""

import asyncio
import logging

import numpy as np
from faster_whisper import WhisperModel

from satark.core.config import get_settings
from satark.core.exceptions import (
    TranscriptionAuthError,
    TranscriptionError,
    TranscriptionRuntimeError,
)
from satark.services.audio.buffer import AudioBuffer
from satark.services.audio.processor import AudioProcessor
from satark.services.audio.sources import AudioSource
from satark.services.transcription.base import BaseTranscriber, ErrorCallback, PartialCallback

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None


class WhisperTranscriber(BaseTranscriber):
    """Speech-to-text provider using faster-whisper (CTranslate2).

    Args:
        source: Capture tap yielding 16 kHz mono PCM.
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
        language: ISO language code, or None/"" for auto-detect.
        chunk_duration: Seconds of new audio between partial transcripts.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        source: AudioSource,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        language: str | None = None,
        chunk_duration: float | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._source = source
        self._model_size = model_size or self._settings.whisper_model
        self._device = device or self._settings.whisper_device
        self._compute_type = compute_type or self._settings.whisper_compute_type
        self._language = language or self._settings.transcription_language or None
        self._buffer = AudioBuffer(
            chunk_duration=chunk_duration or self._settings.transcription_chunk_seconds
        )
        self._processor = AudioProcessor()
        self._task: asyncio.Task | None = None
        self._last_partial = ""

    @property
    def is_capturing(self) -> bool:
        return self._task is not None

    def _get_model(self) -> WhisperModel:
        """Return the cached WhisperModel, loading it on first use."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run_transcription(self, audio: np.ndarray) -> str:
        """Run synchronous transcription (CPU-bound).

        Must be called via asyncio.to_thread(). The segment iterator is
        materialized in the same thread to avoid CTranslate2 cross-thread
        issues.
        """
        model = self._get_model()
        segments_iter, _info = model.transcribe(
            audio,
            language=self._language,
            beam_size=1,
            vad_filter=False,
        )
        texts = [seg.text.strip() for seg in segments_iter]
        return " ".join(text for text in texts if text)

    async def start(self, on_partial: PartialCallback, on_error: ErrorCallback) -> None:
        if self._task is not None:
            logger.debug("start() ignored: already capturing")
            return

        try:
            await self._source.open()
        except PermissionError as exc:
            await self._source.close()
            raise TranscriptionAuthError(f"Audio capture not permitted: {exc}") from exc
        except (OSError, ValueError) as exc:
            await self._source.close()
            raise TranscriptionRuntimeError(f"Could not open audio input: {exc}") from exc

        self._buffer.reset()
        self._last_partial = ""
        self._task = asyncio.create_task(self._capture_loop(on_partial, on_error))
        logger.info("Audio capture started")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Audio capture stopped")
        await self._source.close()

    async def drain(self) -> None:
        """Wait until the source is exhausted (or capture is stopped)."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _capture_loop(self, on_partial: PartialCallback, on_error: ErrorCallback) -> None:
        """Background loop: feed the buffer and publish partial transcripts."""
        try:
            async for chunk in self._source.chunks():
                self._buffer.add_bytes(chunk)
                if self._buffer.has_chunk():
                    await self._publish_partial(on_partial)

            if self._buffer.has_pending():
                await self._publish_partial(on_partial)
        except TranscriptionError as exc:
            logger.warning("Transcription failed: %s", exc.detail)
            on_error(exc)
        except Exception as exc:
            logger.exception("Audio capture crashed")
            on_error(TranscriptionRuntimeError(f"Audio capture failed: {exc}"))
        finally:
            await self._source.close()

    async def _publish_partial(self, on_partial: PartialCallback) -> None:
        audio = self._buffer.snapshot()
        if self._processor.is_silent(audio):
            return

        try:
            text = await asyncio.to_thread(self._run_transcription, audio)
        except Exception as exc:
            raise TranscriptionRuntimeError(
                f"Whisper transcription failed: {exc}"
            ) from exc

        if text and text != self._last_partial:
            self._last_partial = text
            on_partial(text)
