"""Shared pytest fixtures for the Satark test suite.

Provides test doubles for the QA client and the transcriber, audio
samples, and an isolated Settings instance.
"""

import asyncio
import math
import struct
from unittest.mock import AsyncMock

import pytest

from satark.core.config import Settings
from satark.services.qa.base import BaseQAClient
from satark.services.transcription.base import BaseTranscriber

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def settings():
    """Settings that ignore any local .env file."""
    return Settings(
        _env_file=None,
        qa_endpoint_url="http://qa.test/qa",
        whisper_model="tiny",
        transcription_chunk_seconds=1.0,
    )


# ---------------------------------------------------------------------------
# QA client
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_qa_client():
    """Create a mock QA client answering "10 PM" to every question.

    Returns:
        AsyncMock: A mock implementing the BaseQAClient interface.
    """
    client = AsyncMock(spec=BaseQAClient)
    client.ask.return_value = "10 PM"
    return client


@pytest.fixture
def gated_qa_client():
    """QA client whose answer is held back until ``client.release`` is set."""
    client = AsyncMock(spec=BaseQAClient)
    client.release = asyncio.Event()

    async def _ask(question: str) -> str:
        await client.release.wait()
        return f"answer to {question}"

    client.ask.side_effect = _ask
    return client


# ---------------------------------------------------------------------------
# Transcriber
# ---------------------------------------------------------------------------


class FakeTranscriber(BaseTranscriber):
    """Deterministic transcriber: tests push partials and failures by hand."""

    def __init__(self, start_error=None, script=(), script_error=None) -> None:
        self.start_error = start_error
        self.script = list(script)
        self.script_error = script_error
        self.start_calls = 0
        self.stop_calls = 0
        self.on_partial = None
        self.on_error = None
        self._capturing = False

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    async def start(self, on_partial, on_error) -> None:
        self.start_calls += 1
        if self._capturing:
            return
        if self.start_error is not None:
            raise self.start_error
        self.on_partial = on_partial
        self.on_error = on_error
        self._capturing = True

    async def stop(self) -> None:
        self.stop_calls += 1
        self._capturing = False

    async def drain(self) -> None:
        """Replay the scripted partials, then the scripted failure if any."""
        for text in self.script:
            self.on_partial(text)
        if self.script_error is not None:
            self.on_error(self.script_error)

    def emit(self, text: str) -> None:
        self.on_partial(text)

    def fail(self, exc) -> None:
        self.on_error(exc)


@pytest.fixture
def fake_transcriber():
    return FakeTranscriber()


@pytest.fixture
def make_transcriber():
    """Factory for transcribers with scripted partials or failures."""
    return FakeTranscriber


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def silent_pcm_bytes():
    """Generate 1 second of silence as PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM silence data (all zeros).
    """
    sample_rate = 16000
    return b"\x00\x00" * sample_rate


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """Encode the sample PCM as an in-memory 16 kHz mono WAV file."""
    import io
    import wave

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()
