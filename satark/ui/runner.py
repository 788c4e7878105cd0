"""
Synchronous entry points for running one chat turn from Streamlit.

Streamlit scripts run synchronously and rerun on every interaction, so each
turn rebuilds a ``ChatSession`` from the snapshot kept in
``st.session_state``, drives it to completion inside ``asyncio.run`` and
returns the new snapshot.
"""

import asyncio
import logging

from satark.core.config import Settings, get_settings
from satark.core.models import ChatState
from satark.services.audio.sources import ClipSource
from satark.services.chat.session import ChatSession
from satark.services.qa.base import BaseQAClient
from satark.services.qa.client import QAClient
from satark.services.transcription import BaseTranscriber, create_transcriber

logger = logging.getLogger(__name__)


async def text_turn(state: ChatState, text: str, client: BaseQAClient) -> ChatState:
    """Submit ``text`` and wait for the answer or the error."""
    async with ChatSession(client, state=state) as session:
        session.submit(text)
        await session.wait_idle()
        return session.state


async def voice_turn(
    state: ChatState,
    client: BaseQAClient,
    transcriber: BaseTranscriber,
) -> ChatState:
    """Record with ``transcriber`` until its source drains, then submit the transcript."""
    async with ChatSession(client, transcriber=transcriber, state=state) as session:
        session.toggle_recording()
        await session.wait_idle()

        if session.state.is_recording:
            await transcriber.drain()
        # Capture may have failed while draining
        if session.state.is_recording:
            session.toggle_recording()

        await session.wait_idle()
        return session.state


def run_text_turn(state: ChatState, text: str, settings: Settings | None = None) -> ChatState:
    settings = settings or get_settings()

    async def _run() -> ChatState:
        async with QAClient(settings=settings) as client:
            return await text_turn(state, text, client)

    return asyncio.run(_run())


def run_voice_turn(
    state: ChatState,
    audio_bytes: bytes,
    settings: Settings | None = None,
) -> ChatState:
    """Transcribe a recorded clip and, if it contains speech, ask it as a question."""
    settings = settings or get_settings()
    chunk_bytes = int(settings.transcription_chunk_seconds * 16000 * 2)
    source = ClipSource(audio_bytes, chunk_bytes=chunk_bytes, encoded=True)
    transcriber = create_transcriber(settings.whisper_provider, source=source, settings=settings)
    logger.info("Voice turn with %d bytes of recorded audio", len(audio_bytes))

    async def _run() -> ChatState:
        async with QAClient(settings=settings) as client:
            return await voice_turn(state, client, transcriber)

    return asyncio.run(_run())
