"""Unit tests for the Streamlit turn runners.

Each turn rebuilds a ChatSession from a stored snapshot, so these tests
check that the returned snapshot carries the whole conversation forward.
"""

from unittest.mock import patch

import httpx

from satark.core.exceptions import TranscriptionRuntimeError
from satark.core.models import ChatPhase, ChatState
from satark.services.qa.client import QAClient
from satark.ui.runner import run_text_turn, run_voice_turn, text_turn, voice_turn


def _transcript(state):
    return [(m.text, m.is_user) for m in state.history]


def _qa_factory(answer="10 PM", status=200):
    def handler(request):
        return httpx.Response(status, json={"answer": answer})

    def factory(settings):
        return QAClient(transport=httpx.MockTransport(handler), settings=settings)

    return factory


class TestAsyncTurns:
    async def test_text_turn_extends_snapshot(self, mock_qa_client):
        first = await text_turn(ChatState(), "What is the curfew time?", mock_qa_client)
        second = await text_turn(first, "And on weekends?", mock_qa_client)

        assert _transcript(second) == [
            ("What is the curfew time?", True),
            ("10 PM", False),
            ("And on weekends?", True),
            ("10 PM", False),
        ]
        assert second.phase is ChatPhase.idle

    async def test_voice_turn_submits_last_partial(self, mock_qa_client, make_transcriber):
        transcriber = make_transcriber(script=["hel", "hello"])

        state = await voice_turn(ChatState(), mock_qa_client, transcriber)

        mock_qa_client.ask.assert_awaited_once_with("hello")
        assert _transcript(state) == [("hello", True), ("10 PM", False)]
        assert not transcriber.is_capturing

    async def test_voice_turn_without_speech(self, mock_qa_client, make_transcriber):
        transcriber = make_transcriber(script=[])

        state = await voice_turn(ChatState(), mock_qa_client, transcriber)

        assert state.history == ()
        assert state.phase is ChatPhase.idle
        mock_qa_client.ask.assert_not_awaited()

    async def test_voice_turn_failure_mid_capture(self, mock_qa_client, make_transcriber):
        transcriber = make_transcriber(
            script=["partial"], script_error=TranscriptionRuntimeError("mic unplugged")
        )

        state = await voice_turn(ChatState(), mock_qa_client, transcriber)

        assert state.history == ()
        assert state.last_error.code == "TRANSCRIPTION_RUNTIME"
        mock_qa_client.ask.assert_not_awaited()


class TestSyncWrappers:
    def test_run_text_turn(self, settings):
        with patch("satark.ui.runner.QAClient", side_effect=_qa_factory("10 PM")):
            state = run_text_turn(ChatState(), "What is the curfew time?", settings)

        assert _transcript(state) == [("What is the curfew time?", True), ("10 PM", False)]

    def test_run_text_turn_server_error(self, settings):
        with patch("satark.ui.runner.QAClient", side_effect=_qa_factory(status=500)):
            state = run_text_turn(ChatState(), "test", settings)

        assert _transcript(state) == [("test", True)]
        assert state.last_error.status_code == 500

    def test_run_voice_turn(self, settings, sample_wav_bytes, make_transcriber):
        transcriber = make_transcriber(script=["hello"])
        with (
            patch("satark.ui.runner.QAClient", side_effect=_qa_factory("hi there")),
            patch("satark.ui.runner.create_transcriber", return_value=transcriber) as factory,
        ):
            state = run_voice_turn(ChatState(), sample_wav_bytes, settings)

        assert _transcript(state) == [("hello", True), ("hi there", False)]
        kwargs = factory.call_args.kwargs
        assert kwargs["source"].closed
        assert kwargs["settings"] is settings
