"""Chat session driver.

Owns the current ``ChatState`` snapshot, applies events through the pure
``transition`` function, and runs the resulting commands as asyncio tasks.
Every state change happens on the session's event loop: I/O results are
posted back as events, and ``post`` marshals calls coming from other
threads with ``call_soon_threadsafe``.

Usage::

    async with QAClient() as client:
        session = ChatSession(client)
        session.submit("What is the curfew time?")
        await session.wait_idle()
        print(session.state.history[-1].text)
"""

import asyncio
import logging
from collections.abc import Callable

from satark.core.exceptions import (
    NetworkError,
    NetworkTransportError,
    TranscriptionError,
    TranscriptionRuntimeError,
)
from satark.core.models import ChatPhase, ChatState, ErrorInfo
from satark.services.chat.state import (
    Command,
    Event,
    ResponseFailed,
    ResponseReceived,
    SendQuestion,
    StartCapture,
    StopCapture,
    Submit,
    ToggleRecording,
    TranscriptionFailed,
    TranscriptionUpdated,
    UpdateInput,
    transition,
)
from satark.services.qa.base import BaseQAClient
from satark.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)

StateListener = Callable[[ChatState], None]


class ChatSession:
    """Single chat conversation bound to one presentation surface.

    Args:
        client: QA client used for every question.
        transcriber: Optional speech-to-text provider for voice input.
        state: Snapshot to resume from (defaults to an empty conversation).
    """

    def __init__(
        self,
        client: BaseQAClient,
        transcriber: BaseTranscriber | None = None,
        state: ChatState | None = None,
    ) -> None:
        self._client = client
        self._transcriber = transcriber
        self._state = state or ChatState()
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._capture_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False

    @property
    def state(self) -> ChatState:
        return self._state

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- observation --

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Chat state listener %r failed", listener)

    # -- intents --

    def submit(self, text: str) -> ChatState:
        return self.dispatch(Submit(text))

    def toggle_recording(self) -> ChatState:
        return self.dispatch(ToggleRecording())

    def update_input_buffer(self, text: str) -> ChatState:
        return self.dispatch(UpdateInput(text))

    # -- event loop plumbing --

    def dispatch(self, event: Event) -> ChatState:
        """Apply ``event`` on the current loop and schedule its commands.

        Must be called from the event loop thread; use ``post`` elsewhere.
        """
        if self._closed:
            raise RuntimeError("ChatSession is closed")

        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise RuntimeError("ChatSession is bound to a different event loop")

        result = transition(self._state, event)
        if result.state is not self._state:
            self._state = result.state
            self._publish()

        for command in result.commands:
            self._schedule(command)
        return self._state

    def post(self, event: Event) -> None:
        """Deliver ``event`` from any thread onto the session's loop."""
        if self._closed:
            logger.debug("Dropped %s: session closed", type(event).__name__)
            return
        if self._loop is None:
            raise RuntimeError("ChatSession has not processed any event yet")

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self.dispatch(event)
        else:
            self._loop.call_soon_threadsafe(self._dispatch_posted, event)

    def _dispatch_posted(self, event: Event) -> None:
        if not self._closed:
            self.dispatch(event)

    def _schedule(self, command: Command) -> None:
        if isinstance(command, SendQuestion):
            coro = self._ask(command.question)
        elif isinstance(command, StartCapture):
            coro = self._start_capture()
        elif isinstance(command, StopCapture):
            coro = self._stop_capture()
        else:
            raise TypeError(f"Unknown chat command: {command!r}")

        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait until no request or capture command is outstanding."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Tear down: cancel outstanding commands and release audio capture."""
        if self._closed:
            return
        self._closed = True

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        if self._transcriber is not None:
            async with self._capture_lock:
                await self._transcriber.stop()
        logger.debug("Chat session closed (%d messages)", len(self._state.history))

    # -- commands --

    async def _ask(self, question: str) -> None:
        try:
            answer = await self._client.ask(question)
        except NetworkError as exc:
            logger.warning("Question failed [%s]: %s", exc.code, exc.detail)
            self.post(ResponseFailed(ErrorInfo.from_exception(exc)))
            return
        except Exception as exc:
            logger.exception("QA client raised an unexpected error")
            error = NetworkTransportError(f"Unexpected client failure: {exc}")
            self.post(ResponseFailed(ErrorInfo.from_exception(error)))
            return

        logger.info("Answer received (%d chars)", len(answer))
        self.post(ResponseReceived(answer))

    async def _start_capture(self) -> None:
        async with self._capture_lock:
            if self._state.phase is not ChatPhase.recording:
                return
            if self._transcriber is None:
                self._on_transcription_error(
                    TranscriptionRuntimeError("No speech-to-text provider configured")
                )
                return
            try:
                await self._transcriber.start(self._on_partial, self._on_transcription_error)
            except TranscriptionError as exc:
                self._on_transcription_error(exc)
            except Exception as exc:
                logger.exception("Transcriber failed to start")
                self._on_transcription_error(
                    TranscriptionRuntimeError(f"Could not start capture: {exc}")
                )

    async def _stop_capture(self) -> None:
        if self._transcriber is None:
            return
        async with self._capture_lock:
            try:
                await self._transcriber.stop()
            except Exception:
                logger.exception("Failed to release audio capture")

    def _on_partial(self, text: str) -> None:
        self.post(TranscriptionUpdated(text))

    def _on_transcription_error(self, exc: TranscriptionError) -> None:
        logger.warning("Transcription error [%s]: %s", exc.code, exc.detail)
        self.post(TranscriptionFailed(ErrorInfo.from_exception(exc)))
