"""Chat session state machine.

``transition(state, event)`` is a pure function: it returns the next
immutable ``ChatState`` together with the side-effect commands the driver
must run (send a question, start or stop audio capture). Events that are
not valid in the current phase leave the state unchanged and produce no
commands.

Phases::

    idle --Submit--> awaiting --ResponseReceived/ResponseFailed--> idle
    idle --ToggleRecording--> recording --ToggleRecording--> idle | awaiting
    recording --TranscriptionFailed--> idle
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple

from satark.core.models import ChatPhase, ChatState, ErrorInfo, Message

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Submit:
    text: str


@dataclass(frozen=True)
class UpdateInput:
    text: str


@dataclass(frozen=True)
class ToggleRecording:
    pass


@dataclass(frozen=True)
class TranscriptionUpdated:
    text: str


@dataclass(frozen=True)
class TranscriptionFailed:
    error: ErrorInfo


@dataclass(frozen=True)
class ResponseReceived:
    answer: str


@dataclass(frozen=True)
class ResponseFailed:
    error: ErrorInfo


Event = (
    Submit
    | UpdateInput
    | ToggleRecording
    | TranscriptionUpdated
    | TranscriptionFailed
    | ResponseReceived
    | ResponseFailed
)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SendQuestion:
    question: str


@dataclass(frozen=True)
class StartCapture:
    pass


@dataclass(frozen=True)
class StopCapture:
    pass


Command = SendQuestion | StartCapture | StopCapture


class Transition(NamedTuple):
    """Result of applying one event."""

    state: ChatState
    commands: tuple[Command, ...] = ()


def _unchanged(state: ChatState, event: Event, level: int = logging.DEBUG) -> Transition:
    logger.log(level, "Ignored %s in phase %s", type(event).__name__, state.phase.value)
    return Transition(state)


def _begin_turn(state: ChatState, text: str, *extra: Command) -> Transition:
    """Append the user message and ask the question. ``text`` is already trimmed."""
    message = Message(text=text, is_user=True)
    new_state = state.model_copy(
        update={
            "history": state.history + (message,),
            "input_buffer": "",
            "is_recording": False,
            "is_awaiting_response": True,
            "last_error": None,
        }
    )
    return Transition(new_state, (*extra, SendQuestion(text)))


def transition(state: ChatState, event: Event) -> Transition:
    """Apply ``event`` to ``state`` and return the next state and commands."""
    phase = state.phase

    if isinstance(event, Submit):
        text = event.text.strip()
        if not text:
            return Transition(state)
        if phase is not ChatPhase.idle:
            return _unchanged(state, event, logging.WARNING)
        return _begin_turn(state, text)

    if isinstance(event, UpdateInput):
        if phase is ChatPhase.recording:
            return _unchanged(state, event)
        return Transition(state.model_copy(update={"input_buffer": event.text}))

    if isinstance(event, ToggleRecording):
        if phase is ChatPhase.idle:
            new_state = state.model_copy(
                update={"is_recording": True, "input_buffer": "", "last_error": None}
            )
            return Transition(new_state, (StartCapture(),))
        if phase is ChatPhase.recording:
            transcript = state.input_buffer.strip()
            if transcript:
                return _begin_turn(state, transcript, StopCapture())
            new_state = state.model_copy(update={"is_recording": False, "input_buffer": ""})
            return Transition(new_state, (StopCapture(),))
        return _unchanged(state, event, logging.WARNING)

    if isinstance(event, TranscriptionUpdated):
        if phase is not ChatPhase.recording:
            return _unchanged(state, event)
        return Transition(state.model_copy(update={"input_buffer": event.text}))

    if isinstance(event, TranscriptionFailed):
        if phase is not ChatPhase.recording:
            return _unchanged(state, event)
        new_state = state.model_copy(update={"is_recording": False, "last_error": event.error})
        return Transition(new_state, (StopCapture(),))

    if isinstance(event, ResponseReceived):
        if phase is not ChatPhase.awaiting:
            return _unchanged(state, event)
        message = Message(text=event.answer, is_user=False)
        new_state = state.model_copy(
            update={
                "history": state.history + (message,),
                "is_awaiting_response": False,
                "last_error": None,
            }
        )
        return Transition(new_state)

    if isinstance(event, ResponseFailed):
        if phase is not ChatPhase.awaiting:
            return _unchanged(state, event)
        new_state = state.model_copy(
            update={"is_awaiting_response": False, "last_error": event.error}
        )
        return Transition(new_state)

    raise TypeError(f"Unknown chat event: {event!r}")
