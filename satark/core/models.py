"""
Pydantic v2 models shared by the chat session, the QA client and the UI.

Chat — Message, ErrorInfo, ChatPhase, ChatState (immutable snapshots)
Wire — QARequest, QAResponse
"""

import itertools
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from satark.core.exceptions import NetworkStatusError, SatarkError

_message_ids = itertools.count(1)


def _next_message_id() -> int:
    return next(_message_ids)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """One chat bubble. Ids increase in generation order."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(default_factory=_next_message_id)
    text: str
    is_user: bool
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ErrorInfo(BaseModel):
    """User-visible description of the last failure."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    status_code: int | None = None

    @classmethod
    def from_exception(cls, exc: SatarkError) -> "ErrorInfo":
        """Build the descriptor shown in the chat window for ``exc``."""
        status_code = exc.status_code if isinstance(exc, NetworkStatusError) else None
        return cls(code=exc.code, message=exc.user_message, status_code=status_code)


class ChatPhase(StrEnum):
    """Possible states of a chat session."""

    idle = "idle"
    recording = "recording"
    awaiting = "awaiting"


class ChatState(BaseModel):
    """Immutable snapshot of a chat session.

    ``history`` is append-only; insertion order is display order. At most
    one of ``is_recording`` / ``is_awaiting_response`` is ever true.
    """

    model_config = ConfigDict(frozen=True)

    history: tuple[Message, ...] = ()
    input_buffer: str = ""
    is_recording: bool = False
    is_awaiting_response: bool = False
    last_error: ErrorInfo | None = None

    @property
    def phase(self) -> ChatPhase:
        if self.is_recording:
            return ChatPhase.recording
        if self.is_awaiting_response:
            return ChatPhase.awaiting
        return ChatPhase.idle


# ---------------------------------------------------------------------------
# Wire
# ---------------------------------------------------------------------------


class QARequest(BaseModel):
    """POST body sent to the QA endpoint."""

    question: str


class QAResponse(BaseModel):
    """Successful QA endpoint response. Extra fields are ignored."""

    answer: StrictStr
