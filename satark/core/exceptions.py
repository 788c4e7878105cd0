"""
Satark exception hierarchy.

All application-specific exceptions inherit from SatarkError, enabling
centralized recovery at the chat session boundary. Each class carries a
stable ``code`` and the ``user_message`` shown in the chat window.
"""

from datetime import UTC, datetime


class SatarkError(Exception):
    """Base exception for all Satark errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SATARK_ERROR",
        user_message: str = "Something went wrong. Please try again.",
    ) -> None:
        self.detail = detail
        self.code = code
        self.user_message = user_message
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionError(SatarkError):
    """Base class for speech-to-text failures."""


class TranscriptionAuthError(TranscriptionError):
    """Raised when audio capture is denied, restricted or not yet permitted."""

    def __init__(self, detail: str = "Microphone access denied") -> None:
        super().__init__(
            detail=detail,
            code="TRANSCRIPTION_AUTH",
            user_message="Microphone access was denied. Enable it to use voice input.",
        )


class TranscriptionRuntimeError(TranscriptionError):
    """Raised when the STT engine or the audio input fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(
            detail=detail,
            code="TRANSCRIPTION_RUNTIME",
            user_message="Speech recognition failed. Please try again.",
        )


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


class NetworkError(SatarkError):
    """Base class for failures talking to the QA endpoint."""


class NetworkTransportError(NetworkError):
    """Raised on DNS, connection, timeout or other transport failures."""

    def __init__(self, detail: str = "Transport failure") -> None:
        super().__init__(
            detail=detail,
            code="NETWORK_TRANSPORT",
            user_message="Error: Unable to get response",
        )


class NetworkStatusError(NetworkError):
    """Raised when the QA endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(
            detail=detail or f"Unexpected HTTP status {status_code}",
            code="NETWORK_STATUS",
            user_message=f"Error: Server returned HTTP {status_code}",
        )


class NetworkDecodeError(NetworkError):
    """Raised when the response body is not valid JSON."""

    def __init__(
        self,
        detail: str = "Response body is not valid JSON",
        code: str = "NETWORK_DECODE",
        user_message: str = "Error: Failed to decode response",
    ) -> None:
        super().__init__(detail=detail, code=code, user_message=user_message)


class NetworkResponseFormatError(NetworkDecodeError):
    """Raised when the JSON body lacks a string ``answer`` field."""

    def __init__(self, detail: str = "Response has no string 'answer' field") -> None:
        super().__init__(
            detail=detail,
            code="NETWORK_RESPONSE_FORMAT",
            user_message="Error: Invalid response format",
        )
