"""
HTTP client for the remote Satark question-answering endpoint.

Uses ``httpx.AsyncClient`` so the request runs off the session's state
update path; the result is posted back to the session as an event.
Exactly one request is sent per ``ask`` call. There are no retries.
"""

import logging

import httpx
from pydantic import ValidationError

from satark.core.config import get_settings
from satark.core.exceptions import (
    NetworkDecodeError,
    NetworkResponseFormatError,
    NetworkStatusError,
    NetworkTransportError,
)
from satark.core.models import QARequest, QAResponse
from satark.services.qa.base import BaseQAClient

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class QAClient(BaseQAClient):
    """Thin async wrapper around httpx for the ``POST /qa`` endpoint.

    Maps every failure to a distinct ``NetworkError`` subclass so the chat
    session can show a specific message.
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        settings=None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            endpoint_url: Full URL of the QA endpoint (falls back to settings).
            timeout: Seconds to wait for the response (falls back to settings;
                None disables the timeout).
            transport: Optional httpx transport, used by tests.
            settings: Optional Settings instance (defaults to get_settings()).
        """
        settings = settings or get_settings()
        self._endpoint_url = endpoint_url or settings.qa_endpoint_url
        self._timeout = timeout if timeout is not None else settings.qa_timeout_seconds
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=transport)

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    async def __aenter__(self) -> "QAClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def ask(self, question: str) -> str:
        """Send ``question`` and return the answer.

        Raises:
            ValueError: If ``question`` is blank.
            NetworkTransportError: DNS, connection or timeout failure.
            NetworkStatusError: Non-2xx HTTP status.
            NetworkDecodeError: Body is not valid JSON.
            NetworkResponseFormatError: JSON lacks a string ``answer``.
        """
        if not question or not question.strip():
            raise ValueError("question must not be empty")

        body = QARequest(question=question).model_dump()
        logger.debug("POST %s (%d chars)", self._endpoint_url, len(question))

        try:
            resp = await self._client.post(self._endpoint_url, json=body, headers=_JSON_HEADERS)
        except httpx.TimeoutException as exc:
            logger.warning("QA request timed out (%s): %s", self._endpoint_url, exc)
            raise NetworkTransportError(f"Request timed out: {exc}") from exc
        except httpx.RequestError as exc:
            logger.warning("QA request failed (%s): %s", self._endpoint_url, exc)
            raise NetworkTransportError(f"Request failed: {exc}") from exc

        if not resp.is_success:
            logger.warning("QA endpoint returned HTTP %s", resp.status_code)
            raise NetworkStatusError(resp.status_code, detail=resp.text[:200] or None)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning("QA response is not JSON: %s", exc)
            raise NetworkDecodeError(f"Invalid JSON body: {exc}") from exc

        if not isinstance(payload, dict):
            raise NetworkResponseFormatError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        try:
            result = QAResponse.model_validate(payload)
        except ValidationError as exc:
            logger.warning("QA response has no usable answer: %s", exc.errors())
            raise NetworkResponseFormatError(str(exc)) from exc

        return result.answer
