"""
Abstract base class for question-answering clients.

The chat session only depends on this interface, so tests can substitute
a double that answers, fails or stalls deterministically.
"""

from abc import ABC, abstractmethod


class BaseQAClient(ABC):
    """Interface that every QA client must implement."""

    @abstractmethod
    async def ask(self, question: str) -> str:
        """Send one question and return the answer text.

        Args:
            question: Non-empty question text.

        Returns:
            The ``answer`` string from the remote service.

        Raises:
            NetworkError: One subclass per failure kind (transport, status,
                decode, response format).
        """

    async def aclose(self) -> None:
        """Release any network resources held by the client."""
