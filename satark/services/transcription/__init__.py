"""
Transcription module - Speech-to-text abstraction layer.

Factory function for creating STT instances based on provider configuration.
"""

from .base import BaseTranscriber

__all__ = ["BaseTranscriber", "create_transcriber"]


def create_transcriber(provider: str, **kwargs) -> BaseTranscriber:
    """
    Factory function to create an STT instance based on provider.

    Args:
        provider: STT provider name ("whisper" or "local")
        **kwargs: Provider-specific configuration (``source`` is required
            for Whisper)

    Returns:
        BaseTranscriber implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "whisper" or provider == "local":
        from .whisper import WhisperTranscriber
        return WhisperTranscriber(**kwargs)
    else:
        raise ValueError(f"Unknown STT provider: {provider}")
