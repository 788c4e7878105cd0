"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Satark chat settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        qa_endpoint_url: Full URL of the remote question-answering endpoint.
        qa_timeout_seconds: Network timeout for one question (None = wait forever).
        whisper_model: faster-whisper model size used for voice input.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Remote QA service ---
    qa_endpoint_url: str = "https://satark-ai-f0xr.onrender.com/qa"
    qa_timeout_seconds: float | None = None

    # --- Whisper STT ---
    whisper_provider: str = "local"
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"
    transcription_language: str = ""  # Empty = auto-detect; ISO 639-1 code e.g. "hi", "en"
    transcription_chunk_seconds: float = 1.0  # Audio fed between partial transcripts

    # --- Application ---
    app_title: str = "Satark AI"
    log_level: str = "INFO"  # Python logging level


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
