"""
Audio module - PCM processing, buffering and capture sources.
"""

from .buffer import AudioBuffer
from .processor import AudioProcessor
from .sources import AudioSource, ClipSource

__all__ = ["AudioBuffer", "AudioProcessor", "AudioSource", "ClipSource"]
