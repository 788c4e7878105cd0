"""
Chat module - session state machine and its asyncio driver.
"""

from .session import ChatSession
from .state import Transition, transition

__all__ = ["ChatSession", "Transition", "transition"]
