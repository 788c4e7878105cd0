"""
QA module - client for the remote question-answering endpoint.
"""

from .base import BaseQAClient
from .client import QAClient

__all__ = ["BaseQAClient", "QAClient"]
