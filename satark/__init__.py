"""Satark AI chat front-end: chat session state machine, QA client and voice input."""

__version__ = "0.1.0"
