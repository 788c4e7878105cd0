"""
Chat components — message list and error banner.
"""

import streamlit as st

from satark.core.models import ChatState, Message

_ROLES = {True: "user", False: "assistant"}


def render_message(message: Message) -> None:
    """Render one chat bubble with the user or assistant role."""
    with st.chat_message(_ROLES[message.is_user]):
        st.markdown(message.text)


def render_history(state: ChatState) -> None:
    """Render the whole conversation in insertion order."""
    if not state.history:
        st.caption("Ask a question by typing below or recording your voice.")
        return
    for message in state.history:
        render_message(message)


def render_status(state: ChatState) -> None:
    """Show the last error, if any."""
    if state.last_error is not None:
        st.error(state.last_error.message)
