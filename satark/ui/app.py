"""
Satark AI Streamlit UI — main entry point.

Run with: ``streamlit run satark/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from satark.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (satark/ui/),
# which removes the project root needed for absolute ``satark.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from satark.core.config import get_settings  # noqa: E402
from satark.core.log import configure_logging  # noqa: E402
from satark.core.models import ChatState  # noqa: E402
from satark.ui.components.chat import render_history, render_status  # noqa: E402
from satark.ui.runner import run_text_turn, run_voice_turn  # noqa: E402

_settings = get_settings()
configure_logging(_settings.log_level)

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=_settings.app_title,
    page_icon="\U0001f6e1\ufe0f",
    layout="centered",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
if "chat_state" not in st.session_state:
    st.session_state.chat_state = ChatState()
if "voice_clip_key" not in st.session_state:
    st.session_state.voice_clip_key = 0

st.title(_settings.app_title)

state: ChatState = st.session_state.chat_state
render_history(state)
render_status(state)

# ---------------------------------------------------------------------------
# Voice input
# ---------------------------------------------------------------------------
audio = st.audio_input("Ask by voice", key=f"voice_clip_{st.session_state.voice_clip_key}")
if audio is not None:
    with st.spinner("Listening..."):
        st.session_state.chat_state = run_voice_turn(state, audio.getvalue(), _settings)
    # A fresh widget key discards the consumed clip on the next rerun
    st.session_state.voice_clip_key += 1
    st.rerun()

# ---------------------------------------------------------------------------
# Text input
# ---------------------------------------------------------------------------
question = st.chat_input("Type a message...")
if question:
    with st.spinner("Thinking..."):
        st.session_state.chat_state = run_text_turn(state, question, _settings)
    st.rerun()
