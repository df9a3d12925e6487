"""
Streamlit Frontend for taskledger

A chat window in front of the dispatcher. The page only:
1. Calls start() once per browser session and shows the greeting
2. Sends every chat line to handle()
3. Renders whatever text comes back (errors styled as errors)
4. Stops accepting input once 'bye' has ended the session

All parsing, validation and persistence happen in the core.
"""

import logging
from typing import Optional

import streamlit as st

from taskledger.config import get_settings
from taskledger.models.command import CommandResult
from taskledger.orchestrator import Dispatcher, create_dispatcher


# Page configuration
st.set_page_config(
    page_title="taskledger",
    page_icon="📝",
    layout="centered",
)


def get_dispatcher() -> Dispatcher:
    """Get or create this browser session's dispatcher."""
    if "dispatcher" not in st.session_state:
        logging.basicConfig(
            format="%(message)s",
            level=get_settings().app.log_level,
        )
        dispatcher = create_dispatcher()
        greeting = dispatcher.start()
        st.session_state.dispatcher = dispatcher
        st.session_state.messages = [("assistant", greeting, None)]
        st.session_state.session_ended = False
    return st.session_state.dispatcher


def render_message(role: str, text: str, result: Optional[CommandResult]) -> None:
    with st.chat_message(role):
        if result is not None and not result.success:
            st.error(text)
        else:
            st.text(text)


def main():
    """Main application entry point."""
    st.title("📝 taskledger")

    try:
        dispatcher = get_dispatcher()
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return

    for role, text, result in st.session_state.messages:
        render_message(role, text, result)

    if st.session_state.session_ended:
        st.info("Session ended. Reload the page to start again.")
        return

    line = st.chat_input("Type a command, e.g. todo read book")
    if not line:
        return

    result = dispatcher.handle(line)
    st.session_state.messages.append(("user", line, None))
    st.session_state.messages.append(("assistant", result.message, result))
    if result.session_ended:
        st.session_state.session_ended = True
    st.rerun()


if __name__ == "__main__":
    main()
