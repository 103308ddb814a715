import os
import time
from typing import Any, Tuple

import streamlit as st

from portfolio_chat.core.conversation import Conversation, run_local_command
from portfolio_chat.core.profile import PortfolioPage
from portfolio_chat.core.typing_effect import REPLY_TYPING, TypingConfig, TypingController
from portfolio_chat.settings import get_settings
from portfolio_chat.ui.client import ChatClient, get_health_cached

BOOT_TYPING = TypingConfig(chars_per_second=90.0, min_length_for_animation=0)


def _get_conversation() -> Conversation:
    conv = st.session_state.get("conversation")
    if not isinstance(conv, Conversation):
        conv = Conversation()
        st.session_state["conversation"] = conv
        # rendered transcript: (role, text) pairs, including system lines
        st.session_state["transcript"] = []
    return conv


def _transcript() -> list:
    return st.session_state.setdefault("transcript", [])


@st.cache_data(show_spinner=False)
def _load_page(html_path: str, owner_name: str, mtime: float) -> PortfolioPage:
    with open(html_path, "r", encoding="utf-8") as f:
        return PortfolioPage.from_html(f.read(), owner_name)


def _portfolio_page(html_path: str, owner_name: str) -> PortfolioPage:
    if not os.path.exists(html_path):
        return PortfolioPage(owner_name=owner_name)
    return _load_page(html_path, owner_name, os.path.getmtime(html_path))


def _render_health_sidebar(client: ChatClient) -> Tuple[bool, Any]:
    st.sidebar.subheader("Chat relay")
    status = st.sidebar.empty()
    if st.sidebar.button("Re-check"):
        st.session_state["_health_force_refresh"] = time.time()

    ok, info = get_health_cached(client, st.session_state)
    if ok:
        model = info.get("model") if isinstance(info, dict) else None
        status.success(f"Online ({model or 'unknown model'})")
    else:
        status.error(f"Offline: {info}")
    return ok, info


def _boot(conv: Conversation, animate: bool) -> None:
    lines = conv.boot()
    with st.chat_message("assistant"):
        for line in lines:
            if animate:
                st.write_stream(TypingController(BOOT_TYPING).stream(line))
            else:
                st.markdown(line)
    _transcript().extend(("assistant", line) for line in lines)


def _reply(client: ChatClient, conv: Conversation, prompt: str, page: PortfolioPage) -> None:
    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            reply = client.ask(conv, prompt, page.context)
        controller = TypingController(REPLY_TYPING)
        if st.session_state.get("instant_replies"):
            controller.skip()
        st.write_stream(controller.stream(reply))
    _transcript().append(("assistant", reply))


def main() -> None:
    settings = get_settings()
    client = ChatClient(settings.api_url, timeout_s=settings.request_timeout_s)

    st.set_page_config(page_title=f"{settings.owner_name} | AI Terminal", layout="centered")
    st.title("AI Terminal")
    st.caption(f"Ask about {settings.owner_name}'s resume and projects.")

    ok, info = _render_health_sidebar(client)
    if not ok:
        st.warning(
            f"Chat relay is unreachable at {settings.api_url} ({info}). "
            "Local commands still work; questions will fail until the API is up."
        )
    st.sidebar.toggle("Instant replies", key="instant_replies")

    page = _portfolio_page(settings.portfolio_html, settings.owner_name)
    conv = _get_conversation()

    for role, text in _transcript():
        with st.chat_message(role):
            st.markdown(text)

    if not conv.booted:
        _boot(conv, animate=not st.session_state.get("instant_replies"))

    prompt = st.chat_input("Type a question or 'help'")
    if not prompt or not prompt.strip():
        return
    prompt = prompt.strip()

    with st.chat_message("user"):
        st.markdown(prompt)
    _transcript().append(("user", prompt))

    result = run_local_command(prompt, conv, page, settings.contact_email)
    if result is None:
        _reply(client, conv, prompt, page)
        return

    if result.replay_boot:
        st.session_state["transcript"] = []
        st.rerun()
    if result.text:
        with st.chat_message("assistant"):
            st.markdown(result.text)
        _transcript().append(("assistant", result.text))


if __name__ == "__main__":
    main()
