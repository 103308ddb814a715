from __future__ import annotations

import logging
import time
from typing import Any, MutableMapping, Optional, Tuple

import requests

from portfolio_chat.core.conversation import Conversation
from portfolio_chat.core.extract import extract_model_text

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response"
HEALTH_TTL_S = 10.0


def api_request(
    method: str, api_base: str, path: str, timeout_s: float = 10.0, **kwargs: Any
) -> Tuple[bool, Any, str]:
    """Call the API and normalize success/error responses.

    Args:
        method: HTTP method.
        api_base: Base URL for the API.
        path: Route path, starting with a slash.
        timeout_s: Request timeout in seconds (optional).
        **kwargs: Passed through to ``requests.request``.

    Returns:
        Tuple of (ok, decoded body, error text).
    """
    url = api_base.rstrip("/") + path
    try:
        resp = requests.request(method, url, timeout=timeout_s, **kwargs)
    except Exception as exc:
        return False, None, str(exc)

    if resp.status_code >= 400:
        return False, None, f"HTTP {resp.status_code}: {resp.text.strip()}"

    if resp.text:
        try:
            return True, resp.json(), ""
        except Exception:
            return True, resp.text, ""
    return True, None, ""


class ChatClient:
    """Talks to the chat relay on behalf of the terminal widget."""

    def __init__(self, api_base: str, timeout_s: float = 60.0) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout_s = timeout_s

    def health(self) -> Tuple[bool, Any, str]:
        return api_request("GET", self.api_base, "/api/health", timeout_s=1.5)

    def resume(self) -> Tuple[bool, Any, str]:
        return api_request("GET", self.api_base, "/api/resume", timeout_s=10.0)

    def ask(self, conversation: Conversation, message: str, context: str) -> str:
        """Send a question and return the text to show in the assistant bubble.

        Only successful replies are recorded in the conversation history; HTTP
        and network failures come back as display text.
        """
        conversation.add_user(message)
        payload = conversation.build_payload(message, context)

        conversation.pending = True
        try:
            resp = requests.post(
                f"{self.api_base}/api/chat", json=payload, timeout=(3, self.timeout_s)
            )
        except requests.RequestException as exc:
            logger.warning("Chat request failed: %s", exc)
            return f"Network error: {exc}"
        finally:
            conversation.pending = False

        if not resp.ok:
            return f"Error: {resp.text}"

        try:
            data = resp.json()
        except ValueError:
            data = resp.text
        reply = extract_model_text(data) or NO_RESPONSE
        conversation.add_assistant(reply)
        return reply


def get_health_cached(
    client: ChatClient,
    state: MutableMapping[str, Any],
    ttl_s: float = HEALTH_TTL_S,
    now: Optional[float] = None,
) -> Tuple[bool, Any]:
    """Return the relay health, re-checking only when the TTL has passed.

    Setting ``state["_health_force_refresh"]`` to a time after the last check
    forces a new request on the next call.

    Args:
        client: Client for the chat relay.
        state: Session state holding the cached result.
        ttl_s: Seconds a result stays fresh (optional).
        now: Current time; defaults to ``time.time()``.

    Returns:
        Tuple of (ok, health payload or error text).
    """
    now = time.time() if now is None else now
    last = state.get("_health_last_checked", 0.0)
    force = state.get("_health_force_refresh", 0.0)

    if (now - last) > ttl_s or force > last:
        ok, data, err = client.health()
        state["_health_ok"] = ok
        state["_health_info"] = data if ok else err
        state["_health_last_checked"] = now

    return state.get("_health_ok", False), state.get("_health_info", "not checked")
