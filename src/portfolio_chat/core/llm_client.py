from __future__ import annotations

import logging
from typing import Any, Dict, List

from openai import APIConnectionError, APIStatusError, OpenAI

from portfolio_chat.core.errors import EmptyModelReply, MissingApiKeyError, UpstreamModelError
from portfolio_chat.settings import get_settings

logger = logging.getLogger(__name__)


def _error_body(exc: APIStatusError) -> str:
    try:
        return exc.response.text
    except Exception:
        return str(exc)


def call_chat_completion(
    messages: List[Dict[str, str]],
    *,
    settings: Any | None = None,
) -> str:
    """Send one chat-completion request and return the raw reply text.

    No retries: a failed call is reported to the caller as-is.

    Raises:
        MissingApiKeyError: no key configured.
        UpstreamModelError: non-2xx status or unreachable endpoint.
        EmptyModelReply: the first choice carries no content.
    """
    settings = settings or get_settings()
    api_key = getattr(settings, "hf_api_key", None)
    if not api_key:
        raise MissingApiKeyError()

    client = OpenAI(
        api_key=api_key,
        base_url=settings.hf_base_url,
        timeout=float(settings.request_timeout_s),
        max_retries=0,
    )

    try:
        completion = client.chat.completions.create(
            model=settings.chat_model,
            messages=messages,
            temperature=float(settings.temperature),
            max_tokens=int(settings.max_tokens),
        )
    except APIStatusError as exc:
        body = _error_body(exc)
        logger.error("HF API error: %s %s", exc.status_code, body)
        raise UpstreamModelError("Model inference failed", details=body) from exc
    except APIConnectionError as exc:
        logger.error("HF API unreachable: %s", exc)
        raise UpstreamModelError("Model endpoint unreachable", details=str(exc)) from exc

    choices = getattr(completion, "choices", None) or []
    content = choices[0].message.content if choices else None
    reply = (content or "").strip()
    if not reply:
        raise EmptyModelReply()
    return reply
