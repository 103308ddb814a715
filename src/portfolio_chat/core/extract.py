from __future__ import annotations

import json
import re
from typing import Any, Optional

_JSON_LIKE = re.compile(r"^[\[{]\s*[\"'A-Za-z0-9]")
_NESTED_KEYS = ("result", "data", "response", "output")


def _looks_like_json(s: Any) -> bool:
    return isinstance(s, str) and bool(s.strip()) and bool(_JSON_LIKE.match(s.strip()))


def _clean(s: Any) -> Optional[str]:
    if not isinstance(s, str):
        return None
    s = s.strip()
    return s or None


def _parse_and_extract(s: str) -> Optional[str]:
    try:
        parsed = json.loads(s)
    except ValueError:
        return None
    return extract_model_text(parsed)


def _join_parts(parts: list) -> Optional[str]:
    texts = []
    for p in parts:
        if isinstance(p, str):
            texts.append(p)
        elif isinstance(p, dict):
            texts.append(p.get("text") or p.get("content") or "")
    return _clean("\n\n".join(t for t in texts if isinstance(t, str)))


def _from_choices(choices: list) -> Optional[str]:
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        message = choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None

        parts = content.get("parts") if isinstance(content, dict) else content
        if isinstance(parts, list) and parts:
            txt = _join_parts(parts)
            if txt:
                return txt

        txt = _clean(choice.get("text"))
        if txt:
            return txt

        txt = _clean(content)
        if txt:
            return txt
    return None


def _first_string(obj: Any, seen: set[int]) -> Optional[str]:
    if obj is None or isinstance(obj, (bool, int, float)):
        return None
    if isinstance(obj, str):
        return _clean(obj)
    if id(obj) in seen:
        return None
    seen.add(id(obj))
    if isinstance(obj, (list, tuple)):
        for item in obj:
            found = _first_string(item, seen)
            if found:
                return found
    elif isinstance(obj, dict):
        for value in obj.values():
            found = _first_string(value, seen)
            if found:
                return found
    return None


def extract_model_text(payload: Any) -> Optional[str]:
    """Pull the model's text out of a loosely structured payload.

    Understands plain strings, JSON encoded as a string, ``{"reply": ...}``,
    ``{"text": ...}``, ``content.parts`` and OpenAI-style ``choices``, then
    looks inside ``result``/``data``/``response``/``output``. As a last resort
    it returns the first non-empty string found anywhere in the structure.

    Args:
        payload: Decoded JSON value (or raw text).

    Returns:
        Stripped text, or None when nothing usable exists.
    """
    if isinstance(payload, str) and _looks_like_json(payload):
        inner = _parse_and_extract(payload)
        if inner:
            return inner

    if payload is None:
        return None

    if isinstance(payload, str):
        return _clean(payload)

    if not isinstance(payload, (dict, list)):
        return None

    if isinstance(payload, dict):
        reply = payload.get("reply")
        if isinstance(reply, str):
            candidate = reply.strip()
            if _looks_like_json(candidate):
                inner = _parse_and_extract(candidate)
                if inner:
                    return inner
            elif candidate:
                return candidate

        txt = _clean(payload.get("text"))
        if txt:
            return txt

        content = payload.get("content")
        if isinstance(content, dict) and isinstance(content.get("parts"), list):
            txt = _join_parts(content["parts"])
            if txt:
                return txt

        choices = payload.get("choices")
        if isinstance(choices, list) and choices:
            txt = _from_choices(choices)
            if txt:
                return txt

        for key in _NESTED_KEYS:
            if payload.get(key):
                sub = extract_model_text(payload[key])
                if sub:
                    return sub

    return _first_string(payload, set())
