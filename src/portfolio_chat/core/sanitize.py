from __future__ import annotations

import re

FALLBACK_REPLY = "I don't know."

_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
_INLINE_CODE = re.compile(r"`([^`]*)`")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")
_EXTRA_SPACES = re.compile(r"[ \t]{2,}")


def sanitize_reply_text(text: str | None) -> str:
    """Clean a model reply for plain-text display.

    Fenced code blocks are dropped, inline code keeps its content, and
    whitespace is normalized. Punctuation, parentheses and acronyms are kept.

    Args:
        text: Raw model output.

    Returns:
        Sanitized text, possibly empty.
    """
    if not text:
        return ""
    t = str(text)
    t = _FENCED_BLOCK.sub("", t)
    t = _INLINE_CODE.sub(r"\1", t)
    t = t.replace("\r\n", "\n").replace("\r", "\n")
    t = _EXTRA_NEWLINES.sub("\n\n", t)
    t = _EXTRA_SPACES.sub(" ", t)
    return t.strip()


def finalize_reply(text: str | None) -> str:
    """Sanitize and fall back to a safe unknown answer when nothing is left."""
    return sanitize_reply_text(text) or FALLBACK_REPLY
