"""Errors raised by the chat relay, each carrying the HTTP status it maps to."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ChatRelayError(Exception):
    """
    Base error for the relay.

    Attributes:
        message: Short error description returned to the caller
        status_code: HTTP status the API layer responds with
        details: Optional upstream body or extra diagnostic text
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MissingApiKeyError(ChatRelayError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("HF_API_KEY missing")


class UpstreamModelError(ChatRelayError):
    status_code = 502


class EmptyModelReply(ChatRelayError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("Empty response from model")
