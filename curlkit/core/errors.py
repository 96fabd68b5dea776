"""Exceptions raised while building and sending requests."""

from __future__ import annotations

import json
from typing import Any, Mapping

import requests

# Transport failures are the ``requests`` exceptions themselves, re-exported
# under a local name so callers can catch them without importing requests.
TransportError = requests.RequestException


class CurlError(RuntimeError):
    """Base class for errors raised by curlkit."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class InvalidRequest(CurlError, ValueError):
    """Raised when a request cannot be sent as configured."""


class MissingURL(InvalidRequest):
    def __init__(self) -> None:
        super().__init__("Lack of request url")


class MissingMethod(InvalidRequest):
    def __init__(self, *, url: str | None = None) -> None:
        super().__init__("Lack of request method", details={"url": url} if url else None)


class SerializationError(CurlError):
    """Raised when the JSON body cannot be encoded."""


class InternalError(CurlError):
    """Raised when an unexpected fault interrupts a send."""


__all__ = [
    "CurlError",
    "InvalidRequest",
    "MissingURL",
    "MissingMethod",
    "SerializationError",
    "InternalError",
    "TransportError",
]
