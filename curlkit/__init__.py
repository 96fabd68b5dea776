"""Fluent HTTP request builder on top of ``requests``."""

from .core import (
    CurlError,
    HttpMethod,
    InternalError,
    InvalidRequest,
    MissingMethod,
    MissingURL,
    Request,
    Response,
    SerializationError,
    TransportError,
    new_request,
)

__version__ = "0.1.0"

__all__ = [
    "CurlError",
    "HttpMethod",
    "InternalError",
    "InvalidRequest",
    "MissingMethod",
    "MissingURL",
    "Request",
    "Response",
    "SerializationError",
    "TransportError",
    "new_request",
]
