"""Core request/response primitives."""

from .errors import (
    CurlError,
    InternalError,
    InvalidRequest,
    MissingMethod,
    MissingURL,
    SerializationError,
    TransportError,
)
from .request import HttpMethod, Request, new_request
from .response import Response

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
