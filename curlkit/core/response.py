"""Response wrapper populated from a ``requests`` response."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests

_DEFAULT_CHARSET = "utf-8"


@dataclass(slots=True)
class Response:
    """Parsed view over a completed ``requests.Response``.

    ``headers`` and ``body`` start empty and are filled by
    :meth:`parse_headers` and :meth:`parse_body`; :meth:`from_raw` runs both.
    The underlying stream is closed once the body has been read.
    """

    raw: requests.Response
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    text: str = ""

    @classmethod
    def from_raw(cls, raw: requests.Response) -> "Response":
        response = cls(raw=raw)
        try:
            response.parse_headers()
            response.parse_body()
        finally:
            raw.close()
        return response

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def reason(self) -> str:
        return self.raw.reason or ""

    @property
    def url(self) -> str:
        return self.raw.url or ""

    @property
    def ok(self) -> bool:
        return self.raw.ok

    def parse_headers(self) -> dict[str, str]:
        self.headers = {str(k): str(v) for k, v in self.raw.headers.items()}
        return self.headers

    def parse_body(self) -> bytes:
        try:
            self.body = self.raw.content or b""
        finally:
            self.raw.close()
        self.text = _decode_body(self.body, _charset_from_headers(self.headers))
        return self.body

    def json(self) -> Any:
        """Decode the body as JSON; raises ``json.JSONDecodeError`` on bad input."""
        return json.loads(self.text)


def _charset_from_headers(headers: Mapping[str, str]) -> str | None:
    content_type = ""
    for key, value in headers.items():
        if key.lower() == "content-type":
            content_type = value
            break
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.strip().lower() == "charset" and value:
            return value.strip("\"' ")
    return None


def _decode_body(body: bytes, charset: str | None) -> str:
    if not body:
        return ""
    if charset:
        try:
            return body.decode(charset, errors="replace")
        except LookupError:
            pass
    return body.decode(_DEFAULT_CHARSET, errors="replace")


__all__ = ["Response"]
