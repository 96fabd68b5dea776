"""Chainable request builder backed by ``requests``."""

from __future__ import annotations

import json
import urllib.parse
from enum import StrEnum
from typing import Any, Mapping

import requests
from requests.cookies import RequestsCookieJar, cookiejar_from_dict

from ..settings import HttpSettings
from ..utils.logging import get_logger
from .errors import CurlError, InternalError, MissingMethod, MissingURL, SerializationError
from .response import Response

_LOGGER = get_logger(__name__)


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


_BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT})


class Request:
    """Accumulates request configuration and sends it on demand.

    Setters overwrite their field and return the builder, so calls chain::

        resp = (
            Request()
            .set_url("https://example.org/items")
            .set_headers({"Accept": "application/json"})
            .set_queries({"page": "2"})
            .get()
        )

    Each send prepares a new ``requests.PreparedRequest`` (kept on
    :attr:`raw` for inspection) and, unless ``session`` was given, executes it
    on a new ``requests.Session`` that is closed afterwards. An injected
    session is reused across sends and left open. A single instance must not
    be sent from several threads at once.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        settings: HttpSettings | None = None,
    ) -> None:
        self.method: str = ""
        self.url: str = ""
        self.headers: dict[str, str] = {}
        self.cookies: dict[str, str] = {}
        self.queries: dict[str, str] = {}
        self.post_data: Any = None
        self.post_form: dict[str, Any] | None = None
        self.raw: requests.PreparedRequest | None = None
        self._session = session
        self._settings = settings or HttpSettings()

    def __repr__(self) -> str:
        return f"<Request {self.method or '?'} {self.url or '?'}>"

    def set_method(self, method: str) -> "Request":
        self.method = str(method)
        return self

    def set_url(self, url: str) -> "Request":
        self.url = url
        return self

    def set_headers(self, headers: Mapping[str, str] | None) -> "Request":
        self.headers = dict(headers or {})
        return self

    def set_cookies(self, cookies: Mapping[str, str] | None) -> "Request":
        self.cookies = dict(cookies or {})
        return self

    def set_queries(self, queries: Mapping[str, str] | None) -> "Request":
        self.queries = dict(queries or {})
        return self

    def set_post_data(self, post_data: Any) -> "Request":
        """Set a JSON body, sent with POST and PUT only."""
        self.post_data = post_data
        return self

    def set_post_data_urlencode(self, post_data: Mapping[str, Any] | None) -> "Request":
        """Set a form body, sent with POST and PUT only.

        When both bodies are configured the form body is sent.
        """
        self.post_form = dict(post_data) if post_data is not None else None
        return self

    def get(self) -> Response:
        return self.send(self.url, HttpMethod.GET)

    def post(self) -> Response:
        return self.send(self.url, HttpMethod.POST)

    def put(self) -> Response:
        return self.send(self.url, HttpMethod.PUT)

    def delete(self) -> Response:
        return self.send(self.url, HttpMethod.DELETE)

    def patch(self) -> Response:
        return self.send(self.url, HttpMethod.PATCH)

    def send(self, url: str | None = None, method: str | None = None) -> Response:
        """Build, execute and parse one request.

        ``url`` and ``method`` default to the configured values. Errors from
        ``requests`` propagate unchanged; any other unexpected failure is
        raised as :class:`InternalError`.
        """

        url = self.url if url is None else url
        method = self.method if method is None else str(method)
        if not url:
            raise MissingURL()
        if not method:
            raise MissingMethod(url=url)
        method = method.upper()

        try:
            return self._send(url, method)
        except (CurlError, requests.RequestException):
            raise
        except Exception as exc:
            _LOGGER.error(
                "Unexpected failure while sending request",
                exc_info=True,
                extra={"event": "request.internal_error", "method": method, "url": url},
            )
            raise InternalError(
                "Unexpected failure while sending request",
                details={"method": method, "url": url, "reason": repr(exc)},
            ) from exc

    def _send(self, url: str, method: str) -> Response:
        payload = self._encode_body(method)
        session = self._session if self._session is not None else requests.Session()
        try:
            prepared = session.prepare_request(
                requests.Request(
                    method=method, url=url, data=payload, cookies=self._cookie_jar()
                )
            )
            self._apply_headers(prepared)
            self._apply_cookies(prepared)
            self._apply_queries(prepared)
            self.raw = prepared

            _LOGGER.debug(
                "Sending request",
                extra={"event": "request.send", "method": method, "url": prepared.url},
            )
            raw_response = session.send(prepared, stream=True, **self._settings.send_kwargs())
            return Response.from_raw(raw_response)
        finally:
            if session is not self._session:
                session.close()

    def _encode_body(self, method: str) -> bytes | None:
        if method not in _BODY_METHODS:
            return None

        payload: bytes | None = None
        if self.post_data is not None:
            try:
                payload = json.dumps(
                    self.post_data, ensure_ascii=False, allow_nan=False, separators=(",", ":")
                ).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    "Failed to encode JSON body",
                    details={"type": type(self.post_data).__name__, "reason": str(exc)},
                ) from exc

        if self.post_form is not None:
            if payload is not None:
                _LOGGER.warning(
                    "Both JSON and form bodies configured; sending the form body",
                    extra={"event": "request.body_conflict", "method": method},
                )
            pairs = [(str(key), value) for key, value in self.post_form.items()]
            payload = urllib.parse.urlencode(pairs, doseq=True).encode("ascii")
        return payload

    def _apply_headers(self, prepared: requests.PreparedRequest) -> None:
        if self._settings.user_agent:
            prepared.headers["User-Agent"] = self._settings.user_agent
        for key, value in self.headers.items():
            prepared.headers[key] = value

    def _cookie_jar(self) -> RequestsCookieJar | None:
        if not self.cookies:
            return None
        return cookiejar_from_dict({str(k): str(v) for k, v in self.cookies.items()})

    def _apply_cookies(self, prepared: requests.PreparedRequest) -> None:
        # Configured cookies live in the prepared jar so redirects resend them;
        # a Cookie header from set_headers gets the missing ones appended.
        if not self.cookies:
            return
        existing = prepared.headers.get("Cookie")
        present = {
            part.split("=", 1)[0].strip() for part in (existing or "").split(";") if part.strip()
        }
        missing = "; ".join(
            f"{name}={value}" for name, value in self.cookies.items() if str(name) not in present
        )
        if not missing:
            return
        prepared.headers["Cookie"] = f"{existing}; {missing}" if existing else missing

    def _apply_queries(self, prepared: requests.PreparedRequest) -> None:
        if not self.queries:
            return
        # prepare_url appends encoded params after any query already in the URL
        prepared.prepare_url(prepared.url, list(self.queries.items()))


def new_request(
    *,
    session: requests.Session | None = None,
    settings: HttpSettings | None = None,
) -> Request:
    return Request(session=session, settings=settings)


__all__ = ["HttpMethod", "Request", "new_request"]
