"""Shared fixtures: an in-process transport for ``requests`` sessions."""

from __future__ import annotations

import io
from typing import Callable, Iterator, Mapping

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers


class TrackingStream(io.BytesIO):
    """Body stream that records whether the connection was released."""

    def __init__(self, payload: bytes = b"", *, fail_read: bool = False) -> None:
        super().__init__(payload)
        self.released = False
        self._fail_read = fail_read

    def read(self, size: int | None = -1) -> bytes:
        if self._fail_read:
            raise OSError("connection reset while reading body")
        return super().read(size)

    def release_conn(self) -> None:
        self.released = True


def make_response(
    request: requests.PreparedRequest | None = None,
    *,
    status: int = 200,
    body: bytes = b"",
    headers: Mapping[str, str] | None = None,
    reason: str = "OK",
    fail_read: bool = False,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(dict(headers or {}))
    response.raw = TrackingStream(body, fail_read=fail_read)
    response.encoding = get_encoding_from_headers(response.headers)
    if request is not None:
        response.url = request.url
        response.request = request
    return response


Responder = Callable[[requests.PreparedRequest], "requests.Response | Exception"]


class StubAdapter(BaseAdapter):
    """Records prepared requests and answers them without touching the network."""

    def __init__(self, responder: Responder | None = None) -> None:
        super().__init__()
        self.responder: Responder = responder or (
            lambda request: make_response(request, body=b"ok", headers={"Content-Type": "text/plain"})
        )
        self.requests: list[requests.PreparedRequest] = []
        self.responses: list[requests.Response] = []
        self.send_kwargs: list[dict[str, object]] = []
        self.closed = False

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.send_kwargs.append({"stream": stream, "timeout": timeout, "verify": verify})
        result = self.responder(request)
        if isinstance(result, Exception):
            raise result
        self.responses.append(result)
        return result

    def close(self) -> None:
        self.closed = True

    @property
    def last_request(self) -> requests.PreparedRequest:
        assert self.requests, "no request was sent"
        return self.requests[-1]


def mount_stub(session: requests.Session, adapter: StubAdapter) -> requests.Session:
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


@pytest.fixture
def stub_adapter() -> StubAdapter:
    return StubAdapter()


@pytest.fixture
def session(stub_adapter: StubAdapter) -> Iterator[requests.Session]:
    sess = mount_stub(requests.Session(), stub_adapter)
    yield sess
    sess.close()


@pytest.fixture
def response_factory() -> Callable[..., requests.Response]:
    return make_response


class SessionRecorder:
    """Collects the sessions created while ``requests.Session`` is patched."""

    def __init__(self) -> None:
        self.created: list[tuple[requests.Session, StubAdapter]] = []
        self.responder: Responder | None = None

    def __len__(self) -> int:
        return len(self.created)


@pytest.fixture
def session_factory(monkeypatch: pytest.MonkeyPatch) -> SessionRecorder:
    """Route every ``requests.Session()`` created during the test to a stub adapter."""

    recorder = SessionRecorder()
    original = requests.Session

    def _factory() -> requests.Session:
        adapter = StubAdapter(recorder.responder)
        sess = mount_stub(original(), adapter)
        recorder.created.append((sess, adapter))
        return sess

    monkeypatch.setattr(requests, "Session", _factory)
    return recorder
