"""Shared fixtures: a configuration and a fake transport mounted on the session."""

from __future__ import annotations

import io
from typing import Any, Callable, Dict, List, Optional

import orjson
import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from sus_client.clients.context import RequestContext
from sus_client.clients.http_client import HttpClient
from sus_client.clients.sus_client import SusClient
from sus_client.settings import Configuration

ENDPOINT = "https://api.sus.test"


class FakeResponse:
    def __init__(
        self,
        status: int = 200,
        body: Any = b"",
        *,
        reason: str = "OK",
        content_type: Optional[str] = "application/json",
        raw: Any = None,
    ) -> None:
        if not isinstance(body, (bytes, str)):
            body = orjson.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status = status
        self.body = body
        self.reason = reason
        self.content_type = content_type
        self.raw = raw


class BrokenStream(io.BytesIO):
    """Hands out the first chunk of a body, then fails like a dropped connection."""

    def __init__(self, partial: bytes) -> None:
        super().__init__(partial)
        self._served = False

    def read(self, size: int = -1) -> bytes:
        if self._served:
            raise requests.exceptions.ChunkedEncodingError("Connection broken")
        self._served = True
        return super().read(size)


class FakeAdapter(BaseAdapter):
    """Records prepared requests and answers them with queued responses."""

    def __init__(self) -> None:
        super().__init__()
        self.requests: List[requests.PreparedRequest] = []
        self.timeouts: List[Any] = []
        self.queue: List[FakeResponse | Exception] = []
        self.responder: Optional[Callable[[requests.PreparedRequest], FakeResponse]] = None

    def add(self, status: int = 200, body: Any = b"", **kwargs: Any) -> None:
        self.queue.append(FakeResponse(status, body, **kwargs))

    def fail(self, exc: Exception) -> None:
        self.queue.append(exc)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):  # type: ignore[override]
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.responder is not None:
            fake = self.responder(request)
        else:
            fake = self.queue.pop(0) if self.queue else FakeResponse()
        if isinstance(fake, Exception):
            raise fake
        response = requests.Response()
        response.status_code = fake.status
        response.reason = fake.reason
        headers: Dict[str, str] = {}
        if fake.content_type:
            headers["Content-Type"] = fake.content_type
        response.headers = CaseInsensitiveDict(headers)
        response.raw = fake.raw if fake.raw is not None else io.BytesIO(fake.body)
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass

    @property
    def last(self) -> requests.PreparedRequest:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def clean_request_context():
    """Never let identity leak from one test into the next."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def configuration() -> Configuration:
    return Configuration(
        endpoint=ENDPOINT,
        access_token="access-123",
        user_agent="sus-tests/1.0",
        requests_per_second=100.0,
        request_burst_size=100,
        max_connections_per_route=4,
        block_till_rate_limit_reset=True,
    )


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def http_client(configuration: Configuration, adapter: FakeAdapter) -> HttpClient:
    client = HttpClient(configuration)
    client.session.mount("https://", adapter)
    return client


@pytest.fixture
def sus_client(configuration: Configuration, http_client: HttpClient) -> SusClient:
    return SusClient(configuration, http_client=http_client)
