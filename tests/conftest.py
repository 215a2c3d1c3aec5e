"""Global pytest configuration and fixtures."""

import os
import sys
import json
import asyncio
import logging
import pytest
import typing as _t

import httpx

# Add the local 'src' directory to sys.path so tests can import the package
ROOT_DIR = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(ROOT_DIR, "src")
sys.path.insert(0, SRC_DIR)

# Configure logging for tests
logging.basicConfig(level=logging.INFO)

BASE_URL = "https://api.example.com"


class UnreadStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Body that arrives only when the response is read, like a real transport."""

    def __init__(self, content: bytes):
        self.content = content

    def __iter__(self):
        yield self.content

    async def __aiter__(self):
        yield self.content


class RecordingHandler:
    """MockTransport handler that serves canned responses and keeps every request."""

    def __init__(self, status_code: int = 200, body: _t.Any = "", headers: dict | None = None):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None
        self.streamed = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.streamed:
            return httpx.Response(self.status_code, headers=self.headers, stream=UnreadStream(self.body.encode()))
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body, headers=self.headers)
        return httpx.Response(self.status_code, text=self.body, headers=self.headers)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> _t.Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def handler():
    """A handler answering 200 with an empty body; tests adjust it as needed."""
    return RecordingHandler()


@pytest.fixture
def http_client(handler):
    """A synchronous httpx client wired to the recording handler."""
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    yield client
    client.close()


@pytest.fixture
def async_http_client(handler):
    """An httpx.AsyncClient wired to the recording handler."""
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    yield client
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(client.aclose())
    finally:
        loop.close()


@pytest.fixture
def reset_config():
    """Clear the cached global config before and after a test."""
    import apicall.config
    apicall.config._config = None
    apicall.config._config_file = None
    yield
    apicall.config._config = None
    apicall.config._config_file = None
