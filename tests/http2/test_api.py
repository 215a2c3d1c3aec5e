"""Tests for the http2.api module."""

import asyncio
import json
import pytest
from unittest.mock import patch

import httpx
from pydantic import BaseModel

from apicall.http.errors import HttpApiCallError
from apicall.http.loggers import HistoryHttpLogging, StdoutHttpLogging
from apicall.http.request import HttpRequest, HttpRequestWithoutResponse
from apicall.http2.api import DefaultHttpApi, Smart


class Greeting(BaseModel):
    message: str


class LoopBoundTransport(httpx.AsyncBaseTransport):
    """Keeps its connection tied to the first event loop, like a pooled transport."""

    def __init__(self, body: str = "ok"):
        self.body = body
        self.loop: asyncio.AbstractEventLoop | None = None
        self.calls = 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        running = asyncio.get_running_loop()
        if self.loop is None:
            self.loop = running
        elif self.loop is not running:
            raise RuntimeError("Event loop is closed")
        self.calls += 1
        return httpx.Response(200, text=self.body)


@pytest.fixture
def history():
    return HistoryHttpLogging()


class TestDefaultHttpApi:
    """Test cases for DefaultHttpApi."""

    def test_response_parses_json(self, async_http_client, handler, history):
        handler.body = {"message": "hi"}

        with DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), async_http_client, history) as api:
            assert api.response(Greeting) == Greeting(message="hi")

        assert len(history.get_history()) == 1
        assert not history.get_recent_failures()

    def test_response_string_is_raw(self, async_http_client, handler, history):
        handler.body = "plain words"

        with DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), async_http_client, history) as api:
            assert api.response(str) == "plain words"

    def test_repeated_calls_reuse_client(self, history):
        transport = LoopBoundTransport('"ok"')
        client = httpx.AsyncClient(base_url="https://api.example.com", transport=transport)

        with DefaultHttpApi(HttpRequest(method="GET", url="/ok"), client, history) as api:
            assert api.response(str) == '"ok"'
            assert api.response(str) == '"ok"'
            api.call()
            api._run(client.aclose())

        assert transport.calls == 3
        assert len(history.get_history()) == 3

    def test_call_sends_json(self, async_http_client, handler, history):
        request = HttpRequestWithoutResponse(
            method="POST",
            url="/greeting",
            header={"X-Trace": "abc"},
            body={"message": "hello"},
        )

        with DefaultHttpApi(request, async_http_client, history) as api:
            assert api.call() is None

        sent = handler.last_request
        assert sent.method == "POST"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["X-Trace"] == "abc"
        assert handler.last_json() == {"message": "hello"}
        assert history.get_history()[0].request == {"message": "hello"}

    def test_string_body_is_json_encoded(self, async_http_client, handler, history):
        request = HttpRequestWithoutResponse(method="POST", url="/notes", body="hello")

        with DefaultHttpApi(request, async_http_client, history) as api:
            api.call()

        assert handler.last_request.headers["Content-Type"] == "application/json"
        assert handler.last_json() == "hello"

    def test_call_without_body(self, async_http_client, handler, history):
        request = HttpRequestWithoutResponse(method="GET", url="/greeting")

        with DefaultHttpApi(request, async_http_client, history) as api:
            api.call()

        assert handler.last_request.content == b""
        assert handler.last_request.headers["Content-Type"] == "application/json"

    def test_request_content_type_sends_text_raw(self, async_http_client, handler, history):
        request = HttpRequestWithoutResponse(
            method="POST",
            url="/notes",
            header={"content-type": "text/plain"},
            body="note",
        )

        with DefaultHttpApi(request, async_http_client, history) as api:
            api.call()

        assert handler.last_request.headers.get_list("Content-Type") == ["text/plain"]
        assert handler.last_request.content == b"note"

    def test_error_status_logged_then_raised(self, async_http_client, handler, history):
        handler.status_code = 422
        handler.body = '{"detail": "bad"}'
        api = DefaultHttpApi(HttpRequest(method="POST", url="/greeting", body={}), async_http_client, history)

        with api, pytest.raises(HttpApiCallError) as excinfo:
            api.response(Greeting)

        assert excinfo.value.status_code == 422
        assert excinfo.value.body == '{"detail": "bad"}'
        failures = history.get_recent_failures()
        assert len(failures) == 1
        assert failures[0].response.status_code == 422

    def test_status_error_from_event_hook_keeps_body(self, handler, history):
        async def raise_on_4xx_5xx(response):
            response.raise_for_status()

        handler.status_code = 409
        handler.body = "conflict"
        handler.streamed = True
        client = httpx.AsyncClient(
            base_url="https://api.example.com",
            transport=httpx.MockTransport(handler),
            event_hooks={"response": [raise_on_4xx_5xx]},
        )

        with DefaultHttpApi(HttpRequestWithoutResponse(method="PUT", url="/users/1"), client, history) as api:
            with pytest.raises(HttpApiCallError) as excinfo:
                api.call()
            api._run(client.aclose())

        assert excinfo.value.status_code == 409
        assert excinfo.value.body == "conflict"
        assert history.get_recent_failures()[0].response.body == "conflict"

    def test_transport_error_propagates(self, async_http_client, handler, history):
        handler.error = httpx.ConnectError("Connection refused")

        with DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), async_http_client, history) as api:
            with pytest.raises(httpx.ConnectError):
                api.response(Greeting)

        assert history.get_history() == []

    def test_builds_own_client(self, handler, history):
        handler.body = {"message": "own"}
        own_client = httpx.AsyncClient(base_url="https://api.example.com", transport=httpx.MockTransport(handler))

        with patch("apicall.http2.api.build_async_client", return_value=own_client) as build:
            with DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), http_logging=history) as api:
                assert api.response(Greeting).message == "own"

        build.assert_called_once_with(api.config)
        assert own_client.is_closed

    def test_close_is_idempotent(self, async_http_client, history):
        api = DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), async_http_client, history)
        api.call()

        api.close()
        api.close()

    @pytest.mark.asyncio
    async def test_async_variants(self, async_http_client, handler, history):
        handler.body = {"message": "async"}
        api = DefaultHttpApi(HttpRequest(method="GET", url="/greeting"), async_http_client, history)

        assert await api.aresponse(Greeting) == Greeting(message="async")
        assert await api.acall() is None
        assert len(history.get_history()) == 2


class TestSmart:
    """Test cases for the Smart builder."""

    def test_defaults_to_stdout_logging(self):
        with Smart() as smart:
            api = smart.to(HttpRequest(method="GET", url="https://api.example.com/greeting"))

            assert isinstance(api, DefaultHttpApi)
            assert isinstance(api.http_logging, StdoutHttpLogging)

    def test_uses_given_client_and_logging(self, async_http_client, handler, history, capsys):
        handler.body = json.dumps({"message": "smart"})

        with Smart() as smart:
            api = smart.to(HttpRequest(method="GET", url="/greeting"), async_http_client, history)
            assert api.response(Greeting).message == "smart"

        assert history.get_history()
        assert capsys.readouterr().out == ""

    def test_built_apis_share_client(self, history):
        transport = LoopBoundTransport("shared")
        client = httpx.AsyncClient(base_url="https://api.example.com", transport=transport)

        with Smart() as smart:
            first = smart.to(HttpRequest(method="GET", url="/a"), client, history)
            second = smart.to(HttpRequest(method="GET", url="/b"), client, history)

            assert first.response(str) == "shared"
            assert second.response(str) == "shared"
            first.close()
            assert second.response(str) == "shared"
            second._run(client.aclose())

        assert transport.calls == 3
