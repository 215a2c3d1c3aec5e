from __future__ import annotations

import abc
import asyncio
import logging
import time
import typing as _t

import httpx

from ..config import ApiCallConfig, build_async_client, build_http_logging
from ..http.call import (
    READ_BODY_EXTENSION,
    build_request_kwargs,
    install_read_body_hook,
    response_text,
)
from ..http.errors import HttpApiCallError
from ..http.loggers import HttpLogging, StdoutHttpLogging
from ..http.request import HttpRequestWithoutResponse
from ..http.response import HttpApiCallResult, HttpResponse
from ..http.serialization import deserialize, to_jsonable

__all__ = [
    "DefaultHttpApi",
    "HttpApi",
    "Smart",
]

logger = logging.getLogger("apicall.http2")

S = _t.TypeVar("S")


class HttpApi(abc.ABC, _t.Generic[S]):
    """A single prepared call that can be fired with or without reading the body."""

    @abc.abstractmethod
    def call(self) -> None:
        pass

    @abc.abstractmethod
    def response(self, response_type: type[S] | _t.Any) -> S:
        pass


class DefaultHttpApi(HttpApi[S]):
    """:class:`HttpApi` backed by ``httpx.AsyncClient``.

    ``call`` and ``response`` block until the exchange completes; use
    ``acall`` and ``aresponse`` from inside a running event loop.

    The blocking methods run on one event loop for the lifetime of the
    instance, because an ``AsyncClient`` keeps its pooled connections bound
    to the loop that opened them. Pass ``loop`` to share a loop (and so a
    client) between instances; a loop passed in is not closed by
    :meth:`close`.

    Bodies are sent as JSON. When the request header sets its own
    ``Content-Type``, ``str`` and ``bytes`` bodies are sent as they are.
    Error statuses do not raise inside the client: the exchange is passed
    to :meth:`HttpLogging.log` first and then raised as
    :class:`HttpApiCallError`.
    """

    def __init__(
        self,
        request: HttpRequestWithoutResponse,
        client: httpx.AsyncClient | None = None,
        http_logging: HttpLogging | None = None,
        config: ApiCallConfig | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.request = request
        self.config = config or ApiCallConfig()
        self._client = client
        self.http_logging = http_logging or build_http_logging(self.config)
        self._loop = loop
        self._owns_loop = loop is None

    def __enter__(self) -> DefaultHttpApi:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the event loop used by the blocking methods, if it is ours."""
        if self._owns_loop and self._loop is not None:
            self._loop.close()
            self._loop = None

    def _run(self, coroutine: _t.Awaitable[S]) -> S:
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coroutine)

    def call(self) -> None:
        self._run(self.acall())

    def response(self, response_type: type[S] | _t.Any) -> S:
        return self._run(self.aresponse(response_type))

    async def acall(self) -> None:
        await self._call_server()

    async def aresponse(self, response_type: type[S] | _t.Any) -> S:
        response = await self._call_server()
        if response_type is str:
            return response.body  # type: ignore[return-value]
        return deserialize(response.body, response_type)

    async def _call_server(self) -> HttpResponse:
        response = await self._call_by_client()

        result = HttpApiCallResult.of(
            self.request.method,
            self.request.url,
            self.request.header,
            self.request.body,
            response,
        )
        self.http_logging.log(result)
        if response.is_error:
            raise HttpApiCallError(response)
        return response

    async def _call_by_client(self) -> HttpResponse:
        if self._client is not None:
            return await self._send(self._client)
        async with build_async_client(self.config) as client:
            return await self._send(client)

    def _request_kwargs(self) -> dict[str, _t.Any]:
        headers = dict(self.request.header)
        body = self.request.body
        if any(name.lower() == "content-type" for name in headers):
            return build_request_kwargs(headers, body)

        kwargs: dict[str, _t.Any] = {"headers": {"Content-Type": "application/json", **headers}}
        if body is not None:
            kwargs["json"] = to_jsonable(body)
        return kwargs

    async def _send(self, client: httpx.AsyncClient) -> HttpResponse:
        method = self.request.method.value
        url = self.request.url
        start_time = time.time()
        logger.debug(f"{method} {url}")

        install_read_body_hook(client)
        try:
            response = await client.request(
                method,
                url,
                extensions={READ_BODY_EXTENSION: True},
                **self._request_kwargs(),
            )
        except httpx.HTTPStatusError as e:
            response = e.response
        except httpx.RequestError as e:
            elapsed = time.time() - start_time
            logger.error(f"{method} {url} failed after {elapsed:.3f}s: {str(e)}")
            raise

        logger.debug(f"{method} {url} returned {response.status_code} in {time.time() - start_time:.3f}s")
        return HttpResponse.of(response.status_code, response_text(response))


class Smart:
    """Builds :class:`DefaultHttpApi` instances with sensible defaults.

    Every instance built by one ``Smart`` shares its event loop, so one
    ``AsyncClient`` can serve all of them. Close the builder when done.
    """

    def __init__(self):
        self._loop: asyncio.AbstractEventLoop | None = None

    def __enter__(self) -> Smart:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._loop is not None:
            self._loop.close()
            self._loop = None

    def to(
        self,
        request: HttpRequestWithoutResponse,
        client: httpx.AsyncClient | None = None,
        http_logging: HttpLogging | None = None,
    ) -> DefaultHttpApi:
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        return DefaultHttpApi(request, client, http_logging or StdoutHttpLogging(), loop=self._loop)
