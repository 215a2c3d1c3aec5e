from __future__ import annotations

import abc
import logging
import time
import typing as _t

import httpx

from ..config import ApiCallConfig, build_client, build_http_logging
from .errors import HttpApiCallError
from .loggers import HttpLogging
from .parser import JsonResponseBodyParser, ResponseBodyParser
from .request import HttpMethod, HttpRequest, HttpRequestWithoutResponse
from .response import HttpApiCallResult, HttpResponse
from .serialization import to_jsonable

__all__ = [
    "HttpApiCall",
    "HttpxApiCall",
]

logger = logging.getLogger("apicall.http.call")

S = _t.TypeVar("S")


class HttpApiCall(abc.ABC):
    """Uniform entry point for outbound API calls."""

    @abc.abstractmethod
    def call(self, request: HttpRequest) -> _t.Any:
        """Send ``request`` and return its body parsed into ``request.response_type``.

        Raises:
            HttpApiCallError: If the response status is 4xx or 5xx.
            ResponseParsingError: If the body does not match the response type.
        """
        pass

    @abc.abstractmethod
    def call_without_response(self, request: HttpRequestWithoutResponse) -> None:
        """Send ``request`` and discard the response body.

        Raises:
            HttpApiCallError: If the response status is 4xx or 5xx.
        """
        pass


def build_request_kwargs(header: dict[str, str], body: _t.Any | None) -> dict[str, _t.Any]:
    """Translate a header mapping and body into ``httpx`` request arguments."""
    kwargs: dict[str, _t.Any] = {"headers": dict(header)}
    if body is None:
        return kwargs
    if isinstance(body, (str, bytes)):
        kwargs["content"] = body
    else:
        kwargs["json"] = to_jsonable(body)
    return kwargs


READ_BODY_EXTENSION = "apicall.read_body"


def read_body_hook(response: httpx.Response) -> None:
    """Read the body of apicall requests before other response hooks run.

    A hook that raises closes the response, so an unread body would be lost.
    """
    if response.request.extensions.get(READ_BODY_EXTENSION):
        response.read()


async def aread_body_hook(response: httpx.Response) -> None:
    if response.request.extensions.get(READ_BODY_EXTENSION):
        await response.aread()


def install_read_body_hook(client: httpx.Client | httpx.AsyncClient) -> None:
    """Put the body-reading hook first in ``client``'s response hooks."""
    hook = aread_body_hook if isinstance(client, httpx.AsyncClient) else read_body_hook
    event_hooks = client.event_hooks
    if hook in event_hooks["response"]:
        return
    client.event_hooks = {
        "request": list(event_hooks["request"]),
        "response": [hook, *event_hooks["response"]],
    }


def response_text(response: httpx.Response) -> str:
    """Body of ``response``, or ``""`` when it could not be read."""
    try:
        return response.text
    except httpx.ResponseNotRead:
        logger.warning(
            f"{response.request.method} {response.request.url} returned {response.status_code} "
            "but its body was closed before it could be read"
        )
        return ""


class HttpxApiCall(HttpApiCall):
    """:class:`HttpApiCall` over a synchronous ``httpx.Client``.

    Every exchange is handed to the logging hook. Error statuses are raised
    as :class:`HttpApiCallError` after ``error_log``; everything else goes
    through ``info_log`` and is then parsed.

    A client passed in stays owned by the caller. A client built from
    ``config`` is closed by :meth:`close` or when leaving the ``with`` block.
    Either way the client's response hooks see a fully read body for
    requests sent from here, so a hook calling ``raise_for_status`` does not
    lose it.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        parser: ResponseBodyParser | None = None,
        http_logging: HttpLogging | None = None,
        config: ApiCallConfig | None = None,
    ):
        self.config = config or ApiCallConfig()
        self._owns_client = client is None
        self.client = client or build_client(self.config)
        install_read_body_hook(self.client)
        self.parser = parser or JsonResponseBodyParser()
        self.http_logging = http_logging or build_http_logging(self.config)

    def __enter__(self) -> HttpxApiCall:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def call(self, request: HttpRequest) -> _t.Any:
        response = self._run(request.method, request.url, request.header, request.body)
        return self._parse_response_body(response.body, request.response_type)

    def call_without_response(self, request: HttpRequestWithoutResponse) -> None:
        self._run(request.method, request.url, request.header, request.body)

    def _run(
        self,
        method: HttpMethod,
        url: str,
        header: dict[str, str],
        body: _t.Any | None,
    ) -> HttpResponse:
        response = self._send(method, url, header, body)
        self._log(HttpApiCallResult.of(method, url, header, body, response))
        return response

    def _log(self, result: HttpApiCallResult) -> None:
        if result.response.is_error:
            self.http_logging.error_log(result)
            raise HttpApiCallError(result.response)
        self.http_logging.info_log(result)

    def _send(
        self,
        method: HttpMethod,
        url: str,
        header: dict[str, str],
        body: _t.Any | None,
    ) -> HttpResponse:
        start_time = time.time()
        logger.debug(f"{method.value} {url}")

        try:
            response = self.client.request(
                method.value,
                url,
                extensions={READ_BODY_EXTENSION: True},
                **build_request_kwargs(header, body),
            )
        except httpx.HTTPStatusError as e:
            # Raised by event hooks; treated like any other response
            response = e.response
        except httpx.RequestError as e:
            elapsed = time.time() - start_time
            logger.error(f"{method.value} {url} failed after {elapsed:.3f}s: {str(e)}")
            raise

        logger.debug(
            f"{method.value} {url} returned {response.status_code} "
            f"in {time.time() - start_time:.3f}s"
        )
        return HttpResponse.of(response.status_code, response_text(response))

    def _parse_response_body(self, body: str, response_type: type[S] | _t.Any) -> S:
        if response_type is str:
            return body  # type: ignore[return-value]
        return self.parser.parse(body, response_type)
