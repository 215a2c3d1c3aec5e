from __future__ import annotations

import abc
import logging
import sys
import typing as _t

from .response import HttpApiCallResult

__all__ = [
    "HistoryHttpLogging",
    "HttpLogging",
    "LoggerHttpLogging",
    "StdoutHttpLogging",
    "format_result",
]

logger = logging.getLogger("apicall.http")


def format_result(result: HttpApiCallResult) -> str:
    """Render an exchange as a short multi-line block."""
    return (
        f"{result.method.value} {result.url}\n"
        f"  header: {result.header}\n"
        f"  request: {result.request!r}\n"
        f"  status: {result.response.status_code}\n"
        f"  response: {result.response.body}"
    )


class HttpLogging(abc.ABC):
    """Hook called with every completed exchange."""

    @abc.abstractmethod
    def info_log(self, result: HttpApiCallResult) -> None:
        """Called for exchanges that did not end with an error status."""
        pass

    @abc.abstractmethod
    def error_log(self, result: HttpApiCallResult) -> None:
        """Called for exchanges that ended with a 4xx or 5xx status."""
        pass

    def log(self, result: HttpApiCallResult) -> None:
        if result.response.is_error:
            self.error_log(result)
        else:
            self.info_log(result)


class StdoutHttpLogging(HttpLogging):
    """Prints every exchange. Used when no other hook is configured."""

    def __init__(self, stream: _t.TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> _t.TextIO:
        # Resolved lazily so redirected stdout (pytest capsys, click) is honoured
        return self._stream or sys.stdout

    def info_log(self, result: HttpApiCallResult) -> None:
        print(f"[INFO] {format_result(result)}", file=self.stream)

    def error_log(self, result: HttpApiCallResult) -> None:
        print(f"[ERROR] {format_result(result)}", file=self.stream)


class LoggerHttpLogging(HttpLogging):
    """Sends exchanges to a stdlib logger: INFO on success, ERROR on failure."""

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def info_log(self, result: HttpApiCallResult) -> None:
        self.logger.info(
            "%s %s -> %s\n  header: %s\n  request: %r\n  response: %s",
            result.method.value,
            result.url,
            result.response.status_code,
            result.header,
            result.request,
            result.response.body,
        )

    def error_log(self, result: HttpApiCallResult) -> None:
        self.logger.error(
            "%s %s -> %s\n  header: %s\n  request: %r\n  response: %s",
            result.method.value,
            result.url,
            result.response.status_code,
            result.header,
            result.request,
            result.response.body,
        )


class HistoryHttpLogging(HttpLogging):
    """Keeps the most recent exchanges in memory."""

    def __init__(self, max_history: int = 100):
        self.max_history = max_history
        self.history: list[HttpApiCallResult] = []

    def info_log(self, result: HttpApiCallResult) -> None:
        self._add_to_history(result)

    def error_log(self, result: HttpApiCallResult) -> None:
        self._add_to_history(result)

    def _add_to_history(self, result: HttpApiCallResult) -> None:
        self.history.append(result)
        if len(self.history) > self.max_history:
            self.history = self.history[-self.max_history:]

    def get_history(self) -> list[HttpApiCallResult]:
        return self.history

    def get_recent_failures(self) -> list[HttpApiCallResult]:
        return [r for r in self.history if r.response.is_error]

    def clear_history(self) -> None:
        self.history = []
