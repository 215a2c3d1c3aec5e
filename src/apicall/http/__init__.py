"""Synchronous HTTP call surface for apicall.

This module provides the request and response types, body parsers,
logging hooks and the ``httpx`` backed :class:`HttpxApiCall`.
"""

from .call import HttpApiCall, HttpxApiCall
from .errors import ApiCallError, HttpApiCallError, ResponseParsingError
from .loggers import HistoryHttpLogging, HttpLogging, LoggerHttpLogging, StdoutHttpLogging
from .parser import JsonResponseBodyParser, ResponseBodyParser, StringOnlyResponseBodyParser
from .request import HttpMethod, HttpRequest, HttpRequestWithoutResponse
from .response import HttpApiCallResult, HttpResponse


__all__ = [
    'ApiCallError',
    'HistoryHttpLogging',
    'HttpApiCall',
    'HttpApiCallError',
    'HttpApiCallResult',
    'HttpLogging',
    'HttpMethod',
    'HttpRequest',
    'HttpRequestWithoutResponse',
    'HttpResponse',
    'HttpxApiCall',
    'JsonResponseBodyParser',
    'LoggerHttpLogging',
    'ResponseBodyParser',
    'StdoutHttpLogging',
    'StringOnlyResponseBodyParser',
]
