"""apicall core package.

A thin layer over ``httpx`` that gives outbound API calls a uniform
request/response contract, JSON body parsing into a caller-chosen type and
pluggable logging of every exchange.
"""

# Version of the apicall package
version: str = '0.1.0'

from . import config
from .http import (
    ApiCallError,
    HttpApiCall,
    HttpApiCallError,
    HttpMethod,
    HttpRequest,
    HttpRequestWithoutResponse,
    HttpResponse,
    HttpxApiCall,
)
from .http2 import DefaultHttpApi, HttpApi, Smart
