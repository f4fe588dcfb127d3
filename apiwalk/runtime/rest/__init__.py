"""REST runtime abstractions."""

from .definitions import ApiResponse, EndpointRequest, RawResponse, WireRequest
from .endpoint import (
    Endpoint,
    ModelAdapter,
    PageAdapter,
    ResponseAdapter,
    RestEndpointSpec,
    describe_status,
)
from .http_client import HTTPClient
from .runner import RestRunner
from .transport import RESTTransport, Transport

__all__ = [
    "EndpointRequest",
    "WireRequest",
    "RawResponse",
    "ApiResponse",
    "RestEndpointSpec",
    "ResponseAdapter",
    "ModelAdapter",
    "PageAdapter",
    "Endpoint",
    "describe_status",
    "HTTPClient",
    "Transport",
    "RESTTransport",
    "RestRunner",
]
