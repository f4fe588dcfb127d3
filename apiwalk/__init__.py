"""apiwalk - async pagination and endpoint toolkit for REST API clients."""

from .codec import (
    Base62Int,
    DecodeContext,
    JsonString,
    decode_json,
    decode_query,
    encode_query,
)
from .core import (
    ApiError,
    ApiErrorKind,
    BodyDecodeError,
    BusinessError,
    ClientConfig,
    FieldPath,
    HttpMethod,
    PaginatorState,
    QueryEncodingError,
    TransportError,
    UrlError,
)
from .runtime.pagination import (
    Page,
    PageContext,
    PaginationPolicy,
    Paginator,
    cursor_field,
    next_url_field,
    offset_cursor,
    page_number_cursor,
)
from .runtime.rest import (
    ApiResponse,
    Endpoint,
    EndpointRequest,
    HTTPClient,
    ModelAdapter,
    PageAdapter,
    RawResponse,
    ResponseAdapter,
    RestEndpointSpec,
    RESTTransport,
    RestRunner,
    Transport,
    WireRequest,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ApiError",
    "ApiErrorKind",
    "TransportError",
    "UrlError",
    "QueryEncodingError",
    "BodyDecodeError",
    "BusinessError",
    "FieldPath",
    # Core
    "ClientConfig",
    "HttpMethod",
    "PaginatorState",
    # Codec
    "encode_query",
    "decode_query",
    "decode_json",
    "DecodeContext",
    "Base62Int",
    "JsonString",
    # Endpoint pipeline
    "EndpointRequest",
    "WireRequest",
    "RawResponse",
    "ApiResponse",
    "RestEndpointSpec",
    "ResponseAdapter",
    "ModelAdapter",
    "PageAdapter",
    "Endpoint",
    "Transport",
    "HTTPClient",
    "RESTTransport",
    "RestRunner",
    # Pagination
    "Page",
    "PageContext",
    "PaginationPolicy",
    "Paginator",
    "cursor_field",
    "next_url_field",
    "offset_cursor",
    "page_number_cursor",
]
