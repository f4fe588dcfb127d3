"""Core enumerations shared by the codec, endpoint and pagination layers.

Key Types:
    - ApiErrorKind: Tag for each member of the closed error taxonomy
    - HttpMethod: Request methods an endpoint can declare
    - PaginatorState: States of the pagination state machine
"""

from enum import Enum


class ApiErrorKind(str, Enum):
    """Kinds of failure a request/response round trip can produce."""

    TRANSPORT = "transport"
    URL = "url"
    QUERY_ENCODING = "query_encoding"
    BODY_DECODE = "body_decode"
    BUSINESS = "business"


class HttpMethod(str, Enum):
    """HTTP methods supported by endpoint specs."""

    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        return self not in (HttpMethod.HEAD, HttpMethod.GET)


class PaginatorState(str, Enum):
    """Lifecycle of a paginator instance.

    INIT -> FETCHING -> READY -> (FETCHING ...) -> EXHAUSTED, with FAILED
    reachable from FETCHING. EXHAUSTED and FAILED are terminal.
    """

    INIT = "init"
    FETCHING = "fetching"
    READY = "ready"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PaginatorState.EXHAUSTED, PaginatorState.FAILED)
