"""Value types passed between the endpoint contract and the transport.

EndpointRequest is what callers build; WireRequest is what the transport
sends; RawResponse is what the transport returns; ApiResponse is the decoded
result of a non-paginated call.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class EndpointRequest:
    """Input of one API call.

    Attributes:
        path_vars: Values substituted into the endpoint's path template
        params: Query parameters, encoded by the query codec
        body: JSON-serializable request body, or None
        headers: Extra headers for this call
        url: Absolute URL that replaces the endpoint's base URL and path
            (set when following next-URL cursors)
    """

    path_vars: Mapping[str, Any] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path_vars", _frozen(self.path_vars))
        object.__setattr__(self, "params", _frozen(self.params))
        object.__setattr__(self, "headers", _frozen(self.headers))

    def with_params(self, **params: Any) -> EndpointRequest:
        """Copy of this request with ``params`` merged over the current ones."""
        return replace(self, params={**self.params, **params})

    def advance(self, cursor: Any) -> EndpointRequest:
        """Build the request for the page a cursor points to.

        Mapping cursors are merged into the query parameters, string cursors
        are next-page URLs, and request cursors are used as they are.
        """
        if isinstance(cursor, EndpointRequest):
            return cursor
        if isinstance(cursor, Mapping):
            return self.with_params(**cursor)
        if isinstance(cursor, str):
            return replace(self, url=cursor, params={})
        raise TypeError(
            f"cannot advance a request with a {type(cursor).__name__} cursor; "
            "pass next_request= to the paginator"
        )


@dataclass(frozen=True)
class WireRequest:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class RawResponse:
    status: int
    body: bytes
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Decoded value of a successful call plus the body bytes it came from."""

    value: T
    body: bytes
    status: int = 200
