"""Endpoint contract: typed request in, wire request out; raw response in, typed value out."""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from string import Formatter
from typing import Any, Generic, TypeVar
from urllib.parse import quote

from yarl import URL

from ...codec.body import DecodeContext, decode_json, encode_json, parse_json, validate_document
from ...codec.query import encode_query
from ...core.enums import HttpMethod
from ...core.exceptions import BodyDecodeError, BusinessError, TransportError, UrlError
from ...core.field_path import FieldPath
from ..pagination.definitions import CursorRule, Page, PageContext
from .definitions import EndpointRequest, RawResponse, WireRequest

T = TypeVar("T")

SUCCESS_STATUSES = range(200, 300)


def describe_status(status: int) -> str:
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


@dataclass(frozen=True)
class RestEndpointSpec:
    """Declarative description of one API operation.

    Attributes:
        id: Endpoint identifier, used in logs
        method: HTTP method
        path: Path template relative to the base URL, with ``{name}``
            placeholders filled from ``EndpointRequest.path_vars``
        build_query: Derives query parameters from the request
            (default: ``request.params``)
        build_body: Derives the JSON body from the request (default: ``request.body``)
        build_headers: Extra headers derived from the request
        error_model: Type the body of a non-success response decodes into
        success_statuses: Statuses whose body is handed to the response adapter
    """

    id: str
    method: HttpMethod | str
    path: str
    build_query: Callable[[EndpointRequest], Mapping[str, Any] | None] | None = None
    build_body: Callable[[EndpointRequest], Any] | None = None
    build_headers: Callable[[EndpointRequest], Mapping[str, str]] | None = None
    error_model: Any = None
    success_statuses: Collection[int] = field(default=SUCCESS_STATUSES)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method.upper()))


class ResponseAdapter(Generic[T]):
    """Turns the body of a successful response into a typed value."""

    def parse(self, response: RawResponse, request: EndpointRequest) -> T:
        raise NotImplementedError


class ModelAdapter(ResponseAdapter[T]):
    """Decode the whole body into a pydantic-validatable type."""

    def __init__(self, type_: Any) -> None:
        self.type_ = type_

    def parse(self, response: RawResponse, request: EndpointRequest) -> T:
        return decode_json(response.body, self.type_)


class PageAdapter(ResponseAdapter[Page[T]]):
    """Decode a body into a ``Page`` of items.

    Args:
        item_type: Type every item validates against
        items_path: Where the item list lives in the body (``None`` when the
            body itself is the list)
        next_cursor: Rule computing the next cursor; pages are final without one
        total_path: Optional path of a total item count in the body
    """

    def __init__(
        self,
        item_type: Any,
        *,
        items_path: str | None = "items",
        next_cursor: CursorRule | None = None,
        total_path: str | None = None,
    ) -> None:
        self.item_type = item_type
        self.items_path = FieldPath.parse(items_path) if items_path else FieldPath()
        self.next_cursor = next_cursor
        self.total_path = total_path

    def parse(self, response: RawResponse, request: EndpointRequest) -> Page[T]:
        document = parse_json(response.body)
        ctx = DecodeContext()
        raw_items = ctx.lookup(document, self.items_path, list) if self.items_path else document
        if not self.items_path:
            ctx.expect(raw_items, list)
        items = validate_document(raw_items, list[self.item_type], at=self.items_path)

        total = None
        if self.total_path:
            total = ctx.lookup(document, self.total_path, int, required=False)

        cursor = None
        if self.next_cursor is not None:
            cursor = self.next_cursor(
                PageContext(
                    document=document,
                    items=items,
                    request=request,
                    status=response.status,
                    headers=response.headers,
                )
            )
        return Page(items=tuple(items), cursor=cursor, total=total)


class Endpoint(Generic[T]):
    """Request building and response decoding for one operation against one API."""

    def __init__(
        self,
        base_url: str,
        spec: RestEndpointSpec,
        adapter: ResponseAdapter[T],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.spec = spec
        self.adapter = adapter
        self.headers = dict(headers or {})

    @property
    def id(self) -> str:
        return self.spec.id

    def _format_path(self, request: EndpointRequest) -> str:
        values: dict[str, str] = {}
        for _, name, _, _ in Formatter().parse(self.spec.path):
            if name is None:
                continue
            if name not in request.path_vars:
                raise UrlError(self.spec.path, f"missing path variable {name!r}")
            values[name] = quote(str(request.path_vars[name]), safe="")
        return self.spec.path.format_map(values)

    def _compose_url(self, request: EndpointRequest) -> str:
        if request.url is not None:
            composed = request.url
        else:
            composed = f"{self.base_url.rstrip('/')}/{self._format_path(request).lstrip('/')}"
        try:
            url = URL(composed)
        except (TypeError, ValueError) as exc:
            raise UrlError(composed, str(exc)) from exc
        if url.scheme not in ("http", "https"):
            raise UrlError(composed, "scheme must be http or https")
        if not url.host:
            raise UrlError(composed, "URL has no host")
        return composed

    def build_request(self, request: EndpointRequest | None = None) -> WireRequest:
        """Compose the wire request for ``request``.

        Raises:
            UrlError: If the URL cannot be composed, or a GET or HEAD request
                has a body.
            QueryEncodingError: If a query parameter cannot be encoded.
        """
        request = request or EndpointRequest()
        url = self._compose_url(request)

        params = self.spec.build_query(request) if self.spec.build_query else request.params
        query = encode_query(params)
        if query:
            url = f"{url}{'&' if '?' in url else '?'}{query}"

        headers = dict(self.headers)
        if self.spec.build_headers:
            headers.update(self.spec.build_headers(request))
        headers.update(request.headers)

        body = self.spec.build_body(request) if self.spec.build_body else request.body
        payload = None
        if body is not None:
            if not self.spec.method.allows_body:
                raise UrlError(url, f"{self.spec.method.value} requests cannot carry a body")
            payload = encode_json(body)
            headers.setdefault("Content-Type", "application/json")

        return WireRequest(method=self.spec.method.value, url=url, headers=headers, body=payload)

    def decode_response(self, response: RawResponse, request: EndpointRequest | None = None) -> T:
        """Interpret a raw response.

        Raises:
            BodyDecodeError: If a success body does not decode.
            BusinessError: If a non-success body decodes into the error model.
            TransportError: If a non-success body cannot be decoded at all.
        """
        request = request or EndpointRequest()
        if response.status in self.spec.success_statuses:
            try:
                return self.adapter.parse(response, request)
            except BodyDecodeError as exc:
                raise exc.with_response(response.url, response.body) from exc

        message = f"received unsuccessful status code {describe_status(response.status)}"
        if self.spec.error_model is None:
            raise TransportError(
                message, status=response.status, body=response.body, url=response.url
            )
        try:
            payload = decode_json(response.body, self.spec.error_model)
        except BodyDecodeError as exc:
            raise TransportError(
                message, status=response.status, body=response.body, url=response.url
            ) from exc
        raise BusinessError(response.status, payload, url=response.url, body=response.body)
