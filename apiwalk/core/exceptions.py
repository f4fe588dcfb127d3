"""Closed error taxonomy for request building, transport and decoding.

Every failure the library reports is exactly one of five kinds. Each kind is a
concrete subclass of ``ApiError`` tagged with an ``ApiErrorKind`` so callers
can branch either on the class or with ``match error.kind``, and each carries
the structured context needed to act on it without parsing the message.

    TransportError      -> transport failure, or an undecodable non-success reply
    UrlError            -> malformed URL while building a request
    QueryEncodingError  -> parameter that cannot be encoded into a query string
    BodyDecodeError     -> response body that failed to decode, with field path
    BusinessError       -> endpoint-declared error payload on a non-success status
"""

from __future__ import annotations

from typing import Any, ClassVar

from .enums import ApiErrorKind
from .field_path import FieldPath


class ApiError(Exception):
    """Base exception for all library errors."""

    kind: ClassVar[ApiErrorKind]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "kind"):
            raise TypeError(f"{cls.__name__} must declare an ApiErrorKind")


class TransportError(ApiError):
    """The transport failed to deliver a request or produce a usable reply.

    ``cause`` is the opaque underlying failure reported by the transport. When
    a non-success response could not be decoded into the endpoint's business
    error model, ``status`` and ``body`` carry the raw reply instead.
    """

    kind = ApiErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        status: int | None = None,
        body: bytes | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.status = status
        self.body = body
        self.url = url


class UrlError(ApiError):
    """A request URL could not be composed."""

    kind = ApiErrorKind.URL

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class QueryEncodingError(ApiError):
    """A query parameter is not representable in the query string convention."""

    kind = ApiErrorKind.QUERY_ENCODING

    def __init__(self, parameter: str, reason: str) -> None:
        super().__init__(f"cannot encode query parameter {parameter!r}: {reason}")
        self.parameter = parameter
        self.reason = reason


class BodyDecodeError(ApiError):
    """A response body failed to decode at a specific field path."""

    kind = ApiErrorKind.BODY_DECODE

    def __init__(
        self,
        path: FieldPath,
        message: str,
        *,
        url: str | None = None,
        body: bytes | None = None,
    ) -> None:
        location = f" from {url}" if url else ""
        super().__init__(f"failed to decode response{location} at {path}: {message}")
        self.path = path
        self.message = message
        self.url = url
        self.body = body

    def with_response(self, url: str, body: bytes) -> BodyDecodeError:
        """Copy of this error annotated with the response it came from."""
        return BodyDecodeError(self.path, self.message, url=url, body=body)


class BusinessError(ApiError):
    """The endpoint answered with a non-success status and a structured error."""

    kind = ApiErrorKind.BUSINESS

    def __init__(
        self,
        status: int,
        payload: Any,
        *,
        url: str | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__(f"received unsuccessful status code {status}: {payload!r}")
        self.status = status
        self.payload = payload
        self.url = url
        self.body = body
