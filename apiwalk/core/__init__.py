"""Core components."""

from .config import ClientConfig
from .enums import ApiErrorKind, HttpMethod, PaginatorState
from .exceptions import (
    ApiError,
    BodyDecodeError,
    BusinessError,
    QueryEncodingError,
    TransportError,
    UrlError,
)
from .field_path import FieldPath

__all__ = [
    "ApiErrorKind",
    "HttpMethod",
    "PaginatorState",
    "FieldPath",
    "ClientConfig",
    "ApiError",
    "TransportError",
    "UrlError",
    "QueryEncodingError",
    "BodyDecodeError",
    "BusinessError",
]
