"""Pagination data structures and policy.

This module defines the page value produced by response decoding, the
policy that configures a paginator, and the callable shapes the paginator
accepts from callers.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from ...core.enums import ApiErrorKind
from ...core.exceptions import ApiError

T = TypeVar("T")
R = TypeVar("R")
T_co = TypeVar("T_co", covariant=True)
R_contra = TypeVar("R_contra", contravariant=True)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One decoded response: ordered items plus optional continuation state.

    Attributes:
        items: Items in the order the API returned them
        cursor: Opaque continuation token; None means this is the last page
        total: Total item count reported by the API, if any
    """

    items: tuple[T, ...] = ()
    cursor: Any = None
    total: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def has_more(self) -> bool:
        return self.cursor is not None

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class PageContext(Generic[T]):
    """Everything a next-page rule may look at when computing a cursor.

    Attributes:
        document: Parsed JSON body
        items: Decoded items of the page
        request: Request that produced the page
        status: Response status code
        headers: Response headers
    """

    document: Any
    items: Sequence[T]
    request: Any
    status: int = 200
    headers: Any = field(default_factory=dict)


CursorRule = Callable[[PageContext[Any]], Any]
"""Computes the cursor for the next page, or None when there is none."""

NextRequest = Callable[[R, Page[Any]], "R | None"]
"""Builds the next request from the current one and its page."""

RetryPolicy = Callable[[ApiError, int], Awaitable[bool]]
"""Caller-supplied decision whether to re-issue a failed fetch.

Called with the error and the 1-based number of the failed attempt for the
current page. May sleep before returning True.
"""


class PageFetcher(Protocol[R_contra, T_co]):
    """The single asynchronous capability the paginator needs."""

    def __call__(self, request: R_contra) -> Awaitable[Page[T_co]]: ...


@dataclass(frozen=True)
class PaginationPolicy:
    """Paginator configuration.

    Attributes:
        skip_empty_pages: Collapse empty pages that carry a cursor. When False
            such a page is a protocol violation reported as a BodyDecodeError
            at field path ``items``.
        max_pages: Stop after this many pages have been fetched (None = no cap)
        retry_on: Error kinds that are handed to the caller's retry policy;
            every other kind terminates the sequence immediately
    """

    skip_empty_pages: bool = True
    max_pages: int | None = None
    retry_on: frozenset[ApiErrorKind] = frozenset()

    def __post_init__(self) -> None:
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("PaginationPolicy max_pages must be at least 1")
        object.__setattr__(self, "retry_on", frozenset(self.retry_on))
