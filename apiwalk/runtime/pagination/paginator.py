"""Paginator: a lazy, ordered async sequence of items spanning many pages.

State machine:

    INIT --pull--> FETCHING --page--> READY --drained, next request--> FETCHING
                      |                 |
                      | error           +--drained, no next request--> EXHAUSTED
                      v
                    FAILED

Pages are fetched one at a time and only when the consumer pulls past the
end of the buffered page, so at most one page is held in memory and at most
one fetch is outstanding. Empty pages that still carry a continuation are
skipped inside the same pull. A failure is raised from exactly one pull;
every later pull ends the iteration without fetching again.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Callable
from time import perf_counter
from typing import Any, Generic, TypeVar

from ...core.enums import PaginatorState
from ...core.exceptions import ApiError, BodyDecodeError
from ...core.field_path import FieldPath
from .definitions import Page, PageFetcher, PaginationPolicy, RetryPolicy
from .telemetry import (
    log_empty_page_skipped,
    log_page_fetched,
    log_pagination_exhausted,
    log_pagination_failed,
    log_pagination_retry,
)

T = TypeVar("T")
R = TypeVar("R")


def follow_cursor(request: Any, page: Page[Any]) -> Any:
    """Default next-request rule: ``request.advance(cursor)`` while a cursor exists."""
    if page.cursor is None:
        return None
    return request.advance(page.cursor)


class Paginator(Generic[R, T]):
    """Async iterator flattening pages into items, in order.

    Args:
        fetch_page: Async callable fetching and decoding the page for a request
        request: Request for the first page
        next_request: Builds the next request from the current request and its
            page, returning None at the end (default: ``follow_cursor``)
        policy: Empty-page, page-cap and retry configuration
        retry: Caller-supplied retry decision for error kinds in
            ``policy.retry_on``; the paginator never retries on its own
        name: Label used in logs

    A paginator is single-use and owned by one consumer. Iterating it again
    continues where it stopped; start over by building a new one.
    """

    def __init__(
        self,
        fetch_page: PageFetcher[R, T],
        request: R,
        *,
        next_request: Callable[[R, Page[T]], R | None] | None = None,
        policy: PaginationPolicy | None = None,
        retry: RetryPolicy | None = None,
        name: str = "paginator",
    ) -> None:
        self._fetch_page = fetch_page
        self._request: R | None = request
        self._next_request = next_request or follow_cursor
        self._policy = policy or PaginationPolicy()
        self._retry = retry
        self.name = name

        self._state = PaginatorState.INIT
        self._buffer: deque[T] = deque()
        self._error: BaseException | None = None
        self._total: int | None = None

        self.fetch_count = 0
        self.pages_fetched = 0
        self.items_yielded = 0

    @property
    def state(self) -> PaginatorState:
        return self._state

    @property
    def error(self) -> BaseException | None:
        """The error that ended the sequence, if it failed."""
        return self._error

    def __aiter__(self) -> Paginator[R, T]:
        return self

    async def __anext__(self) -> T:
        self._check_not_fetching()
        while not self._buffer:
            if self._state.is_terminal:
                raise StopAsyncIteration
            if self._request is None:
                self._exhaust()
                raise StopAsyncIteration
            await self._advance()
        self.items_yielded += 1
        return self._buffer.popleft()

    async def pages(self) -> AsyncIterator[Page[T]]:
        """Iterate whole non-empty pages instead of items.

        Must be used on a paginator that has not started yet.
        """
        self._check_not_fetching()
        if self._state is not PaginatorState.INIT:
            raise RuntimeError(f"{self.name}: pages() requires an unstarted paginator")
        while not self._state.is_terminal and self._request is not None:
            self._check_not_fetching()
            page = await self._advance()
            if page is None or not self._buffer:
                continue
            self.items_yielded += len(self._buffer)
            self._buffer.clear()
            yield page
        if not self._state.is_terminal:
            self._exhaust()

    async def collect(self, limit: int | None = None) -> list[T]:
        """Drain the sequence (or its first ``limit`` items) into a list."""
        out: list[T] = []
        if limit is not None and limit <= 0:
            return out
        async for item in self:
            out.append(item)
            if limit is not None and len(out) >= limit:
                break
        return out

    def size_hint(self) -> tuple[int, int | None]:
        """Lower and upper bound of the items still to come.

        The upper bound is only known once a page reported a total.
        """
        buffered = len(self._buffer)
        if self._state.is_terminal:
            return (0, 0)
        if self._total is None:
            return (buffered, None)
        return (buffered, max(self._total - self.items_yielded, buffered))

    async def aclose(self) -> None:
        """Stop the sequence; later pulls end the iteration without fetching."""
        self._buffer.clear()
        self._request = None
        if not self._state.is_terminal:
            self._state = PaginatorState.EXHAUSTED

    async def __aenter__(self) -> Paginator[R, T]:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _check_not_fetching(self) -> None:
        if self._state is PaginatorState.FETCHING:
            raise RuntimeError(f"{self.name}: concurrent pull while a fetch is outstanding")

    async def _advance(self) -> Page[T] | None:
        """Fetch the current request's page and move to READY, FAILED or EXHAUSTED."""
        request = self._request
        previous = self._state
        self._state = PaginatorState.FETCHING
        start = perf_counter()
        try:
            page = await self._fetch(request)
            if self._state is not PaginatorState.FETCHING:
                # closed while the fetch was outstanding
                return None
            following = self._next_request(request, page)
        except asyncio.CancelledError:
            if self._state is PaginatorState.FETCHING:
                self._state = previous
            raise
        except Exception as exc:
            self._fail(exc)
            raise

        page_index = self.pages_fetched
        self.pages_fetched += 1
        if page.total is not None:
            self._total = page.total
        if self._policy.max_pages is not None and self.pages_fetched >= self._policy.max_pages:
            following = None

        if not page.items and following is not None:
            if not self._policy.skip_empty_pages:
                error = BodyDecodeError(
                    FieldPath(("items",)), "empty page with a continuation cursor"
                )
                self._fail(error)
                raise error
            log_empty_page_skipped(paginator=self.name, page_index=page_index)

        self._buffer.extend(page.items)
        self._request = following
        self._state = PaginatorState.READY
        log_page_fetched(
            paginator=self.name,
            page_index=page_index,
            items=len(page.items),
            has_more=following is not None,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return page

    async def _fetch(self, request: R) -> Page[T]:
        attempt = 0
        while True:
            attempt += 1
            self.fetch_count += 1
            try:
                return await self._fetch_page(request)
            except ApiError as exc:
                if self._retry is None or exc.kind not in self._policy.retry_on:
                    raise
                if not await self._retry(exc, attempt):
                    raise
                log_pagination_retry(paginator=self.name, attempt=attempt, error=exc)

    def _fail(self, error: BaseException) -> None:
        self._state = PaginatorState.FAILED
        self._error = error
        self._buffer.clear()
        self._request = None
        log_pagination_failed(paginator=self.name, pages=self.pages_fetched, error=error)

    def _exhaust(self) -> None:
        self._state = PaginatorState.EXHAUSTED
        log_pagination_exhausted(
            paginator=self.name,
            pages=self.pages_fetched,
            items=self.items_yielded,
            fetches=self.fetch_count,
        )
