"""Structured logging for pagination.

Event names are the log message; context goes in ``extra`` so handlers that
emit structured records pick the fields up directly.
"""

from __future__ import annotations

import logging

from ...core.exceptions import ApiError

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    paginator: str,
    page_index: int,
    items: int,
    has_more: bool,
    latency_ms: float | None = None,
) -> None:
    """Log a page that was fetched and decoded.

    Args:
        paginator: Paginator name (usually the endpoint id)
        page_index: Zero-based index of the page
        items: Number of items on the page
        has_more: Whether another page will be requested
        latency_ms: Fetch and decode latency in milliseconds
    """
    logger.debug(
        "page_fetched",
        extra={
            "paginator": paginator,
            "page_index": page_index,
            "items": items,
            "has_more": has_more,
            "latency_ms": latency_ms,
        },
    )


def log_empty_page_skipped(*, paginator: str, page_index: int) -> None:
    logger.debug(
        "empty_page_skipped",
        extra={"paginator": paginator, "page_index": page_index},
    )


def log_pagination_retry(*, paginator: str, attempt: int, error: ApiError) -> None:
    logger.warning(
        "pagination_retry",
        extra={
            "paginator": paginator,
            "attempt": attempt,
            "error_kind": error.kind.value,
            "error_message": str(error),
        },
    )


def log_pagination_exhausted(
    *, paginator: str, pages: int, items: int, fetches: int
) -> None:
    """Log the end of a sequence.

    Args:
        paginator: Paginator name
        pages: Pages fetched
        items: Items yielded to the consumer
        fetches: Fetch attempts, retries included
    """
    logger.info(
        "pagination_exhausted",
        extra={
            "paginator": paginator,
            "pages": pages,
            "items": items,
            "fetches": fetches,
        },
    )


def log_pagination_failed(*, paginator: str, pages: int, error: BaseException) -> None:
    kind = error.kind.value if isinstance(error, ApiError) else type(error).__name__
    logger.error(
        "pagination_failed",
        extra={
            "paginator": paginator,
            "pages": pages,
            "error_kind": kind,
            "error_message": str(error),
        },
    )
