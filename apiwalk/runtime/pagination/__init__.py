"""Pagination engine.

Architecture:
    - definitions.py: Page, PageContext, PaginationPolicy and callable shapes
    - paginator.py: The Paginator state machine (async iterator over items)
    - rules.py: Next-page rules for cursor, next-URL, offset and page-number APIs
    - telemetry.py: Structured logging

Usage:
    An endpoint's PageAdapter decodes each response into a Page whose cursor
    comes from a next-page rule. The Paginator fetches the first page on the
    first pull and follows cursors until a page has none.
"""

from __future__ import annotations

from .definitions import (
    CursorRule,
    Page,
    PageContext,
    PageFetcher,
    PaginationPolicy,
    RetryPolicy,
)
from .paginator import Paginator, follow_cursor
from .rules import cursor_field, next_url_field, offset_cursor, page_number_cursor

__all__ = [
    "Page",
    "PageContext",
    "PageFetcher",
    "PaginationPolicy",
    "RetryPolicy",
    "CursorRule",
    "Paginator",
    "follow_cursor",
    "cursor_field",
    "next_url_field",
    "offset_cursor",
    "page_number_cursor",
]
