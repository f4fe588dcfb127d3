"""Next-page rules for common pagination styles.

Each factory returns a ``CursorRule``: a pure function from a ``PageContext``
to the cursor of the next page, or None when the page is the last one. The
cursors they produce are query-parameter mappings (merged into the next
request) or next-page URLs, both of which ``EndpointRequest.advance``
understands.

Fields are read through a ``DecodeContext``, so a cursor that is present but
of the wrong type is reported as a ``BodyDecodeError`` with its field path.
"""

from __future__ import annotations

from typing import Any

from ...codec.body import DecodeContext
from ...core.exceptions import QueryEncodingError
from .definitions import CursorRule, PageContext


def _current_int(ctx: PageContext[Any], param: str, default: int) -> int:
    value = ctx.request.params.get(param, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise QueryEncodingError(param, f"expected an integer, got {value!r}") from None


def cursor_field(path: str, param: str) -> CursorRule:
    """Opaque token cursors: ``{"meta": {"next": "abc"}}`` -> ``{param: "abc"}``.

    A missing, null or empty token ends the sequence.
    """

    def rule(ctx: PageContext[Any]) -> dict[str, Any] | None:
        token = DecodeContext().lookup(ctx.document, path, (str, int), required=False)
        if token is None or token == "":
            return None
        return {param: token}

    return rule


def next_url_field(path: str) -> CursorRule:
    """Next-page URL cursors: ``{"next": "https://api/items?page=2"}``."""

    def rule(ctx: PageContext[Any]) -> str | None:
        url = DecodeContext().lookup(ctx.document, path, str, required=False)
        return url or None

    return rule


def offset_cursor(
    limit: int,
    *,
    offset_param: str = "offset",
    total_path: str | None = None,
) -> CursorRule:
    """Offset/limit pagination.

    The next offset is the current one plus the number of items received. The
    sequence ends on a short page, or once the offset reaches the total count
    the API reports at ``total_path``.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    def rule(ctx: PageContext[Any]) -> dict[str, int] | None:
        received = len(ctx.items)
        if received < limit:
            return None
        following = _current_int(ctx, offset_param, 0) + received
        if total_path is not None:
            total = DecodeContext().lookup(ctx.document, total_path, int, required=False)
            if total is not None and following >= total:
                return None
        return {offset_param: following}

    return rule


def page_number_cursor(
    per_page: int,
    *,
    page_param: str = "page",
    first_page: int = 1,
    total_path: str | None = None,
) -> CursorRule:
    """Page-number pagination (``?page=N``), ending like ``offset_cursor``."""
    if per_page < 1:
        raise ValueError("per_page must be at least 1")

    def rule(ctx: PageContext[Any]) -> dict[str, int] | None:
        if len(ctx.items) < per_page:
            return None
        page = _current_int(ctx, page_param, first_page)
        if total_path is not None:
            total = DecodeContext().lookup(ctx.document, total_path, int, required=False)
            if total is not None and (page - first_page + 1) * per_page >= total:
                return None
        return {page_param: page + 1}

    return rule
