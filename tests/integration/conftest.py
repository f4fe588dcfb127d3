"""Shared fixtures for integration tests.

A local aiohttp application stands in for a paginated REST API so the full
request/transport/decode/paginate path runs without network access.
"""

from __future__ import annotations

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from apiwalk.runtime.rest import RESTTransport, RestRunner

CATALOG = [{"id": i, "name": f"item-{i}"} for i in range(1, 8)]


async def offset_items(request: web.Request) -> web.Response:
    offset = int(request.query.get("offset", 0))
    limit = int(request.query.get("limit", 3))
    return web.json_response(
        {"data": CATALOG[offset : offset + limit], "meta": {"total": len(CATALOG)}}
    )


async def linked_items(request: web.Request) -> web.Response:
    page = int(request.query.get("page", 1))
    chunk = CATALOG[(page - 1) * 4 : page * 4]
    following = None
    if page * 4 < len(CATALOG):
        following = str(request.url.with_query({"page": page + 1}))
    return web.json_response({"items": chunk, "next": following})


async def cursor_items(request: web.Request) -> web.Response:
    pages = {
        None: ([1, 2], "A"),
        "A": ([], "B"),
        "B": ([3], None),
    }
    ids, after = pages[request.query.get("after")]
    return web.json_response(
        {"items": [CATALOG[i - 1] for i in ids], "cursor": {"after": after}}
    )


async def order(request: web.Request) -> web.Response:
    order_id = request.match_info["order_id"]
    if order_id == "missing":
        return web.json_response({"code": "not_found", "message": "no such order"}, status=404)
    if order_id == "broken":
        return web.Response(status=502, text="<html>bad gateway</html>")
    return web.json_response({"id": order_id, "lines": [{"sku": "a", "qty": 1}, {"sku": "b", "qty": "two"}]})


def make_app() -> web.Application:
    hits = 0

    async def flaky(request: web.Request) -> web.Response:
        nonlocal hits
        hits += 1
        if hits == 1:
            return web.Response(status=503, text="try again")
        return web.json_response({"items": CATALOG[:2]})

    app = web.Application()
    app.router.add_get("/items", offset_items)
    app.router.add_get("/linked", linked_items)
    app.router.add_get("/cursor", cursor_items)
    app.router.add_get("/orders/{order_id}", order)
    app.router.add_get("/flaky", flaky)
    return app


@pytest_asyncio.fixture
async def api_server():
    """Start the local API server."""
    async with TestServer(make_app()) as server:
        yield server


@pytest_asyncio.fixture
async def base_url(api_server):
    return str(api_server.make_url("/")).rstrip("/")


@pytest_asyncio.fixture
async def runner(base_url):
    """Create a RestRunner over the default aiohttp transport."""
    async with RestRunner(RESTTransport(base_url)) as rest_runner:
        yield rest_runner
