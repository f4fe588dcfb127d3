"""Unit tests for the endpoint contract.

Tests focus on request composition and the response decoding decision table.
"""

from __future__ import annotations

import json

import pytest
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from apiwalk.core import (
    BodyDecodeError,
    BusinessError,
    HttpMethod,
    QueryEncodingError,
    TransportError,
    UrlError,
)
from apiwalk.runtime.pagination import Page, next_url_field, offset_cursor
from apiwalk.runtime.rest import (
    Endpoint,
    EndpointRequest,
    ModelAdapter,
    PageAdapter,
    RawResponse,
    RestEndpointSpec,
    describe_status,
)

BASE_URL = "https://api.example.com/v1"


class Issue(BaseModel):
    number: int
    title: str


class LineItem(BaseModel):
    sku: str
    total: int


class Invoice(BaseModel):
    id: str
    items: list[LineItem]


class Reading(BaseModel):
    sensor: str
    total: int | float


class Report(BaseModel):
    items: list[Reading]


class Cat(BaseModel):
    kind: Literal["cat"]
    lives: int


class Dog(BaseModel):
    kind: Literal["dog"]
    good: bool


Pet = Annotated[Cat | Dog, Field(discriminator="kind")]


class ApiErrorBody(BaseModel):
    code: str
    message: str


def make_response(status: int, payload: object = None, *, raw: bytes | None = None) -> RawResponse:
    body = raw if raw is not None else json.dumps(payload).encode()
    return RawResponse(status=status, body=body, url=f"{BASE_URL}/test")


class TestRestEndpointSpec:
    """Test RestEndpointSpec normalization."""

    def test_method_normalized(self):
        spec = RestEndpointSpec(id="x", method="post", path="/x")
        assert spec.method is HttpMethod.POST

    def test_method_enum_accepted(self):
        spec = RestEndpointSpec(id="x", method=HttpMethod.DELETE, path="/x")
        assert spec.method is HttpMethod.DELETE

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            RestEndpointSpec(id="x", method="TRACE", path="/x")


class TestBuildRequest:
    """Test Endpoint.build_request."""

    def endpoint(self, path: str = "/repos/{owner}/{repo}/issues", **spec_kwargs) -> Endpoint:
        spec = RestEndpointSpec(id="issues", method="GET", path=path, **spec_kwargs)
        return Endpoint(BASE_URL, spec, ModelAdapter(list[Issue]), headers={"Accept": "application/json"})

    def test_path_vars_and_query(self):
        request = EndpointRequest(
            path_vars={"owner": "octo", "repo": "hello world"},
            params={"state": "open", "labels": ["bug", "ui"]},
        )
        wire = self.endpoint().build_request(request)

        assert wire.method == "GET"
        assert wire.url == (
            "https://api.example.com/v1/repos/octo/hello%20world/issues"
            "?labels[0]=bug&labels[1]=ui&state=open"
        )
        assert wire.body is None
        assert wire.headers == {"Accept": "application/json"}

    def test_path_var_slash_is_escaped(self):
        request = EndpointRequest(path_vars={"owner": "a/b", "repo": "r"})
        wire = self.endpoint().build_request(request)
        assert "/repos/a%2Fb/r/issues" in wire.url

    def test_no_query_when_params_empty(self):
        wire = self.endpoint(path="/status").build_request()
        assert wire.url == "https://api.example.com/v1/status"

    def test_missing_path_var(self):
        with pytest.raises(UrlError, match="owner"):
            self.endpoint().build_request(EndpointRequest(path_vars={"repo": "r"}))

    def test_invalid_base_url(self):
        spec = RestEndpointSpec(id="x", method="GET", path="/x")
        endpoint = Endpoint("not a url", spec, ModelAdapter(dict))
        with pytest.raises(UrlError):
            endpoint.build_request()

    def test_non_http_scheme(self):
        spec = RestEndpointSpec(id="x", method="GET", path="/x")
        endpoint = Endpoint("ftp://files.example.com", spec, ModelAdapter(dict))
        with pytest.raises(UrlError, match="scheme"):
            endpoint.build_request()

    def test_unencodable_query(self):
        with pytest.raises(QueryEncodingError) as exc_info:
            self.endpoint(path="/x").build_request(EndpointRequest(params={"since": object()}))
        assert exc_info.value.parameter == "since"

    def test_build_query_hook(self):
        endpoint = self.endpoint(
            path="/search", build_query=lambda r: {"q": r.params["q"], "per_page": 50}
        )
        wire = endpoint.build_request(EndpointRequest(params={"q": "rust", "ignored": 1}))
        assert wire.url == "https://api.example.com/v1/search?per_page=50&q=rust"

    def test_absolute_request_url_keeps_its_query(self):
        request = EndpointRequest(url="https://api.example.com/v1/items?page=2", params={"limit": 5})
        wire = self.endpoint(path="/items").build_request(request)
        assert wire.url == "https://api.example.com/v1/items?page=2&limit=5"

    @pytest.mark.parametrize("method", ["GET", "HEAD"])
    def test_body_on_bodiless_method_rejected(self, method):
        spec = RestEndpointSpec(id="lookup", method=method, path="/issues")
        endpoint = Endpoint(BASE_URL, spec, ModelAdapter(dict))
        with pytest.raises(UrlError, match=f"{method} requests cannot carry a body"):
            endpoint.build_request(EndpointRequest(body={"title": "bug"}))

    def test_build_body_hook_on_get_rejected(self):
        with pytest.raises(UrlError, match="cannot carry a body"):
            self.endpoint(path="/x", build_body=lambda r: {"q": 1}).build_request()

    def test_json_body_and_headers(self):
        spec = RestEndpointSpec(
            id="create",
            method="POST",
            path="/issues",
            build_headers=lambda r: {"X-Request-Id": "abc"},
        )
        endpoint = Endpoint(BASE_URL, spec, ModelAdapter(Issue))
        request = EndpointRequest(body={"title": "bug"}, headers={"Authorization": "token t"})

        wire = endpoint.build_request(request)

        assert wire.method == "POST"
        assert json.loads(wire.body) == {"title": "bug"}
        assert wire.headers == {
            "X-Request-Id": "abc",
            "Authorization": "token t",
            "Content-Type": "application/json",
        }

    def test_build_body_hook_with_model(self):
        spec = RestEndpointSpec(
            id="create",
            method="PUT",
            path="/issues/{n}",
            build_body=lambda r: Issue(number=r.path_vars["n"], title="t"),
        )
        wire = Endpoint(BASE_URL, spec, ModelAdapter(Issue)).build_request(
            EndpointRequest(path_vars={"n": 7})
        )
        assert wire.url.endswith("/issues/7")
        assert json.loads(wire.body) == {"number": 7, "title": "t"}


class TestDecodeResponse:
    """Test Endpoint.decode_response decision table."""

    def endpoint(self, adapter=None, **spec_kwargs) -> Endpoint:
        spec = RestEndpointSpec(id="invoice", method="GET", path="/invoice", **spec_kwargs)
        return Endpoint(BASE_URL, spec, adapter or ModelAdapter(Invoice))

    def test_success_decodes(self):
        payload = {"id": "inv-1", "items": [{"sku": "a", "total": 3}]}
        invoice = self.endpoint().decode_response(make_response(200, payload))
        assert invoice.items[0].total == 3

    def test_success_decode_failure_has_path_and_response(self):
        payload = {
            "id": "inv-1",
            "items": [{"sku": "a", "total": 1}, {"sku": "b", "total": 2}, {"sku": "c", "total": "n/a"}],
        }
        response = make_response(200, payload)
        with pytest.raises(BodyDecodeError) as exc_info:
            self.endpoint().decode_response(response)

        error = exc_info.value
        assert str(error.path) == "items[2].total"
        assert error.body == response.body
        assert error.url == response.url

    def test_union_member_is_not_in_path(self):
        """Test an int | float field reports the field, not the union member."""
        payload = {"items": [{"sensor": "a", "total": 1}, {"sensor": "b", "total": 2.5}, {"sensor": "c", "total": "n/a"}]}
        with pytest.raises(BodyDecodeError) as exc_info:
            self.endpoint(adapter=ModelAdapter(Report)).decode_response(make_response(200, payload))
        assert str(exc_info.value.path) == "items[2].total"

    def test_error_without_model_is_transport_error(self):
        response = make_response(503, raw=b"<html>down</html>")
        with pytest.raises(TransportError) as exc_info:
            self.endpoint().decode_response(response)
        assert exc_info.value.status == 503
        assert exc_info.value.body == b"<html>down</html>"
        assert "503 Service Unavailable" in str(exc_info.value)

    def test_error_model_decoded_is_business_error(self):
        response = make_response(404, {"code": "not_found", "message": "no such invoice"})
        with pytest.raises(BusinessError) as exc_info:
            self.endpoint(error_model=ApiErrorBody).decode_response(response)
        assert exc_info.value.status == 404
        assert exc_info.value.payload == ApiErrorBody(code="not_found", message="no such invoice")

    def test_error_model_undecodable_falls_back_to_transport(self):
        response = make_response(500, raw=b"Internal Server Error")
        with pytest.raises(TransportError) as exc_info:
            self.endpoint(error_model=ApiErrorBody).decode_response(response)
        assert exc_info.value.status == 500
        assert exc_info.value.body == b"Internal Server Error"
        assert isinstance(exc_info.value.__cause__, BodyDecodeError)

    def test_custom_success_statuses(self):
        endpoint = self.endpoint(adapter=ModelAdapter(dict), success_statuses={200, 304})
        assert endpoint.decode_response(make_response(304, {})) == {}
        with pytest.raises(TransportError):
            endpoint.decode_response(make_response(201, {}))

    def test_describe_status(self):
        assert describe_status(404) == "404 Not Found"
        assert describe_status(599) == "599"


class TestPageAdapter:
    """Test PageAdapter decoding into pages."""

    def response(self, payload: object) -> RawResponse:
        return make_response(200, payload)

    def test_items_and_cursor(self):
        adapter = PageAdapter(Issue, next_cursor=next_url_field("next"))
        page = adapter.parse(
            self.response({"items": [{"number": 1, "title": "a"}], "next": "https://x/?p=2"}),
            EndpointRequest(),
        )
        assert isinstance(page, Page)
        assert page.items == (Issue(number=1, title="a"),)
        assert page.cursor == "https://x/?p=2"

    def test_last_page_without_rule(self):
        page = PageAdapter(Issue).parse(self.response({"items": []}), EndpointRequest())
        assert page.items == ()
        assert page.cursor is None

    def test_nested_items_path_and_total(self):
        adapter = PageAdapter(Issue, items_path="data.results", total_path="data.count")
        page = adapter.parse(
            self.response({"data": {"results": [{"number": 2, "title": "b"}], "count": 9}}),
            EndpointRequest(),
        )
        assert page.total == 9
        assert len(page) == 1

    def test_body_is_the_list(self):
        page = PageAdapter(Issue, items_path=None).parse(
            self.response([{"number": 3, "title": "c"}]), EndpointRequest()
        )
        assert page.items[0].number == 3

    def test_item_error_located_under_items_path(self):
        adapter = PageAdapter(Issue, items_path="data.results")
        with pytest.raises(BodyDecodeError) as exc_info:
            adapter.parse(
                self.response({"data": {"results": [{"number": 1, "title": "a"}, {"number": "n/a", "title": "b"}]}}),
                EndpointRequest(),
            )
        assert str(exc_info.value.path) == "data.results[1].number"

    def test_tagged_union_item_error_path(self):
        """Test the discriminator tag does not appear in the reported path."""
        payload = {"items": [{"kind": "cat", "lives": "many"}, {"kind": "dog", "good": True}]}
        with pytest.raises(BodyDecodeError) as exc_info:
            PageAdapter(Pet).parse(self.response(payload), EndpointRequest())
        assert str(exc_info.value.path) == "items[0].lives"

    def test_tagged_union_items_decode(self):
        payload = {"items": [{"kind": "cat", "lives": 9}, {"kind": "dog", "good": True}]}
        page = PageAdapter(Pet).parse(self.response(payload), EndpointRequest())
        assert page.items == (Cat(kind="cat", lives=9), Dog(kind="dog", good=True))

    def test_missing_items(self):
        with pytest.raises(BodyDecodeError) as exc_info:
            PageAdapter(Issue).parse(self.response({"results": []}), EndpointRequest())
        assert str(exc_info.value.path) == "items"

    def test_offset_rule_reads_request(self):
        adapter = PageAdapter(Issue, next_cursor=offset_cursor(1))
        page = adapter.parse(
            self.response({"items": [{"number": 1, "title": "a"}]}),
            EndpointRequest(params={"offset": 4, "limit": 1}),
        )
        assert page.cursor == {"offset": 5}
