"""Tests for velix.http.request: the immutable request and its accessors."""

import json

import pytest

from velix.http.forms import FormData
from velix.http.request import Request


def _json_request(payload: object, **kwargs) -> Request:
    return Request.build(
        "POST",
        "api/users",
        body=json.dumps(payload).encode(),
        headers={"Content-Type": "application/json"},
        **kwargs,
    )


class TestRequestBuild:
    def test_basic_fields(self) -> None:
        request = Request.build("GET", "api/users/Ada", path_params={"name": "Ada"})
        assert request.method == "GET"
        assert request.path == "api/users/Ada"
        assert request.param("name") == "Ada"
        assert request.body == b""

    def test_frozen(self) -> None:
        request = Request.build("GET", "x")
        with pytest.raises(AttributeError):
            request.method = "POST"  # type: ignore[misc]

    def test_path_params_copied(self) -> None:
        params = {"name": "Ada"}
        request = Request.build("GET", "x", path_params=params)
        params["name"] = "Grace"
        assert request.param("name") == "Ada"


class TestInput:
    def test_json_field(self) -> None:
        request = _json_request({"name": "Ada", "age": 36})
        assert request.input("name") == "Ada"
        assert request.input("age") == 36

    def test_form_field(self) -> None:
        request = Request.build(
            "POST",
            "x",
            body=b"name=Ada&lang=python",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert request.input("name") == "Ada"
        assert request.input("lang") == "python"

    def test_missing_returns_default(self) -> None:
        request = _json_request({"name": "Ada"})
        assert request.input("missing") is None
        assert request.input("missing", "fallback") == "fallback"

    def test_json_null_counts_as_absent(self) -> None:
        request = _json_request({"name": None})
        assert request.input("name", "fallback") == "fallback"

    def test_malformed_json_yields_empty(self) -> None:
        request = Request.build(
            "POST", "x", body=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert request.json_body == {}
        assert request.input("name") is None

    def test_deeply_nested_json_yields_empty(self) -> None:
        depth = 100_000
        request = Request.build(
            "POST",
            "echo",
            body=b"[" * depth + b"]" * depth,
            headers={"Content-Type": "application/json"},
        )
        assert request.json_body == {}
        assert request.input("name", "fallback") == "fallback"

    def test_json_array_yields_empty(self) -> None:
        request = _json_request([1, 2, 3])
        assert request.json_body == {}

    def test_unicode_json(self) -> None:
        request = _json_request({"name": "สมชาย"})
        assert request.input("name") == "สมชาย"

    def test_form_takes_precedence_over_json(self) -> None:
        request = Request(
            method="POST",
            path="x",
            form=FormData({"name": ["Form"]}),
            json_body={"name": "Json", "age": 36},
        )
        assert request.input("name") == "Form"
        assert request.input("age") == 36

    def test_urlencoded_body_is_not_json(self) -> None:
        request = Request.build(
            "POST",
            "x",
            body=b"name=Form",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert request.json_body == {}

    def test_multipart_form(self) -> None:
        boundary = "----velixboundary"
        body = (
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="name"\r\n\r\n'
            "Ada\r\n"
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="avatar"; filename="ada.txt"\r\n'
            "Content-Type: text/plain\r\n\r\n"
            "hello\r\n"
            f"--{boundary}--\r\n"
        ).encode()
        request = Request.build(
            "POST",
            "x",
            body=body,
            headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
        )
        assert request.input("name") == "Ada"
        upload = request.form.files["avatar"]
        assert upload.filename == "ada.txt"
        assert upload.read() == b"hello"


class TestQuery:
    def test_first_value(self) -> None:
        request = Request.build("GET", "x", query_string=b"tag=a&tag=b&page=2")
        assert request.query("tag") == "a"
        assert request.query_params.get_list("tag") == ["a", "b"]
        assert request.query_params.get_int("page") == 2

    def test_missing_returns_default(self) -> None:
        request = Request.build("GET", "x")
        assert request.query("q") is None
        assert request.query("q", "all") == "all"

    def test_percent_encoded_utf8(self) -> None:
        request = Request.build("GET", "x", query_string="name=%E0%B8%81")
        assert request.query("name") == "ก"


class TestHeadersAndCookies:
    def test_header_case_insensitive(self) -> None:
        request = Request.build("GET", "x", headers={"X-Request-Id": "abc"})
        assert request.header("x-request-id") == "abc"
        assert request.header("X-REQUEST-ID") == "abc"
        assert request.header("missing", "none") == "none"

    def test_content_type(self) -> None:
        request = Request.build("GET", "x", headers={"Content-Type": "text/plain"})
        assert request.content_type == "text/plain"

    def test_cookies(self) -> None:
        request = Request.build("GET", "x", headers={"Cookie": "session=abc; theme=dark"})
        assert request.cookie("session") == "abc"
        assert request.cookie("theme") == "dark"
        assert request.cookie("missing") is None
