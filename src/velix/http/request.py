"""Immutable HTTP request.

Built once per dispatch from what the transport delivered. Everything is
parsed up front, so handlers read plain values and never block.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from velix.errors import MalformedRequestBody
from velix.http.body import parse_json_object
from velix.http.cookies import parse_cookies
from velix.http.forms import FormData, parse_form_data
from velix.http.headers import Headers
from velix.http.query import QueryParams

logger = logging.getLogger("velix.server")


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the normalized path the router matched against (decoded,
    no leading or trailing slashes). ``form`` holds body fields from a
    form-encoded payload; ``json_body`` holds the payload decoded as a
    JSON object, or ``{}`` when it is absent or malformed.
    """

    method: str
    path: str
    path_params: dict[str, str] = field(default_factory=dict)
    query_params: QueryParams = field(default_factory=QueryParams)
    form: FormData = field(default_factory=FormData)
    json_body: dict[str, Any] = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    # -- Accessors --

    def input(self, key: str, default: Any = None) -> Any:
        """Return a body value: form field first, then JSON field, else *default*."""
        value = self.form.get(key)
        if value is not None:
            return value
        value = self.json_body.get(key)
        if value is not None:
            return value
        return default

    def query(self, key: str, default: Any = None) -> Any:
        """Return the first query string value for *key*, else *default*."""
        return self.query_params.get(key, default)

    def param(self, key: str, default: Any = None) -> Any:
        """Return a captured path parameter, else *default*."""
        return self.path_params.get(key, default)

    def header(self, key: str, default: Any = None) -> Any:
        """Return a header value (case-insensitive), else *default*."""
        return self.headers.get(key, default)

    def cookie(self, key: str, default: Any = None) -> Any:
        """Return a request cookie value, else *default*."""
        return self.cookies.get(key, default)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Factory --

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        path_params: dict[str, str] | None = None,
        query_string: bytes | str = b"",
        body: bytes = b"",
        headers: Headers | Mapping[str, str] | None = None,
    ) -> "Request":
        """Create a Request, parsing query, form, JSON and cookies.

        Never raises on a malformed payload: an unparseable form yields
        empty ``form`` and an unparseable JSON payload yields ``{}``.
        """
        if not isinstance(headers, Headers):
            headers = Headers.from_mapping(headers)

        try:
            form = parse_form_data(body, headers.get("content-type"))
        except MalformedRequestBody as exc:
            logger.debug("%s /%s: ignoring form body: %s", method, path, exc)
            form = FormData()

        try:
            json_body = parse_json_object(body)
        except MalformedRequestBody as exc:
            logger.debug("%s /%s: ignoring JSON body: %s", method, path, exc)
            json_body = {}

        return cls(
            method=method,
            path=path,
            path_params=dict(path_params or {}),
            query_params=QueryParams(query_string),
            form=form,
            json_body=json_body,
            headers=headers,
            cookies=parse_cookies(headers.get("cookie", "") or ""),
            body=body,
        )
