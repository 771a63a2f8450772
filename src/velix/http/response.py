"""Mutable HTTP response with a single terminal send.

Handlers receive a fresh ``Response`` per request, chain mutators on it,
and finalize it exactly once with ``send()`` or ``json()``. After that the
response is read-only: any further call raises ``ResponseAlreadySent``.
The transport adapter transmits the finalized response once the handler
returns.
"""

from typing import Any

from velix.errors import ResponseAlreadySent
from velix.http.body import JSON_CONTENT_TYPE, encode_json
from velix.http.cookies import CookieOptions, CookieSpec, build_cookie

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"


class Response:
    """An HTTP response built incrementally by handler code.

    Usage::

        def create(res: Response, name: str):
            res.status(201).header("X-Created", name).json({"name": name})
    """

    __slots__ = ("_body", "_cookies", "_headers", "_sent", "_status")

    def __init__(self) -> None:
        self._status: int = 200
        # lowercased name -> (name as given, value); keeps first-set position
        self._headers: dict[str, tuple[str, str]] = {}
        self._cookies: list[CookieSpec] = []
        self._body: bytes = b""
        self._sent: bool = False

    def __repr__(self) -> str:
        state = "sent" if self._sent else "pending"
        return f"<Response {self._status} {state}>"

    # -- Chainable mutators --

    def header(self, name: str, value: str) -> "Response":
        """Set a header. A later call with the same name (any case) overwrites."""
        self._ensure_pending("header")
        self._headers[name.lower()] = (name, str(value))
        return self

    def cookie(self, name: str, value: Any, options: CookieOptions = None) -> "Response":
        """Queue a ``Set-Cookie``. Calls accumulate in order.

        *options* is a bare expiry (int or str) or a mapping of cookie
        attributes; see ``build_cookie``.
        """
        self._ensure_pending("cookie")
        self._cookies.append(build_cookie(name, value, options))
        return self

    def status(self, code: int) -> "Response":
        """Set the status code. A later call overwrites."""
        self._ensure_pending("status")
        self._status = int(code)
        return self

    # -- Finalization --

    def json(self, data: Any) -> None:
        """Send *data* as a UTF-8 JSON body with non-ASCII left unescaped."""
        self._ensure_pending("json")
        payload = encode_json(data)
        self.header("Content-Type", JSON_CONTENT_TYPE)
        self.send(payload)

    def send(self, body: str | bytes = "") -> None:
        """Finalize the response with *body*. Irreversible."""
        self._ensure_pending("send")
        self._body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self._sent = True

    # -- Read side --

    @property
    def sent(self) -> bool:
        return self._sent

    @property
    def status_code(self) -> int:
        return self._status

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Headers in first-set order."""
        return tuple(self._headers.values())

    @property
    def cookies(self) -> tuple[CookieSpec, ...]:
        return tuple(self._cookies)

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def content_type(self) -> str:
        entry = self._headers.get("content-type")
        return entry[1] if entry else DEFAULT_CONTENT_TYPE

    def get_header(self, name: str, default: str | None = None) -> str | None:
        entry = self._headers.get(name.lower())
        return entry[1] if entry else default

    def _ensure_pending(self, operation: str) -> None:
        if self._sent:
            raise ResponseAlreadySent(operation)
