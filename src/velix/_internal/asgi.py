"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with typed
dataclasses for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias
from urllib.parse import quote

# Raw ASGI types, as servers pass them
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


class BodyTooLarge(Exception):  # noqa: N818
    """The request body exceeded the configured limit."""


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """Typed HTTP scope parsed from raw ASGI scope dict.

    Internal only -- users interact with Request, not this.
    """

    method: str
    target: str
    query_string: bytes
    headers: tuple[tuple[bytes, bytes], ...]
    http_version: str = "1.1"

    @classmethod
    def from_scope(cls, scope: Scope) -> "HTTPScope":
        """Parse raw ASGI scope into typed object.

        ``target`` is the still-encoded request path. Servers that omit
        ``raw_path`` get the decoded ``path`` re-quoted, so the router
        always decodes exactly once.
        """
        raw_path: bytes = scope.get("raw_path") or b""
        if raw_path:
            target = raw_path.decode("latin-1")
        else:
            target = quote(scope.get("path", "/"), safe="/")
        return cls(
            method=scope.get("method", "GET"),
            target=target,
            query_string=scope.get("query_string", b""),
            headers=tuple(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
        )


async def read_body(receive: Receive, limit: int | None = None) -> bytes:
    """Drain ``http.request`` messages into one body.

    Raises ``BodyTooLarge`` as soon as more than *limit* bytes arrive.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if limit is not None and size > limit:
                raise BodyTooLarge(size)
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)
