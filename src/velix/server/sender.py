"""ASGI response sending: translates a finalized Response to ASGI messages."""

from velix._internal.asgi import Send
from velix.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode(value: str) -> bytes:
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


def encode_headers(response: Response) -> list[tuple[bytes, bytes]]:
    """Raw header pairs: content type, accumulated headers, one Set-Cookie per cookie."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", _encode(response.content_type)),
    ]
    for name, value in response.headers:
        if name.lower() in ("content-type", "content-length"):
            continue
        raw_headers.append((name.lower().encode("latin-1"), _encode(value)))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )
    return raw_headers


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a velix Response into ASGI send() calls."""
    raw_headers = encode_headers(response)

    body = response.body if _body_allowed(response.status_code) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    if method == "HEAD":
        body = b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status_code,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
