"""Request dispatch: route lookup, argument binding, handler invocation.

``dispatch`` is the synchronous core: one call handles one request to
completion and returns a finalized ``Response``. ``handle_request`` is
the only component that touches raw ASGI: it reads the body, runs
``dispatch`` on a worker thread, and sends the result back.
"""

import logging
from collections.abc import Mapping
from functools import partial

import anyio.to_thread

from velix._internal.asgi import BodyTooLarge, HTTPScope, Receive, Scope, Send, read_body
from velix.errors import ResponseAlreadySent
from velix.http.headers import Headers
from velix.http.request import Request
from velix.http.response import Response
from velix.routing.binding import bind_arguments
from velix.routing.pattern import normalize_path
from velix.routing.route import RouteMatch
from velix.routing.router import Router
from velix.server.sender import send_response
from velix.server.static import StaticFallback

logger = logging.getLogger("velix.server")

NOT_FOUND_BODY = "404 Not Found"
INTERNAL_ERROR_BODY = "500 Internal Server Error"
PAYLOAD_TOO_LARGE_BODY = "413 Payload Too Large"
PLAIN_TEXT = "text/plain; charset=utf-8"


def dispatch(
    method: str,
    target: str,
    *,
    router: Router,
    query_string: bytes | str = b"",
    headers: Headers | Mapping[str, str] | None = None,
    body: bytes = b"",
    fallback: StaticFallback | None = None,
    debug: bool = False,
) -> Response:
    """Process one request and return its finalized response.

    *target* is the raw (still percent-encoded) request path. Unmatched
    requests get the fallback page with 200, or a plain-text 404.
    """
    method = method.upper()
    path = normalize_path(target)
    match = router.match(method, target)

    if match is None:
        logger.debug("no route for %s /%s", method, path)
        return _not_found(fallback)

    request = Request.build(
        method=method,
        path=path,
        path_params=match.path_params,
        query_string=query_string,
        body=body,
        headers=headers,
    )
    return _invoke_handler(match, request, debug=debug)


def _not_found(fallback: StaticFallback | None) -> Response:
    response = Response()
    content = fallback.load() if fallback is not None else None
    if content is not None:
        response.header("Content-Type", content.content_type).send(content.body)
    else:
        response.status(404).header("Content-Type", PLAIN_TEXT).send(NOT_FOUND_BODY)
    return response


def _invoke_handler(match: RouteMatch, request: Request, *, debug: bool) -> Response:
    """Call the matched route handler and finalize the response from its result."""
    route = match.route
    response = Response()
    args, kwargs = bind_arguments(route.bindings, request, response, match.path_params)

    try:
        result = route.handler(*args, **kwargs)
        _finalize(result, response, request)
    except ResponseAlreadySent:
        logger.exception("%s %s: handler touched a sent response", request.method, route.path)
        if debug:
            raise
        return response
    except Exception as exc:
        logger.exception("500 %s /%s", request.method, request.path)
        if response.sent:
            return response
        return _internal_error(exc, debug=debug)

    return response


def _finalize(result: object, response: Response, request: Request) -> None:
    """Turn a handler's return value into the response body."""
    if result is response:
        if not response.sent:
            response.send()
        return

    if result is None:
        # Handler is expected to have sent; anything else is an empty body
        if not response.sent:
            response.send()
        return

    if response.sent:
        logger.warning(
            "%s /%s: handler returned %s after sending; return value discarded",
            request.method,
            request.path,
            type(result).__name__,
        )
        return

    response.json(result)


def _internal_error(exc: Exception, *, debug: bool) -> Response:
    body = INTERNAL_ERROR_BODY
    if debug:
        body = f"{body}\n\n{type(exc).__name__}: {exc}"
    response = Response()
    response.status(500).header("Content-Type", PLAIN_TEXT).send(body)
    return response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    fallback: StaticFallback | None = None,
    debug: bool = False,
    max_content_length: int | None = None,
) -> None:
    """Process a single ASGI HTTP request through ``dispatch``."""
    if scope["type"] != "http":
        return

    http = HTTPScope.from_scope(scope)

    try:
        body = await read_body(receive, max_content_length)
    except BodyTooLarge:
        logger.debug("413 %s %s", http.method, http.target)
        response = Response()
        response.status(413).header("Content-Type", PLAIN_TEXT).send(PAYLOAD_TOO_LARGE_BODY)
        await send_response(response, send, method=http.method)
        return

    # Handlers are plain sync callables; keep them off the event loop
    response = await anyio.to_thread.run_sync(
        partial(
            dispatch,
            http.method,
            http.target,
            router=router,
            query_string=http.query_string,
            headers=Headers(http.headers),
            body=body,
            fallback=fallback,
            debug=debug,
        )
    )
    await send_response(response, send, method=http.method)
