"""Velix exception hierarchy.

Raised by the router, the App, the dispatcher and the request/response
model.

An unmatched route is not an exception: ``Router.match`` returns ``None``
and the dispatcher answers with the fallback page or a 404.
"""


class VelixError(Exception):
    """Base for all velix-specific errors."""


class ConfigurationError(VelixError):
    """Raised when app setup is invalid.

    Surfaces at registration time, before any request is served.
    """


class MalformedRoute(ConfigurationError):
    """A route template has an invalid or duplicated placeholder."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Malformed route {template!r}: {reason}")


class MalformedRequestBody(VelixError):
    """The request payload could not be parsed.

    Raised inside body parsing and absorbed by ``Request.build``; handlers
    see an empty mapping instead.
    """


class ResponseAlreadySent(VelixError):  # noqa: N818
    """A response was mutated or sent again after it was finalized."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot call {operation}() after the response has been sent.")
