"""Velix: a minimal HTTP router and dispatcher.

Maps method + path to a handler, binds handler arguments by name or
declared role, and turns return values into JSON responses.

Basic usage::

    from velix import App, Response

    app = App()

    @app.get("/api/users/{name}")
    def hello(response: Response, name: str):
        response.json({"message": f"Hello {name}"})

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "MalformedRequestBody",
    "MalformedRoute",
    "Request",
    "Response",
    "ResponseAlreadySent",
    "VelixError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import velix`` fast while providing a clean top-level API.
    """
    if name == "App":
        from velix.app import App

        return App

    if name == "AppConfig":
        from velix.config import AppConfig

        return AppConfig

    if name == "Request":
        from velix.http.request import Request

        return Request

    if name == "Response":
        from velix.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "MalformedRequestBody",
        "MalformedRoute",
        "ResponseAlreadySent",
        "VelixError",
    ):
        from velix import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
