"""Serve a live App object with pounce.

``pounce.run()`` wants an import string, so the server is built directly
from ``pounce.Server`` with the App as the ASGI callable. pounce is an
optional dependency (``velix[server]``) and is imported on first use.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Block serving *app* on ``host:port``.

    With *reload* on, pounce restarts on file changes; passing *app_path*
    (``"module:attribute"``) lets it re-import the app each cycle instead
    of reusing the stale object.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    Server(
        ServerConfig(host=host, port=port, workers=workers, reload=reload),
        app,
        app_path=app_path,
    ).run()
