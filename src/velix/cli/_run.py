"""``velix run``: serve an app with pounce."""

import argparse
import logging
import sys

from velix.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it.

    CLI flags override the app's ``AppConfig``. Logging is configured
    from ``AppConfig.log_level`` (``debug`` when the app is in debug mode).
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    level = "debug" if app.config.debug else app.config.log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app._ensure_frozen()

    from velix.server.dev import run_server as serve

    serve(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        workers=args.workers if args.workers is not None else app.config.workers,
        reload=app.config.debug,
        app_path=args.app,
    )
