"""``velix routes``: print the route table in match order."""

import argparse
import sys

from velix.cli._resolve import resolve_app

_COLUMNS = ("METHOD", "PATH", "HANDLER")


def run_routes(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not app.routes:
        print("No routes registered.")
        return

    rows = [
        (route.method, route.path, getattr(route.handler, "__qualname__", repr(route.handler)))
        for route in app.routes
    ]
    widths = [max(len(row[i]) for row in (_COLUMNS, *rows)) for i in range(2)]

    def line(method: str, path: str, handler: str) -> str:
        return f"{method.ljust(widths[0])}  {path.ljust(widths[1])}  {handler}"

    print(line(*_COLUMNS))
    print("-" * min(max(len(line(*row)) for row in rows), 80))
    for row in rows:
        print(line(*row))
