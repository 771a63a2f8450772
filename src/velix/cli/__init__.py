"""Command line interface.

Installed as the ``velix`` console script::

    velix run myapp:app --port 3000
    velix routes myapp:app
"""

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    target = argparse.ArgumentParser(add_help=False)
    target.add_argument("app", help="Import string of the App (e.g. myapp:app)")

    parser = argparse.ArgumentParser(
        prog="velix",
        description="Serve a velix app or inspect its route table.",
    )
    commands = parser.add_subparsers(dest="command")

    run = commands.add_parser("run", parents=[target], help="Serve the app with pounce")
    run.add_argument("--host", default=None, help="Bind address (default: AppConfig.host)")
    run.add_argument("--port", type=int, default=None, help="Port (default: AppConfig.port)")
    run.add_argument("--workers", type=int, default=None, help="Worker count")

    commands.add_parser("routes", parents=[target], help="List routes in match order")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``velix`` command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        from velix.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from velix.cli._routes import run_routes

        run_routes(args)
    else:
        parser.print_help()
        sys.exit(0)
