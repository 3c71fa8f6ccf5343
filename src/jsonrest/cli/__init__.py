"""jsonrest CLI: list routes and serve a router.

Entry point registered as ``jsonrest`` in ``pyproject.toml``::

    [project.scripts]
    jsonrest = "jsonrest.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``jsonrest`` command."""
    parser = argparse.ArgumentParser(
        prog="jsonrest",
        description="jsonrest: JSON request dispatch for ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- jsonrest routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("router", help="Import string (e.g. myapi:router)")

    # -- jsonrest run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a router with pounce")
    run_parser.add_argument("router", help="Import string (e.g. myapi:router)")
    run_parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    run_parser.add_argument("--port", type=int, default=8000, help="Bind port number")
    run_parser.add_argument("--reload", action="store_true", help="Restart on code changes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from jsonrest.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from jsonrest.cli._run import run_server

        run_server(args)
