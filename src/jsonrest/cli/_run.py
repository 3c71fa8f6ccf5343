"""``jsonrest run``: serve a router with pounce."""

import argparse
import sys

from jsonrest.cli._resolve import resolve_router


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.router`` and serve it until interrupted."""
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    from jsonrest.server.serve import run_server as serve

    try:
        serve(router, args.host, args.port, reload=args.reload, app_path=args.router)
    except ModuleNotFoundError as exc:
        print("Error: serving requires pounce (pip install 'jsonrest[server]')", file=sys.stderr)
        raise SystemExit(1) from exc
