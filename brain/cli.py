"""
Command line interface: dispatch actions, inspect audit events, run the API.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .api.service import DEFAULT_EVENT_LIMIT, BrainService
from .core.config import VERSION, validate_config
from .util.logging import logger


def read_action(args) -> object:
    """Load the raw action from the positional argument, --file, or stdin ("-")."""
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            text = f.read()
    elif args.action == "-" or args.action is None:
        text = sys.stdin.read()
    else:
        text = args.action

    return json.loads(text)


def dispatch_command(args) -> int:
    """Dispatch one action and print its JSON result."""
    try:
        action = read_action(args)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: could not read action: {e}", file=sys.stderr)
        return 1

    service = BrainService()
    try:
        result = asyncio.run(service.handle_brain_request(action))
    except Exception as e:
        logger.debug(f"dispatch failed: {e!r}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


def events_command(args) -> int:
    """Print recent audit events, newest first."""
    service = BrainService()
    events = asyncio.run(service.list_events(status=args.status, limit=args.limit))
    print(json.dumps(events, indent=2, default=str))
    return 0


def serve_command(args) -> int:
    """Run the HTTP API under uvicorn."""
    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}", file=sys.stderr)
        return 1

    import uvicorn
    uvicorn.run("brain.api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Brain action dispatcher",
        prog="brain"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    dispatch_parser = subparsers.add_parser("dispatch", help="Dispatch one action")
    dispatch_parser.add_argument("action", nargs="?", help="Action JSON, or '-' to read stdin")
    dispatch_parser.add_argument("--file", help="Read the action JSON from a file")
    dispatch_parser.set_defaults(func=dispatch_command)

    events_parser = subparsers.add_parser("events", help="List audit events")
    events_parser.add_argument("--limit", type=int, default=DEFAULT_EVENT_LIMIT,
                               help=f"Maximum events to show (default: {DEFAULT_EVENT_LIMIT})")
    events_parser.add_argument("--status", choices=["success", "failure"], help="Only events with this status")
    events_parser.set_defaults(func=events_command)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=serve_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
