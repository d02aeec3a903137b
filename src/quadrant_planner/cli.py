from __future__ import annotations

import argparse
import json
import logging
from typing import Optional, Sequence

from .domain import CommandStatus
from .logging import configure_logging
from .orchestrator import describe_schedule
from .services import AppContext
from .services.http import run_local_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quadrant Planner command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask_parser = subparsers.add_parser("ask", help="Run a natural-language command against the schedule.")
    ask_parser.add_argument("text", nargs="+", help="The command, e.g. 'delete the weekly sync'.")
    ask_parser.add_argument("--json", action="store_true", help="Print the raw outcome as JSON.")

    subparsers.add_parser("events", help="List stored events as JSON.")
    subparsers.add_parser("describe", help="Print the schedule summary sent to the model.")

    api_parser = subparsers.add_parser("api", help="Start the local HTTP API.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    logging.getLogger(__name__).info("Quadrant Planner CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        run_local_server(host=args.host, port=args.port)
        return 0

    context = AppContext()
    if args.command == "ask":
        outcome = context.pipeline.process_command(" ".join(args.text))
        if args.json:
            print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(outcome.message)
            if outcome.status is CommandStatus.NEED_MORE_INFO:
                print("Re-run the command with the missing information added.")
        return 1 if outcome.status is CommandStatus.ERROR else 0
    if args.command == "events":
        records = [event.to_record() for event in context.store.list_all()]
        print(json.dumps(records, ensure_ascii=False, indent=2))
        return 0
    if args.command == "describe":
        print(describe_schedule(context.store.list_all()))
        return 0

    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
