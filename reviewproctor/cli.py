"""Command line entry point for inspecting and driving Review Proctor state."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Sequence

from .config_loader import load_config
from .errors import ReviewProctorError
from .presentation import HeadlessDispatcher, UserResponse
from .rules import Decision
from .services import ReviewProctor
from .thresholds import Threshold

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Review Proctor helper CLI")
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity written to stderr (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Print the persisted state and effective thresholds")

    for name, help_text in (
        ("record-use", "Record one or more app uses"),
        ("record-event", "Record one or more significant events"),
    ):
        counter = sub.add_parser(name, help=help_text)
        counter.add_argument(
            "--count",
            type=int,
            default=1,
            help="How many to record (default: 1)",
        )

    threshold = sub.add_parser("set-threshold", help="Persist a threshold override")
    threshold.add_argument("name", choices=[item.value for item in Threshold])
    threshold.add_argument("value", type=int)

    sub.add_parser(
        "check",
        help="Evaluate the checks without presenting anything (exit 1 when denied)",
    )
    sub.add_parser(
        "request-review",
        help="Run a proctored review request (exit 1 when denied)",
    )
    sub.add_parser("direct-review", help="Request a review without any checks")

    respond = sub.add_parser("respond", help="Record the user's answer to a review prompt")
    respond.add_argument("response", choices=[item.value for item in UserResponse])

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT, stream=sys.stderr)

    try:
        config = load_config(args.config)
        dispatcher = HeadlessDispatcher(native_review=config.native_review)
        proctor = ReviewProctor.from_config(config, dispatcher)
        return _dispatch(args, proctor, dispatcher)
    except (OSError, ValueError, ReviewProctorError) as exc:
        print(f"reviewproctor: {exc}", file=sys.stderr)
        return 2


def _dispatch(args: argparse.Namespace, proctor: ReviewProctor, dispatcher: HeadlessDispatcher) -> int:
    if args.command == "status":
        _emit(proctor.snapshot())
        return 0
    if args.command == "record-use":
        _emit({"uses_count": proctor.record_use(args.count)})
        return 0
    if args.command == "record-event":
        _emit({"events_count": proctor.record_significant_event(args.count)})
        return 0
    if args.command == "set-threshold":
        proctor.set_threshold(args.name, args.value)
        _emit({"threshold": args.name, "value": proctor.get_threshold(args.name)})
        return 0
    if args.command == "check":
        return _emit_decision(proctor.check_review(), dispatcher)
    if args.command == "request-review":
        decisions = []
        proctor.request_proctored_review(decisions.append)
        return _emit_decision(decisions[0], dispatcher)
    if args.command == "direct-review":
        proctor.request_direct_review()
        _emit({"presented": [event.to_dict() for event in dispatcher.events]})
        return 0
    if args.command == "respond":
        proctor.respond(UserResponse(args.response))
        _emit(proctor.snapshot())
        return 0
    raise ValueError(f"unknown command: {args.command}")


def _emit_decision(decision: Decision, dispatcher: HeadlessDispatcher) -> int:
    output = decision.to_dict()
    output["presented"] = [event.to_dict() for event in dispatcher.events]
    _emit(output)
    return 0 if decision.allowed else 1


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
