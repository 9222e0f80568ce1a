from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path

import yaml

from qna.config.bundle import load_bundle, load_initial_parameters
from qna.config.models import PrintOptions
from qna.engine.questioner import Questioner
from qna.engine.store import Result
from qna.errors import InputClosedError, InvalidConfigurationError, QnAError
from qna.interactions.validator import count_by_kind, parse_interactions
from qna.logging_config import configure_logging

EXIT_FATAL = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _to_primitive(x: object) -> object:
    """Converts objects into YAML/JSON-safe primitives.

    The conversion rules are:
    - Result -> its to_dict() view
    - dataclasses -> dict of field values (recursively converted)
    - Enum -> its .value
    - Path -> str(path)
    - Mapping -> dict with string keys and recursively converted values
    - Sequence (list/tuple) -> list of recursively converted items
    - everything else -> returned as-is
    """
    if isinstance(x, Result):
        return _to_primitive(x.to_dict())

    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: _to_primitive(getattr(x, f.name)) for f in fields(x)}

    if isinstance(x, Enum):
        return x.value

    if isinstance(x, Path):
        return str(x)

    if isinstance(x, Mapping):
        return {str(k): _to_primitive(v) for k, v in x.items()}

    if isinstance(x, (list, tuple)):
        return [_to_primitive(v) for v in x]

    return x


def _print_yaml(title: str, payload: object) -> None:
    """Prints a human-readable YAML view of structured data."""
    print(f"\n=== {title} ===\n")
    safe_payload = _to_primitive(payload)
    print(yaml.safe_dump(safe_payload, sort_keys=False, allow_unicode=True))


def _print_payload(title: str, payload: object, *, fmt: str) -> None:
    if fmt == "json":
        print(json.dumps(_to_primitive(payload), indent=2, ensure_ascii=False, default=str))
    else:
        _print_yaml(title, payload)


def _fail(message: str, code: int) -> None:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(code)


def cmd_run(args: argparse.Namespace) -> None:
    """Runs a bundle interactively on stdin/stdout and prints the collected values."""
    try:
        print_options = PrintOptions.from_dict({"width": args.width, "color": False if args.no_color else None})
    except ValueError as e:
        _fail(str(e), EXIT_CONFIG)

    try:
        bundle = load_bundle(args.bundle)
        initial = load_initial_parameters(args.parameters) if args.parameters else {}
        questioner = Questioner(
            interactions=bundle,
            initial_parameters=initial,
            no_skip_defined=args.no_skip_defined,
            print_options=print_options,
        )
        questioner.question()
    except InvalidConfigurationError as e:
        _fail(str(e), EXIT_CONFIG)
    except InputClosedError as e:
        _fail(str(e), EXIT_INTERRUPTED)
    except QnAError as e:
        _fail(str(e), EXIT_FATAL)
    except KeyboardInterrupt:
        print("\nInterrupted. No values were collected.", file=sys.stderr)
        raise SystemExit(EXIT_INTERRUPTED)

    if args.format == "json" and args.show_results:
        _print_payload("RESULTS", {"values": questioner.values, "results": questioner.results}, fmt="json")
        return

    _print_payload("VALUES", questioner.values, fmt=args.format)
    if args.show_results:
        _print_payload("RESULTS", questioner.results, fmt=args.format)


def cmd_validate(args: argparse.Namespace) -> None:
    """Checks a bundle without asking anything and prints a summary of its actions."""
    try:
        actions = parse_interactions(load_bundle(args.bundle))
    except InvalidConfigurationError as e:
        _fail(str(e), EXIT_CONFIG)

    summary = {"bundle": Path(args.bundle), "actions": len(actions), "by_kind": count_by_kind(actions)}
    _print_payload("BUNDLE", summary, fmt=args.format)


def build_parser() -> argparse.ArgumentParser:
    """Builds the CLI parser."""
    p = argparse.ArgumentParser(prog="qna", description="Run scripted question-and-answer bundles")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_format_flag(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--format", choices=("yaml", "json"), default="yaml", help="Output format")
        sp.add_argument(
            "--log-level",
            type=str.upper,
            choices=LOG_LEVELS,
            default="WARNING",
            help="Log level for the qna loggers (logs go to stderr)",
        )
        sp.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")

    sp_run = sub.add_parser("run", help="Ask the questions in a bundle and print the values")
    sp_run.add_argument("bundle", help="Interaction bundle (JSON or YAML)")
    sp_run.add_argument("parameters", nargs="?", default=None, help="Initial parameters (JSON, YAML or .env)")
    sp_run.add_argument("--no-skip-defined", action="store_true", help="Ask even when a parameter is already defined")
    sp_run.add_argument("--width", type=int, default=None, help="Wrap prompts and statements at this column")
    sp_run.add_argument("--no-color", action="store_true", help="Disable colored output")
    sp_run.add_argument("--show-results", action="store_true", help="Also print the full result records")
    add_format_flag(sp_run)
    sp_run.set_defaults(func=cmd_run)

    sp_validate = sub.add_parser("validate", help="Validate a bundle without running it")
    sp_validate.add_argument("bundle", help="Interaction bundle (JSON or YAML)")
    add_format_flag(sp_validate)
    sp_validate.set_defaults(func=cmd_validate)

    return p


def main(argv: list[str] | None = None) -> None:
    """Runs the CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level, json=args.log_json)
    args.func(args)


if __name__ == "__main__":
    main()
