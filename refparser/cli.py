"""Command-line interface for parsing references and training models."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict

from refparser.config import SUPPORTED_FORMATS
from refparser.core.models import Dataset
from refparser.exceptions import RefParserError
from refparser.parser import Parser

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse free-text bibliographic references")
    parser.add_argument("--model", default=None, help="Path to the labeling model")
    parser.add_argument("--pattern", default=None, help="Feature template file")
    parser.add_argument("--dictionary", default=None, help="Directory of the LMDB term dictionary")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Parse references from a file or stdin")
    parse.add_argument("input", help="Input file with one reference per line, or '-' for stdin")
    parse.add_argument("-f", "--format", choices=SUPPORTED_FORMATS, default=None, help="Output format")

    train = subparsers.add_parser("train", help="Train a new model from tagged data")
    train.add_argument("input", nargs="?", default=None, help="Tagged training data (XML or two-column text)")

    learn = subparsers.add_parser("learn", help="Add tagged data to the current model")
    learn.add_argument("input", help="Tagged training data (XML or two-column text)")

    check = subparsers.add_parser("check", help="Evaluate the model against tagged data")
    check.add_argument("input", help="Tagged data to compare against")

    return parser


def _make_parser(args: argparse.Namespace) -> Parser:
    options: Dict[str, Any] = {
        name: getattr(args, name)
        for name in ("model", "pattern", "dictionary")
        if getattr(args, name) is not None
    }
    return Parser(**options)


def _read_input(value: str) -> str:
    return sys.stdin.read() if value == "-" else value


def _render(result: Any) -> str:
    if isinstance(result, Dataset):
        return result.to_text()
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False, indent=2)


def _run_parse(parser: Parser, args: argparse.Namespace) -> None:
    print(_render(parser.parse(_read_input(args.input), format=args.format)))


def _run_train(parser: Parser, args: argparse.Namespace) -> None:
    handle = parser.train(args.input)
    print(f"Trained {handle.path} on {handle.sequences} sequences")


def _run_learn(parser: Parser, args: argparse.Namespace) -> None:
    handle = parser.learn(args.input)
    print(f"Updated {handle.path}; now trained on {handle.sequences} sequences")


def _run_check(parser: Parser, args: argparse.Namespace) -> None:
    result = parser.check(args.input)
    print(
        f"{result.sequence_errors}/{result.sequences} sequences ({result.sequence_error_rate:.2%}), "
        f"{result.token_errors}/{result.tokens} tokens ({result.token_error_rate:.2%}) mislabeled"
    )


def main(argv: list[str] | None = None) -> int:
    arg_parser = _build_arg_parser()
    args = arg_parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "parse": _run_parse,
        "train": _run_train,
        "learn": _run_learn,
        "check": _run_check,
    }
    handler = commands.get(args.command)
    if handler is None:
        arg_parser.error("Unknown command")
        return 1

    try:
        parser = _make_parser(args)
        try:
            handler(parser, args)
        finally:
            parser.close()
    except RefParserError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
