"""Command line access to the transcript parser.

Usage:
  edit-blocks parse transcript.md --pretty
  cat transcript.md | edit-blocks parse - --final
  edit-blocks normalize transcript.md
  edit-blocks continue transcript.md
"""

import argparse
import json
import sys
from typing import List, Optional

from .continuation import build_continuation_prompt
from .fences import normalize
from .render import segments_to_payload
from .transcript import parse
from .utils import dbg_dump


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def _cmd_parse(args: argparse.Namespace, text: str) -> str:
    payload = segments_to_payload(parse(text), is_final=args.final)
    return json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None)


def _cmd_normalize(args: argparse.Namespace, text: str) -> str:
    return normalize(text)


def _cmd_continue(args: argparse.Namespace, text: str) -> str:
    return build_continuation_prompt(text)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="edit-blocks",
        description="Split model output into prose and file edit directives.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="print segments as JSON")
    p_parse.add_argument("input", nargs="?", default="-", help="transcript file, or - for stdin")
    p_parse.add_argument("--final", action="store_true", help="the turn is complete")
    p_parse.add_argument("--pretty", action="store_true", help="indent the JSON output")
    p_parse.set_defaults(func=_cmd_parse)

    p_norm = sub.add_parser("normalize", help="print the fence-normalized transcript")
    p_norm.add_argument("input", nargs="?", default="-")
    p_norm.set_defaults(func=_cmd_normalize)

    p_cont = sub.add_parser("continue", help="print a continuation prompt for a cut-off turn")
    p_cont.add_argument("input", nargs="?", default="-")
    p_cont.set_defaults(func=_cmd_continue)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        text = _read_input(args.input)
    except OSError as e:
        print(f"edit-blocks: cannot read {args.input}: {e}", file=sys.stderr)
        return 2
    dbg_dump(f"cli_{args.command}_input", text)
    sys.stdout.write(args.func(args, text))
    sys.stdout.write("\n")
    return 0
