"""
grantcraft — score a proposal draft from the command line.

Usage:
    grantcraft review draft.md                    # Markdown report to stdout
    grantcraft review draft.md --json             # Full report as JSON
    grantcraft review draft.md -o report.md       # Write report to a file
    grantcraft signals --scheme horizon_europe_ria_ia

Exit codes (review): 0 passed, 1 below threshold, 2 input error.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from grantcraft import __version__
from grantcraft.aggregator import review_draft
from grantcraft.config import settings
from grantcraft.errors import DraftTooShortError, UnknownSchemeError
from grantcraft.logging import setup_logging
from grantcraft.registry import RUBRICS, get_rubric

EXIT_PASSED = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grantcraft",
        description="Deterministic rubric reviewer for grant proposal drafts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        default="text",
        help="Log format on stderr (default: text)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    review = sub.add_parser("review", help="Score a markdown draft")
    review.add_argument("path", help="Markdown draft to score ('-' for stdin)")
    review.add_argument(
        "--scheme",
        default=settings.DEFAULT_SCHEME,
        choices=sorted(RUBRICS),
        help=f"Rubric to score against (default: {settings.DEFAULT_SCHEME})",
    )
    review.add_argument("--json", action="store_true", help="Output the full report as JSON")
    review.add_argument("-o", "--output", help="Write the output to this file instead of stdout")

    signals = sub.add_parser("signals", help="List the signals of a rubric")
    signals.add_argument(
        "--scheme",
        default=settings.DEFAULT_SCHEME,
        choices=sorted(RUBRICS),
    )
    return parser


def read_draft(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def check_length(draft: str, minimum: int = settings.MIN_DRAFT_CHARS) -> None:
    length = len(draft.strip())
    if length < minimum:
        raise DraftTooShortError(length, minimum)


def _emit(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Report written to: {output}", file=sys.stderr)
    else:
        sys.stdout.write(text)


def cmd_review(args: argparse.Namespace) -> int:
    try:
        draft = read_draft(args.path)
        check_length(draft)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {args.path}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except DraftTooShortError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    report = review_draft(draft, args.scheme)

    if args.json:
        text = json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        text = report.markdown_report
    try:
        _emit(text, args.output)
    except OSError as e:
        print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    return EXIT_PASSED if report.overall_passed else EXIT_BELOW_THRESHOLD


def cmd_signals(args: argparse.Namespace) -> int:
    rubric = get_rubric(args.scheme)
    print(f"{rubric.name} (v{rubric.version})")
    for criterion in rubric.registry.criteria:
        print(f"\n{criterion.title} [{criterion.id}]")
        for s in rubric.registry.signals_for_criterion(criterion.id):
            req = "required" if s.required_for_threshold else "optional"
            print(f"  {s.weight:.2f}  {s.id:<26} {req:<9} {s.section_hint:<12} {s.label}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(fmt=args.log_format, level="WARNING")

    try:
        if args.command == "review":
            return cmd_review(args)
        return cmd_signals(args)
    except UnknownSchemeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
