"""Command-line interface for insight context assembly."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from insight_context.output import build_output
from insight_context.schemas.validate import ContractViolation
from insight_context.snapshot import load_snapshot
from insight_context.version import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(prog="insight-context")
    parser.add_argument("--input", required=False, help="Path to AnalysisResult snapshot (JSON or YAML)")
    parser.add_argument(
        "--out",
        default=None,
        help="Optional path to write output JSON; defaults to stdout",
    )
    parser.add_argument(
        "--no-hal",
        action="store_true",
        help="Skip the HAL cross-reference of ANR binder targets",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log per-insight assembly and budget trimming to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print insight-context version and exit",
    )

    validation_group = parser.add_mutually_exclusive_group()
    validation_group.add_argument(
        "--validate",
        dest="validate",
        action="store_true",
        default=True,
        help="Validate the input snapshot against its JSON schema (default: enabled)",
    )
    validation_group.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        help="Disable snapshot schema validation",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the insight-context CLI."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.input:
        print("--input is required unless --version is provided", file=sys.stderr)
        return 2

    try:
        result = load_snapshot(args.input, validate=args.validate)
    except ContractViolation as exc:
        print(f"Snapshot validation failed: {exc}", file=sys.stderr)
        return 2

    output = build_output(result, include_hal=not args.no_hal)
    logger.debug(
        "Assembled %d contexts (%d chars)",
        output["context_meta"]["contexts_included"],
        output["context_meta"]["final_chars"],
    )

    rendered = json.dumps(output, indent=2, ensure_ascii=False)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
