"""
Command-line interface for the link validator.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from linkcheck.config import DEFAULT_LOGFILE, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, DEFAULT_WAIT, ValidationConfig
from linkcheck.core import Validator
from linkcheck.log import setup_logging
from linkcheck.report import Report, Status


def print_summary(report: Report) -> None:
    """Print validation summary to stderr."""
    errors: Dict[str, Status] = report.errors

    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("LINK CHECK SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Links checked:          {len(report.responses)}\n")
    sys.stderr.write(f"Broken links:           {len(errors)}\n\n")

    for url, status in sorted(errors.items()):
        sys.stderr.write(f"  {status}  {url}\n")
    if errors:
        sys.stderr.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkcheck",
        description="Crawl every link reachable on a site and report broken ones.",
    )
    parser.add_argument("url", help="Start URL (e.g. https://example.com)")
    parser.add_argument("--username", help="HTTP basic auth username")
    parser.add_argument("--password", help="HTTP basic auth password")
    parser.add_argument(
        "--wait", type=float, default=DEFAULT_WAIT,
        help=f"Seconds to wait between requests (default: {DEFAULT_WAIT:g})",
    )
    parser.add_argument("--css", action="store_true", help="Also check stylesheet links")
    parser.add_argument("--ignore-fragments", action="store_true", help="Strip #fragments from links")
    parser.add_argument("--local", action="store_true", help="Only check links below the start URL")
    parser.add_argument("--include", action="append", metavar="RE", help="Only check links matching RE")
    parser.add_argument("--iinclude", action="append", metavar="RE", help="Like --include, case-insensitive")
    parser.add_argument("--skip", action="append", metavar="RE", help="Skip links matching RE")
    parser.add_argument("--iskip", action="append", metavar="RE", help="Like --skip, case-insensitive")
    parser.add_argument(
        "--logfile",
        help=f"Write results to this file (implies --log, default: {DEFAULT_LOGFILE})",
    )
    parser.add_argument("--log", action="store_true", help="Write results to the logfile")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--out", help="Write {url: status} JSON to this path, or '-' for stdout")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug output and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the linkcheck CLI."""
    args = build_parser().parse_args(argv)

    options = {
        "username": args.username,
        "password": args.password,
        "wait": args.wait,
        "css": args.css,
        "ignore_fragments": args.ignore_fragments,
        "local": args.local,
        "include": args.include,
        "iinclude": args.iinclude,
        "skip": args.skip,
        "iskip": args.iskip,
        "logfile": args.logfile,
        "log": args.log,
        "timeout": args.timeout,
        "user_agent": args.user_agent,
    }
    try:
        config = ValidationConfig.from_options(args.url, options)
    except ValueError as e:
        sys.stderr.write(f"error: {e}\n")
        return 2

    # stdout carries the JSON payload with --out -
    output = setup_logging(stream=sys.stderr if args.out == "-" else None, debug=args.verbose)
    validator = Validator(config, output=output)
    try:
        report = validator.validate()
    finally:
        validator.client.close()

    if args.verbose:
        print_summary(report)

    if args.out:
        json_text = json.dumps(report.as_dict(), ensure_ascii=False, indent=2 if args.pretty else None)
        if args.out == "-":
            print(json_text)
        else:
            output_path = Path(args.out)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(json_text, encoding="utf-8")
            if args.verbose:
                sys.stderr.write(f"Results written to: {output_path}\n")

    return 1 if report.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
