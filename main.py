#!/usr/bin/env python3
"""ModSec Review - Entry point"""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from modsec_review import VERSION, ModSecReviewError, ModSecReviewer, ReviewOptions, print_report
from modsec_review.analyzer import load_error_log, load_normal_log, rule_errors_of, summarize

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modsec-review",
        description="ModSec Review - Correlate ModSecurity rule errors with client activity",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--version", action="version", version=f"ModSecReview v{VERSION}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-o", "--output", help="Save the report to this file")
    common.add_argument("--no-lookup", action="store_true", help="Skip reverse DNS lookups")
    common.add_argument("--lookup-timeout", type=float, default=None,
                        help="Seconds to wait for each reverse lookup; the report is written once it passes, "
                             "though the process may still wait for stuck resolver threads on exit")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    fp = commands.add_parser("fp", parents=[common], help="Review an error log for false positives")
    fp.add_argument("error_log", help="ModSecurity error log")

    inspect = commands.add_parser("inspect", parents=[common],
                                  help="Review the activity of every IP that broke a rule")
    inspect.add_argument("error_log", help="ModSecurity error log")
    inspect.add_argument("normal_log", help="Access log of the same host")

    bugs = commands.add_parser("bugs", parents=[common], help="Review an error log for proxy/SSL issues")
    bugs.add_argument("error_log", help="ModSecurity error log")

    everything = commands.add_parser("all", parents=[common], help="Run every review")
    everything.add_argument("error_log", help="ModSecurity error log")
    everything.add_argument("normal_log", help="Access log of the same host")

    return parser


def load_logs(args):
    normal_logs = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("Parsing logs...", total=None)
        errors = load_error_log(args.error_log)
        if getattr(args, "normal_log", None):
            normal_logs = load_normal_log(args.normal_log)
    return errors, normal_logs


async def run(args) -> str:
    reviewer = ModSecReviewer(ReviewOptions(lookup=not args.no_lookup, lookup_timeout=args.lookup_timeout))
    try:
        errors, normal_logs = load_logs(args)

        if args.command != "bugs" and not args.no_lookup:
            console.print("[yellow]This may take a while due to reverse DNS lookups[/]")

        if args.command == "fp":
            report = await reviewer.review_false_positives(rule_errors_of(errors))
        elif args.command == "inspect":
            report = await reviewer.inspect(normal_logs, rule_errors_of(errors))
        elif args.command == "bugs":
            report = reviewer.review_issues(errors)
        else:
            report = await reviewer.review_all(errors, normal_logs)
    finally:
        # timed-out lookups may still hold resolver threads
        reviewer.cache.close()

    print_report(report, summarize(errors, normal_logs), console)
    return report


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )

    try:
        report = asyncio.run(run(args))
    except (FileNotFoundError, ModSecReviewError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(report)
        console.print(f"\n[green]Report saved to:[/] {args.output}")


if __name__ == "__main__":
    main()
