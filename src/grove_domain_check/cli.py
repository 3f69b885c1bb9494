"""
Command-line interface for grove-domain-check

Terminal-based bulk availability checks using the same DoH + RDAP
pipeline the tool server runs.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .checker import AvailabilityResult
from .config import config
from .lifecycle import ensure_domain_check_server, shutdown_domain_check_server


def collect_domains(items: List[str]) -> List[str]:
    """Expand arguments into domains; files contribute one domain per line."""
    domains = []
    for item in items:
        file_path = Path(item)
        if file_path.is_file():
            with open(file_path, "r") as f:
                domains.extend(
                    line.strip() for line in f
                    if line.strip() and not line.lstrip().startswith("#")
                )
        else:
            domains.append(item)
    return domains


def format_result(result: AvailabilityResult) -> str:
    """Format a single result for terminal output."""
    if result.can_buy:
        return f"\033[92m{result.domain}: ✓ AVAILABLE\033[0m"

    if result.timeout:
        return f"\033[93m{result.domain}: ? TIMEOUT\033[0m"

    if result.error:
        return f"\033[93m{result.domain}: ? UNKNOWN\033[0m\n    Error: {result.error}"

    suffix = " (DNS)" if result.fast_reject == "dns" else ""
    return f"\033[91m{result.domain}: ✗ TAKEN{suffix}\033[0m"


def print_results_summary(results: List[AvailabilityResult]):
    """Print a grouped summary of results."""
    available = [r for r in results if r.can_buy]
    taken = [r for r in results if not r.can_buy and not r.has_problem]
    unknown = [r for r in results if r.has_problem]

    print("\n" + "=" * 60)
    print("DOMAIN CHECK RESULTS")
    print("=" * 60)

    for title, group in (("AVAILABLE", available), ("TAKEN", taken), ("UNKNOWN", unknown)):
        if group:
            print(f"\n{title} ({len(group)}):")
            for result in group:
                print(f"  {format_result(result)}")

    print()


async def run_checks(domains: List[str], concurrency: Optional[int]) -> List[AvailabilityResult]:
    server = await ensure_domain_check_server()
    try:
        return await server.verifier.verify_domains(domains, concurrency=concurrency)
    finally:
        await shutdown_domain_check_server()


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="grove-domain-check",
        description="Domain availability checker (DNS pre-filter + RDAP)",
        epilog="Example: grove-domain-check check example.com test.io mysite.dev",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Check domain availability")
    check_parser.add_argument(
        "domains",
        nargs="+",
        help="Domain names to check, or path to file with one domain per line",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    check_parser.add_argument(
        "--concurrency", "-c",
        type=int,
        default=config.rate_limit.max_concurrent_checks,
        help=f"Parallel checks (default: {config.rate_limit.max_concurrent_checks})",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "check":
        domains = collect_domains(args.domains)
        if not domains:
            print("No domains to check", file=sys.stderr)
            sys.exit(1)

        if args.concurrency < 1:
            parser.error("--concurrency must be at least 1")

        results = asyncio.run(run_checks(domains, args.concurrency))

        if args.json:
            print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        else:
            print_results_summary(results)


if __name__ == "__main__":
    main()
