"""
CLI main entry point for the internal link auditor.

Thin wrapper around the core engine - no business logic here.
"""

import argparse
import logging
import sys
from pathlib import Path

from linkaudit import AuditRunner
from linkaudit.config import settings
from linkaudit.storage import FileStorage, StorageError

from .output import print_results_summary


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Find broken and excessive internal links on web pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s https://example.com
  %(prog)s -i urls.txt -o ./results
  %(prog)s https://example.com --format json
  %(prog)s -i urls.txt --concurrency 20 --probe-timeout 3
        """,
    )

    parser.add_argument(
        "urls",
        nargs="*",
        help="URLs to audit",
    )

    parser.add_argument(
        "-i",
        "--input-file",
        type=str,
        default=None,
        help="Text file containing one URL per line",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=".",
        help="Directory to save output files (default: current directory)",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str,
        choices=["csv", "json"],
        default="csv",
        help="Output format (default: csv)",
    )

    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=settings.max_concurrency,
        help=f"Maximum number of links probed concurrently (default: {settings.max_concurrency})",
    )

    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=settings.fetch_timeout_ms / 1000,
        help="Timeout in seconds for fetching each audited page",
    )

    parser.add_argument(
        "--probe-timeout",
        type=float,
        default=settings.probe_timeout_ms / 1000,
        help="Timeout in seconds for each link probe",
    )

    parser.add_argument(
        "--audit-timeout",
        type=float,
        default=settings.audit_timeout_ms / 1000,
        help="Deadline in seconds for a whole page audit",
    )

    parser.add_argument(
        "--dedup",
        type=str,
        choices=["exact", "path"],
        default=settings.dedup_policy,
        help="Treat links differing only by query string as distinct (exact) or equal (path)",
    )

    parser.add_argument(
        "--render-js",
        action=argparse.BooleanOptionalAction,
        default=settings.render_js,
        help="Render pages in a headless browser before extracting links",
    )

    parser.add_argument(
        "--user-agent",
        type=str,
        default=settings.user_agent,
        help="Custom User-Agent header (optional)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every skipped link and failed probe",
    )

    return parser.parse_args(argv)


def read_urls_from_file(input_file: str) -> list[str]:
    """
    Read URLs from input file.

    Args:
        input_file: Path to input file

    Returns:
        List of URLs

    Raises:
        SystemExit: If file cannot be read
    """
    file_path = Path(input_file)

    if not file_path.exists():
        print(f"Error: File not found: {input_file}", file=sys.stderr)
        sys.exit(1)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            urls = [line.strip() for line in f if line.strip() and not line.startswith("#")]
    except OSError as e:
        print(f"Error reading file {input_file}: {e}", file=sys.stderr)
        sys.exit(1)

    if not urls:
        print(f"Error: No URLs found in {input_file}", file=sys.stderr)
        sys.exit(1)

    return urls


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Orchestrates the entire CLI workflow:
    1. Parse arguments
    2. Collect URLs
    3. Run the audits
    4. Display results
    5. Save results to file
    """
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    urls = list(args.urls)
    if args.input_file:
        print(f"Reading URLs from: {args.input_file}")
        urls.extend(read_urls_from_file(args.input_file))

    if not urls:
        print("Error: No URLs given. Pass URLs or --input-file.", file=sys.stderr)
        sys.exit(2)

    print(f"Found {len(urls)} URLs to audit\n")

    runner = AuditRunner(
        max_concurrency=args.concurrency,
        fetch_timeout=int(args.timeout * 1000),  # Convert to milliseconds
        probe_timeout=int(args.probe_timeout * 1000),
        audit_timeout=int(args.audit_timeout * 1000),
        user_agent=args.user_agent,
        dedup_policy=args.dedup,
        render_js=args.render_js,
    )

    print("Checking internal links...")
    result = runner.run_batch(urls)

    print_results_summary(result)

    print(f"\nSaving results to {args.format.upper()} file...")
    storage = FileStorage(output_directory=args.output_dir)

    try:
        output_path = storage.save(result, format=args.format)
        print(f"✓ Results saved to: {output_path}")
    except StorageError as e:
        print(f"✗ Failed to save results: {e}", file=sys.stderr)
        sys.exit(1)

    # Exit with error code if any audit failed
    if result.urls_failed > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
