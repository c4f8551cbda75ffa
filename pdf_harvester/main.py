#!/usr/bin/env python3
"""
PDF Harvester - download every PDF linked from JavaScript-gated pages.

This tool renders each seed page in a headless browser so that anti-bot
challenges and client-side scripts resolve, collects the PDF links in the
final markup, and downloads each document into a flat output folder.

Usage:
    python -m pdf_harvester.main --url https://example.com/manuals --output ./PDFs

Features:
    - Renders pages with Playwright and waits for challenge scripts
    - Finds every link whose target mentions ".pdf", in page order
    - Rejects HTML error pages and empty bodies served as documents
    - Never downloads or overwrites a file that is already on disk
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional, Sequence

from pdf_harvester.harvester import HarvestPipeline, HarvestResult
from pdf_harvester.utils.log import (
    configure_logging,
    print_status,
    print_success,
    print_error,
    print_info
)
from pdf_harvester.utils.paths import dedupe_urls
from pdf_harvester.utils.constants import (
    DEFAULT_DOCUMENT_MARKER,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SEED_URLS,
    DEFAULT_SESSION_TIMEOUT,
    DEFAULT_SETTLE_SECONDS,
)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list, defaults to sys.argv

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='pdf-harvester',
        description='Download the PDF documents linked from JavaScript-rendered pages',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --url https://example.com/manuals --output ./PDFs
    %(prog)s --seeds-file seeds.txt --settle 5 --verbose
    %(prog)s -u https://example.com/a -u https://example.com/b --no-headless
        """
    )

    parser.add_argument(
        '--url', '-u',
        action='append',
        dest='urls',
        metavar='URL',
        help='Page to harvest; repeat for several pages (default: built-in seed list)'
    )

    parser.add_argument(
        '--seeds-file',
        type=str,
        help='File with one page URL per line; blank lines and # comments are ignored'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f'Output directory for documents (default: {DEFAULT_OUTPUT_DIR})'
    )

    parser.add_argument(
        '--marker',
        type=str,
        default=DEFAULT_DOCUMENT_MARKER,
        help=f'Substring identifying document links (default: {DEFAULT_DOCUMENT_MARKER})'
    )

    parser.add_argument(
        '--settle',
        type=float,
        default=DEFAULT_SETTLE_SECONDS,
        help=f'Seconds to wait for page scripts after navigation (default: {DEFAULT_SETTLE_SECONDS})'
    )

    parser.add_argument(
        '--session-timeout',
        type=float,
        default=DEFAULT_SESSION_TIMEOUT,
        help=f'Maximum seconds for one browser session (default: {DEFAULT_SESSION_TIMEOUT})'
    )

    parser.add_argument(
        '--download-timeout',
        type=float,
        default=DEFAULT_DOWNLOAD_TIMEOUT,
        help=f'Maximum seconds for one document download (default: {DEFAULT_DOWNLOAD_TIMEOUT})'
    )

    parser.add_argument(
        '--no-headless',
        action='store_true',
        help='Run browser in visible mode (useful for debugging)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write log messages to this file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except errors'
    )

    return parser.parse_args(argv)


def load_seed_urls(urls: Optional[List[str]], seeds_file: Optional[str]) -> List[str]:
    """
    Collect the seed URLs from the command line and an optional file.

    Args:
        urls: URLs given with --url
        seeds_file: Path given with --seeds-file

    Returns:
        Deduplicated seed URLs; the built-in list when none were given

    Raises:
        ValueError: If the seeds file cannot be read
    """
    seeds = list(urls or [])

    if seeds_file:
        try:
            with open(seeds_file, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#'):
                        seeds.append(line)
        except OSError as e:
            raise ValueError(f"Cannot read seeds file {seeds_file}: {e}") from e

    if not seeds:
        seeds = list(DEFAULT_SEED_URLS)

    return dedupe_urls(seeds)


def print_summary(result: HarvestResult) -> None:
    """
    Print the harvest summary.

    Args:
        result: HarvestResult object
    """
    print_status("\n" + "=" * 60, "bold")
    print_success("HARVEST SUMMARY")
    print_status("=" * 60, "bold")
    print_status(f"  Pages rendered:    {result.pages_rendered}", "default")
    print_status(f"  Pages failed:      {result.pages_failed}", "default")
    print_status(f"  Links found:       {result.links_found}", "default")
    print_status(f"  Downloaded:        {result.documents_downloaded}", "default")
    print_status(f"  Already present:   {result.documents_skipped}", "default")
    print_status(f"  Failed:            {result.documents_failed}", "default")
    print_status(f"  Duration:          {result.duration_seconds:.1f} seconds", "default")
    print_status("=" * 60 + "\n", "bold")


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the PDF harvester.

    Returns:
        Exit code (0 when the run completes, 1 for bad input)
    """
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    configure_logging(level=log_level, log_file=args.log_file)

    try:
        seeds = load_seed_urls(args.urls, args.seeds_file)

        if not args.quiet:
            print_info(f"Seed pages: {len(seeds)}")
            print_info(f"Output: {args.output}")

        pipeline = HarvestPipeline(
            urls=seeds,
            output_dir=args.output,
            settle_seconds=args.settle,
            session_timeout=args.session_timeout,
            download_timeout=args.download_timeout,
            marker=args.marker,
            headless=not args.no_headless
        )

        result = await pipeline.harvest()

        if not args.quiet:
            print_summary(result)
            print_success(f"Documents saved to: {os.path.abspath(args.output)}")

        return 0

    except ValueError as e:
        print_error(f"Invalid input: {e}")
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        print_error("\nHarvest interrupted by user")
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    run()
