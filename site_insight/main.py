#!/usr/bin/env python3
"""
Site Insight - page analysis from the command line.

Analyzes a saved page (markup plus optional response headers), optionally
queries PageSpeed Insights, and exports the resulting analysis record.

Usage:
    site-insight analyze --url https://example.com --html page.html --psi
    site-insight convert --input analyses.json --output analyses.csv

Features:
    - Palette, font and contrast extraction from inline styles
    - Accessibility, SEO, social and security header checks
    - PageSpeed Insights scores and Core Web Vitals
    - CSV and JSON export
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import List, Optional

from site_insight.analyzer.pagespeed import AiohttpFetcher
from site_insight.exceptions import SiteInsightError
from site_insight.report.export import (
    EXPORT_SECTIONS,
    analyses_to_csv,
    analysis_to_csv,
    analysis_to_json,
    filter_sections,
    parse_analyses_json,
)
from site_insight.scanner.pipeline import AnalysisPipeline, ScanResult
from site_insight.utils.constants import DEFAULT_STRATEGY, DEFAULT_TIMEOUT, PSI_API_KEY_ENV
from site_insight.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
    print_info,
    print_warning
)
from site_insight.utils.text import dash_if_empty
from site_insight.utils.urls import export_filename


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (default: sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='site-insight',
        description='Analyze web pages and export the results',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s analyze --url https://example.com --html page.html
    %(prog)s analyze --url example.com --html page.html --headers headers.json --psi
    %(prog)s analyze --url example.com --html page.html --format csv -o report.csv
    %(prog)s convert --input analyses.json --output analyses.csv
        """
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

    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser('analyze', help='Analyze a saved page')

    analyze.add_argument(
        '--url', '-u',
        type=str,
        required=True,
        help='URL of the analyzed page (e.g., https://example.com)'
    )

    analyze.add_argument(
        '--html',
        type=str,
        required=True,
        help='File containing the page markup'
    )

    analyze.add_argument(
        '--headers',
        type=str,
        help='JSON file with the page response headers'
    )

    analyze.add_argument(
        '--psi',
        action='store_true',
        help='Query PageSpeed Insights for scores and Core Web Vitals'
    )

    analyze.add_argument(
        '--api-key',
        type=str,
        default=os.environ.get(PSI_API_KEY_ENV),
        help=f'PageSpeed Insights API key (default: ${PSI_API_KEY_ENV})'
    )

    analyze.add_argument(
        '--strategy',
        choices=['mobile', 'desktop'],
        default=DEFAULT_STRATEGY,
        help=f'PageSpeed strategy (default: {DEFAULT_STRATEGY})'
    )

    analyze.add_argument(
        '--check-links',
        action='store_true',
        help='Send a HEAD request to every link on the page'
    )

    analyze.add_argument(
        '--timeout',
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f'Request timeout in seconds (default: {DEFAULT_TIMEOUT})'
    )

    analyze.add_argument(
        '--format', '-f',
        choices=['json', 'csv'],
        default='json',
        help='Export format (default: json)'
    )

    analyze.add_argument(
        '--output', '-o',
        type=str,
        help="Output file, '-' for stdout (default: <domain>-analysis-<date>.<format>)"
    )

    analyze.add_argument(
        '--sections',
        type=str,
        help=f"Comma-separated data sections to keep in JSON ({','.join(EXPORT_SECTIONS)})"
    )

    convert = subparsers.add_parser('convert', help='Convert exported JSON analyses to CSV')

    convert.add_argument(
        '--input', '-i',
        type=str,
        required=True,
        help='JSON file produced by the analyze command'
    )

    convert.add_argument(
        '--output', '-o',
        type=str,
        default='-',
        help="CSV output file, '-' for stdout (default: -)"
    )

    convert.add_argument(
        '--delimiter',
        type=str,
        default=',',
        help='CSV field delimiter (default: ,)'
    )

    return parser.parse_args(argv)


def print_banner() -> None:
    """Print the application banner."""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                      SITE INSIGHT v1.0                        ║
║                Web Page Analysis and Reporting                ║
╚═══════════════════════════════════════════════════════════════╝
    """
    print_status(banner, "bold cyan")


def print_summary(result: ScanResult) -> None:
    """
    Print the analysis summary.

    Args:
        result: ScanResult from the pipeline
    """
    record = result.analysis
    overview = record.data.get('overview') or {}
    ui = record.data.get('ui') or {}

    print_status("\n" + "=" * 60)
    print_success("ANALYSIS SUMMARY")
    print_status("=" * 60)
    print_status(f"  URL:               {record.url}")
    print_status(f"  Status:            {record.status}")
    print_status(f"  Compliance:        {record.compliance_status.value}")
    print_status(f"  Overall score:     {overview.get('overallScore', 0)}/100")
    print_status(f"  SEO score:         {overview.get('seoScore', 0)}/100")
    print_status(f"  Page load (LCP):   {dash_if_empty(overview.get('pageLoadTime'))}")
    print_status(f"  Colors extracted:  {len(ui.get('colors') or [])}")
    print_status(f"  Fonts found:       {len(ui.get('fonts') or [])}")
    print_status(f"  Contrast issues:   {len(ui.get('contrastIssues') or [])}")

    for task in result.failed_tasks:
        print_warning(f"  {task.type.value} task failed: {task.error}")

    print_status("=" * 60 + "\n")


def read_text(path: str) -> str:
    """Read a UTF-8 text file."""
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def write_output(content: str, path: str) -> None:
    """Write content to a file, or to stdout for '-'."""
    if path == '-':
        sys.stdout.write(content + "\n")
        return
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)


def load_headers(path: Optional[str]) -> Optional[dict]:
    """
    Load response headers from a JSON object file.

    Raises:
        ValueError: If the file does not hold a JSON object
    """
    if not path:
        return None
    headers = json.loads(read_text(path))
    if not isinstance(headers, dict):
        raise ValueError(f"Headers file must contain a JSON object: {path}")
    return headers


async def run_analyze(args: argparse.Namespace) -> int:
    """Run the analyze command."""
    html = read_text(args.html)
    headers = load_headers(args.headers)

    pipeline = AnalysisPipeline(
        api_key=args.api_key,
        strategy=args.strategy,
        run_pagespeed=args.psi,
        check_links=args.check_links
    )

    if not args.quiet:
        print_info(f"Target URL: {args.url}")
        print_info(f"PageSpeed: {'on' if args.psi else 'off'}, link checks: "
                   f"{'on' if args.check_links else 'off'}")

    if args.psi or args.check_links:
        async with AiohttpFetcher(timeout=args.timeout) as fetcher:
            result = await pipeline.run(args.url, html, headers=headers, fetcher=fetcher)
    else:
        result = await pipeline.run(args.url, html, headers=headers)

    record = result.analysis
    if args.format == 'csv':
        if args.sections:
            print_warning("--sections only applies to JSON output")
        content = analysis_to_csv(record)
    elif args.sections:
        sections = [s.strip() for s in args.sections.split(',') if s.strip()]
        content = json.dumps(filter_sections(record, sections), indent=2, ensure_ascii=False)
    else:
        content = analysis_to_json(record)

    output = args.output or export_filename(record.url, args.format)
    write_output(content, output)

    if not args.quiet:
        print_summary(result)
    if output != '-':
        print_success(f"Analysis written to: {os.path.abspath(output)}")

    return 1 if result.analysis.status == 'failed' else 0


def run_convert(args: argparse.Namespace) -> int:
    """Run the convert command."""
    records = parse_analyses_json(read_text(args.input))
    write_output(analyses_to_csv(records, delimiter=args.delimiter), args.output)

    if args.output != '-':
        print_success(f"Converted {len(records)} analyses to: {os.path.abspath(args.output)}")
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for site-insight.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level)

    if not args.quiet and args.command == 'analyze':
        print_banner()

    try:
        if args.command == 'analyze':
            return await run_analyze(args)
        return run_convert(args)

    except KeyboardInterrupt:
        print_error("\nAnalysis interrupted by user")
        return 1
    except (OSError, ValueError) as e:
        print_error(f"Invalid input: {e}")
        return 1
    except SiteInsightError as e:
        print_error(f"Error: {e}")
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
