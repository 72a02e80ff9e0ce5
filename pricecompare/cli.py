"""Command-line interface for cross-marketplace price comparison."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pricecompare.comparison import ComparisonRunner
from pricecompare.errors import PriceCompareError
from pricecompare.listing_io import load_listings
from pricecompare.models import ComparisonReport
from pricecompare.report import ComparisonLogger, format_price


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI.

    Args:
        verbose: Whether to enable verbose (DEBUG) logging.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _create_runner(args: argparse.Namespace) -> ComparisonRunner:
    """Build a runner from the --config option, defaults if the file is absent."""
    config_path = Path(args.config)
    if config_path.exists():
        return ComparisonRunner(config_path)
    if args.config != "config.yaml":
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return ComparisonRunner()


async def _run_compare(runner: ComparisonRunner, args: argparse.Namespace) -> ComparisonReport:
    listings_a = load_listings(Path(args.file_a))
    listings_b = load_listings(Path(args.file_b))
    try:
        if args.query:
            return await runner.compare_query(args.query, listings_a, listings_b)
        return await runner.compare(listings_a, listings_b)
    finally:
        await runner.aclose()


def run_compare(args: argparse.Namespace) -> int:
    """Execute compare command.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    try:
        runner = _create_runner(args)
        report = asyncio.run(_run_compare(runner, args))

        output_dir = Path(args.output) if args.output else runner.config.output_dir
        writer = ComparisonLogger(output_dir)
        query = args.query or Path(args.file_b).stem
        json_path = writer.write_json(report, query)
        summary_path = writer.write_summary(report, query)
        stats = writer.get_stats(report)

        print("\n" + "=" * 50)
        print("Comparison Complete!")
        print("=" * 50)
        for record in report.records:
            print(f"- {record.title[:60]}")
            print(
                f"    {report.source_a}: {format_price(record.price_a)}  "
                f"{report.source_b}: {format_price(record.price_b)}  -> {record.winner}"
            )
        print(f"Common products: {stats['total']}")
        print(f"  Cheaper on {report.source_a}: {stats['wins_a']}")
        print(f"  Cheaper on {report.source_b}: {stats['wins_b']}")
        print(f"  Same price: {stats['same_price']}")
        print(f"Results: {json_path}")
        print(f"Summary: {summary_path}")

        return 0

    except (FileNotFoundError, PriceCompareError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Error during comparison")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run_match(args: argparse.Namespace) -> int:
    """Execute match command on a single pair of titles.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code.
    """
    try:
        runner = _create_runner(args)

        async def _match():
            try:
                return await runner.orchestrator.match_titles(args.title_a, args.title_b)
            finally:
                await runner.aclose()

        result = asyncio.run(_match())

        print(f"matched: {result.matched}")
        print(f"score:   {result.score:.3f}")
        print(f"method:  {result.method or '-'}")
        print(f"reason:  {result.reason}")
        return 0

    except (FileNotFoundError, PriceCompareError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> int:
    """Main entry point for CLI.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        description="Price Compare - Match products across two marketplaces and find the cheaper one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  price-compare compare amazon.csv flipkart.csv --config config.yaml
  price-compare compare amazon.csv flipkart.csv --query "iPhone 15 128GB"
  price-compare match "Apple iPhone 15 (Black, 128 GB)" "Apple iPhone 15 128GB Black"
        """,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml, optional)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare",
        help="Match two scraped listing files and compare prices",
    )
    compare_parser.add_argument("file_a", help="Listings from source A (.csv or .json)")
    compare_parser.add_argument("file_b", help="Listings from source B (.csv or .json)")
    compare_parser.add_argument(
        "--query",
        help="Compare only the best listing per source for this product name",
    )
    compare_parser.add_argument(
        "-o",
        "--output",
        help="Directory for result files (default: output.base_dir from config)",
    )
    compare_parser.set_defaults(func=run_compare)

    # Match command
    match_parser = subparsers.add_parser(
        "match",
        help="Check whether two titles denote the same product",
    )
    match_parser.add_argument("title_a", help="First product title")
    match_parser.add_argument("title_b", help="Second product title")
    match_parser.set_defaults(func=run_match)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
