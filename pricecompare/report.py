"""JSON and Markdown output for comparison runs."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any

from pricecompare.models import ComparisonRecord, ComparisonReport
from pricecompare.pricing import NO_WINNER, NOT_FOUND, OUT_OF_STOCK, SAME_PRICE

logger = logging.getLogger(__name__)


def sanitize_query(query: str) -> str:
    """Turn a product query into a file name fragment ("iPhone 15" -> "iPhone_15")."""
    cleaned = re.sub(r"[^\w\s-]", "", query).strip()
    return re.sub(r"\s+", "_", cleaned) or "comparison"


def format_price(price: float | str) -> str:
    """Human readable price or sentinel."""
    if price == NOT_FOUND:
        return "Not Found"
    if price == OUT_OF_STOCK:
        return "Out of Stock"
    if isinstance(price, float):
        return f"{price:,.2f}"
    return str(price)


class ComparisonLogger:
    """Writes comparison results as a JSON document and a Markdown summary."""

    def __init__(self, output_dir: Path):
        """Initialize comparison logger.

        Args:
            output_dir: Directory for result files.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_json(self, report: ComparisonReport, query: str) -> Path:
        """Write the full report as JSON.

        Args:
            report: Comparison report.
            query: Product query the report answers.

        Returns:
            Path to the JSON file.
        """
        json_path = self.output_dir / f"comparison_{sanitize_query(query)}.json"
        document = {"query": query, **report.to_dict()}
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)

        logger.info(f"Comparison results written: {json_path}")
        return json_path

    def write_summary(self, report: ComparisonReport, query: str) -> Path:
        """Generate Markdown summary of a comparison.

        Returns:
            Path to the summary file.
        """
        summary_path = self.output_dir / f"comparison_summary_{sanitize_query(query)}.md"
        summary_path.write_text(self._render_summary(report, query), encoding="utf-8")

        logger.info(f"Comparison summary written: {summary_path}")
        return summary_path

    def _render_summary(self, report: ComparisonReport, query: str) -> str:
        """Render Markdown summary content."""
        stats = self.get_stats(report)

        lines = [
            f"# Price Comparison - {query}",
            "",
            "## Overview",
            "",
            f"- **Scraped On:** {report.scraped_on}",
            f"- **Common Products:** {stats['total']}",
            f"- **Cheaper on {report.source_a}:** {stats['wins_a']}",
            f"- **Cheaper on {report.source_b}:** {stats['wins_b']}",
            f"- **Same Price:** {stats['same_price']}",
            f"- **No Price Available:** {stats['no_winner']}",
            "",
        ]

        if report.records:
            lines.extend(
                [
                    "## Matched Products",
                    "",
                    f"| Product | {report.source_a} | {report.source_b} | Cheaper On | Match |",
                    "|---|---|---|---|---|",
                ]
            )
            for record in report.records:
                lines.append(self._format_row(record))
            lines.append("")
        else:
            lines.extend(["*No common products found.*", ""])

        if report.logs:
            lines.extend(["## Log", ""])
            lines.extend(f"- {entry}" for entry in report.logs)
            lines.append("")

        lines.extend(
            [
                "---",
                f"*Generated at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}*",
            ]
        )

        return "\n".join(lines)

    def _format_row(self, record: ComparisonRecord) -> str:
        """Format one record as a Markdown table row."""
        title = record.title if len(record.title) <= 60 else f"{record.title[:60]}..."
        title = title.replace("|", "/")
        method = record.match_method or "-"
        return (
            f"| {title} | {format_price(record.price_a)} | {format_price(record.price_b)} "
            f"| {record.winner} | {method} {record.match_score:.2f} |"
        )

    def get_stats(self, report: ComparisonReport) -> dict[str, Any]:
        """Count records by winner.

        Returns:
            Dictionary with statistics.
        """
        winners = [r.winner for r in report.records]
        return {
            "total": len(report.records),
            "wins_a": winners.count(report.source_a),
            "wins_b": winners.count(report.source_b),
            "same_price": winners.count(SAME_PRICE),
            "no_winner": winners.count(NO_WINNER),
            "cache_hits": report.cache_hits,
            "cache_misses": report.cache_misses,
        }
