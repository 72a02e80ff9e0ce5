"""Loading scraped listings from CSV or JSON files."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pricecompare.errors import ListingFileError
from pricecompare.models import Listing

logger = logging.getLogger(__name__)


def load_listings(path: Path) -> list[Listing]:
    """Load one marketplace's scraped listings.

    CSV headers are matched case-insensitively (scrapers write TITLE, PRICE,
    LINK, IMAGE_URL). JSON may be a list of objects or ``{"products": [...]}``.

    Args:
        path: Path to a .csv or .json file.

    Returns:
        Listings in file order.

    Raises:
        ListingFileError: If the file is missing, unsupported, or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ListingFileError(f"Listing file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            records = _read_csv(path)
        elif suffix == ".json":
            records = _read_json(path)
        else:
            raise ListingFileError(f"Unsupported listing file type: {path.suffix or '(none)'}")
    except OSError as e:
        raise ListingFileError(f"Cannot read {path}: {e}") from e

    listings = [Listing.from_dict(record) for record in records]
    logger.info(f"Loaded {len(listings)} listings from {path}")
    return listings


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        return [{(k or "").strip().lower(): v for k, v in row.items()} for row in reader]


def _read_json(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ListingFileError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("products", data.get("results"))
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ListingFileError(f"{path} must contain a list of listing objects")
    return data
