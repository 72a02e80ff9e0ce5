"""Tests for listing file loading."""

import json
from pathlib import Path

import pytest

from pricecompare.errors import ListingFileError
from pricecompare.listing_io import load_listings
from pricecompare.models import Listing


class TestLoadListings:
    """Tests for load_listings."""

    def test_csv_with_uppercase_headers(self, listing_files) -> None:
        """Test CSV files written by scrapers."""
        csv_path, _ = listing_files
        listings = load_listings(csv_path)

        assert len(listings) == 2
        assert listings[0].title == "Apple iPhone 15 (Black, 128 GB)"
        assert listings[0].price == "₹69,999"
        assert listings[0].link == "https://a.example/iphone15"
        assert listings[0].image_url == "https://a.example/1.jpg"
        assert listings[1].image_url is None

    def test_json_list(self, listing_files) -> None:
        """Test a JSON array of listings."""
        _, json_path = listing_files
        listings = load_listings(json_path)

        assert [item.title for item in listings] == [
            "Apple iPhone 15 128GB Black",
            "Lakme 9 to 5 Primer Matte Lipstick",
        ]

    def test_json_products_wrapper(self, tmp_path: Path) -> None:
        """Test a JSON object wrapping the listings."""
        path = tmp_path / "listings.json"
        path.write_text(json.dumps({"products": [{"Title": "Boat Airdopes 141", "imageUrl": "img.jpg"}]}))

        listings = load_listings(path)

        assert listings == [Listing(title="Boat Airdopes 141", image_url="img.jpg")]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises."""
        with pytest.raises(ListingFileError, match="not found"):
            load_listings(tmp_path / "nope.csv")

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        """Test that other file types are rejected."""
        path = tmp_path / "listings.txt"
        path.write_text("title\n")

        with pytest.raises(ListingFileError, match="Unsupported"):
            load_listings(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON."""
        path = tmp_path / "listings.json"
        path.write_text("[{")

        with pytest.raises(ListingFileError, match="Invalid JSON"):
            load_listings(path)

    def test_wrong_json_shape(self, tmp_path: Path) -> None:
        """Test JSON that is not a list of objects."""
        path = tmp_path / "listings.json"
        path.write_text(json.dumps({"count": 3}))

        with pytest.raises(ListingFileError):
            load_listings(path)


class TestListingFromDict:
    """Tests for Listing.from_dict."""

    def test_keys_are_case_insensitive(self) -> None:
        """Test scraper key spellings."""
        listing = Listing.from_dict({"TITLE": "  Apple iPhone 15 ", "PRICE": "₹69,999", "URL": "https://x"})

        assert listing.title == "Apple iPhone 15"
        assert listing.price == "₹69,999"
        assert listing.link == "https://x"

    def test_missing_title(self) -> None:
        """Test that a missing title becomes an empty string."""
        assert Listing.from_dict({"price": "499"}).title == ""
