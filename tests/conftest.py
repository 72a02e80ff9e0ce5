"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from pricecompare.models import Listing
from pricecompare.semantic.base import SemanticResult, SemanticScorer


class FakeSemanticScorer(SemanticScorer):
    """Semantic scorer returning a fixed score and recording calls."""

    NAME = "fake"

    def __init__(
        self,
        score: float = 0.95,
        error: Exception | None = None,
        outage: bool = False,
        scores: dict[str, float] | None = None,
    ):
        self.score = score
        self.scores = scores or {}
        self.error = error
        self.outage = outage
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def check_similarity(self, title_a: str, title_b: str, threshold: float) -> SemanticResult:
        self.calls.append((title_a, title_b))
        if self.error is not None:
            raise self.error
        if self.outage:
            return SemanticResult(matched=False, score=0.0, reason="API model is loading.", error=True)
        return self._verdict(self.scores.get(title_b, self.score), threshold)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def scorer_factory() -> type[FakeSemanticScorer]:
    """Build fake semantic scorers with custom behaviour."""
    return FakeSemanticScorer


@pytest.fixture
def fake_scorer() -> FakeSemanticScorer:
    """Semantic scorer that always answers 0.95."""
    return FakeSemanticScorer()


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """Create a sample config file for testing."""
    config_path = tmp_path / "config.yaml"
    config_content = """
sources:
  a: "Amazon"
  b: "Flipkart"

matcher:
  hard_threshold: 0.75
  reject_threshold: 0.25
  brand_policy: any

vocabulary:
  extra_brands:
    - "iqoo"

output:
  base_dir: output
"""
    config_path.write_text(config_content)
    return config_path


@pytest.fixture
def listings_a() -> list[Listing]:
    """Listings as scraped from source A."""
    return [
        Listing(title="Apple iPhone 15 (Black, 128 GB)", price="₹69,999", link="https://a.example/iphone15"),
        Listing(title="Samsung Galaxy S24 Ultra 5G SM-S928B (Titanium Gray, 256GB)", price="₹1,29,999"),
        Listing(title="boAt Rockerz 450 Bluetooth Headphones", price="Currently unavailable"),
    ]


@pytest.fixture
def listings_b() -> list[Listing]:
    """Listings as scraped from source B."""
    return [
        Listing(title="Apple iPhone 15 128GB Black", price="₹71,499", link="https://b.example/iphone15"),
        Listing(title="SAMSUNG Galaxy S24 Ultra SM-S928B 256 GB", price="₹1,24,999"),
        Listing(title="", price="₹999"),
        Listing(title="Lakme 9 to 5 Primer Matte Lipstick", price="₹450"),
    ]


@pytest.fixture
def listing_files(tmp_path: Path) -> tuple[Path, Path]:
    """Write one CSV and one JSON listing file."""
    csv_path = tmp_path / "amazon.csv"
    csv_path.write_text(
        "TITLE,PRICE,LINK,IMAGE_URL\n"
        '"Apple iPhone 15 (Black, 128 GB)","₹69,999",https://a.example/iphone15,https://a.example/1.jpg\n'
        '"boAt Rockerz 450 Bluetooth Headphones",Currently unavailable,https://a.example/rockerz,\n',
        encoding="utf-8",
    )
    json_path = tmp_path / "flipkart.json"
    json_path.write_text(
        json.dumps(
            [
                {"title": "Apple iPhone 15 128GB Black", "price": "₹71,499", "link": "https://b.example/iphone15"},
                {"title": "Lakme 9 to 5 Primer Matte Lipstick", "price": "₹450", "link": "https://b.example/lakme"},
            ]
        ),
        encoding="utf-8",
    )
    return csv_path, json_path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory."""
    output = tmp_path / "output"
    output.mkdir()
    return output
