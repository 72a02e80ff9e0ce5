"""Tests for CLI interface."""

import argparse
import json
import logging
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from pricecompare.cli import main, run_compare, run_match, setup_logging


class TestCLI:
    """Tests for CLI commands."""

    def test_main_no_command(self) -> None:
        """Test that main prints help with no command."""
        with patch.object(sys, "argv", ["price-compare"]):
            result = main()
        assert result == 1

    def test_main_help(self, capsys) -> None:
        """Test help output."""
        with patch.object(sys, "argv", ["price-compare", "--help"]):
            with pytest.raises(SystemExit) as exc:
                main()
            assert exc.value.code == 0

        captured = capsys.readouterr()
        assert "Price Compare" in captured.out
        assert "compare" in captured.out
        assert "match" in captured.out

    def test_setup_logging_verbose(self) -> None:
        """Test verbose logging setup."""
        # Reset logging to test
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        setup_logging(verbose=True)
        assert len(logging.root.handlers) > 0
        assert logging.root.level == logging.DEBUG

    def test_compare_writes_results(
        self,
        listing_files,
        sample_config: Path,
        tmp_path: Path,
        capsys,
    ) -> None:
        """Test the compare command end to end."""
        csv_path, json_path = listing_files
        output = tmp_path / "results"
        argv = [
            "price-compare",
            "--config",
            str(sample_config),
            "compare",
            str(csv_path),
            str(json_path),
            "--output",
            str(output),
        ]

        with patch.object(sys, "argv", argv):
            result = main()

        assert result == 0
        data = json.loads((output / "comparison_flipkart.json").read_text(encoding="utf-8"))
        assert data["sourceA"] == "Amazon"
        assert len(data["results"]) == 1
        assert data["results"][0]["winner"] == "Amazon"
        assert (output / "comparison_summary_flipkart.md").exists()
        assert "Comparison Complete!" in capsys.readouterr().out

    def test_compare_with_query(self, listing_files, tmp_path: Path, monkeypatch) -> None:
        """Test the compare command for a single product query."""
        monkeypatch.chdir(tmp_path)
        csv_path, json_path = listing_files
        args = argparse.Namespace(
            config="config.yaml",
            file_a=str(csv_path),
            file_b=str(json_path),
            query="iPhone 15 128GB",
            output=str(tmp_path / "out"),
        )

        assert run_compare(args) == 0
        data = json.loads((tmp_path / "out" / "comparison_iPhone_15_128GB.json").read_text(encoding="utf-8"))
        assert data["query"] == "iPhone 15 128GB"
        assert data["results"][0]["winner"] == "Source A"

    def test_compare_missing_config(self, listing_files, tmp_path: Path, capsys) -> None:
        """Test that an explicit missing config file fails."""
        csv_path, json_path = listing_files
        args = argparse.Namespace(
            config=str(tmp_path / "missing.yaml"),
            file_a=str(csv_path),
            file_b=str(json_path),
            query=None,
            output=None,
        )

        assert run_compare(args) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_compare_missing_listing_file(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test that a missing listing file fails cleanly."""
        monkeypatch.chdir(tmp_path)
        args = argparse.Namespace(
            config="config.yaml",
            file_a=str(tmp_path / "a.csv"),
            file_b=str(tmp_path / "b.csv"),
            query=None,
            output=None,
        )

        assert run_compare(args) == 1
        assert "Listing file not found" in capsys.readouterr().err

    def test_match(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test the match command."""
        monkeypatch.chdir(tmp_path)
        args = argparse.Namespace(
            config="config.yaml",
            title_a="Apple iPhone 15 128GB",
            title_b="Apple iPhone 15 256GB",
        )

        assert run_match(args) == 0
        out = capsys.readouterr().out
        assert "matched: False" in out

    def test_match_brand_and_model(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test the match command on a part number pair."""
        monkeypatch.chdir(tmp_path)
        args = argparse.Namespace(
            config="config.yaml",
            title_a="Samsung Galaxy S24 Ultra SM-S928B",
            title_b="SAMSUNG Galaxy S24 Ultra 5G (SM-S928B)",
        )

        assert run_match(args) == 0
        out = capsys.readouterr().out
        assert "matched: True" in out
        assert "method:  brand+model" in out
