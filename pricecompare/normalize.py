"""Title normalization shared by the extractors and scorers."""

import re
import unicodedata
from collections.abc import Iterable

_WHITESPACE = re.compile(r"\s+")
_BRACKETED = re.compile(r"\([^)]*\)|\[[^\]]*\]|\{[^}]*\}")
# Anything that is not a letter, digit, hyphen or whitespace (Unicode-aware)
_NON_TOKEN = re.compile(r"[^\w\s-]|_")

_UNIT_PATTERNS = [
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:grams?|gms?|gm|g)\b"), r"\1g"),
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:kilograms?|kgs?)\b"), r"\1kg"),
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:millilit(?:er|re)s?|ml)\b"), r"\1ml"),
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:lit(?:er|re)s?|ltrs?|l)\b"), r"\1l"),
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:gigabytes?|gb)\b"), r"\1gb"),
    (re.compile(r"(\d+(?:\.\d+)?)\s*(?:terabytes?|tb)\b"), r"\1tb"),
]


def normalize(text: str | None) -> str:
    """Lowercase, collapse whitespace runs and trim.

    Args:
        text: Raw title. None yields an empty string.

    Returns:
        Normalized text.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", str(text).lower()).strip()


def strip_accents(text: str) -> str:
    """Remove diacritics (é -> e)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def standardize_units(text: str) -> str:
    """Fold unit spellings onto one token: "500 gms" -> "500g", "8 GB" -> "8gb".

    Expects lowercase input.
    """
    for pattern, replacement in _UNIT_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def clean_title(text: str | None, fluff_words: Iterable[str] = ()) -> str:
    """Strict normalization used for token overlap scoring.

    Drops bracketed spans, accents, punctuation and fluff words, and
    standardizes unit tokens.

    Args:
        text: Raw title.
        fluff_words: Words to drop entirely.

    Returns:
        Space separated tokens.
    """
    text = normalize(text)
    if not text:
        return ""
    text = _BRACKETED.sub(" ", text)
    text = strip_accents(text)
    text = _NON_TOKEN.sub(" ", text)
    text = standardize_units(_WHITESPACE.sub(" ", text))
    fluff = set(fluff_words)
    tokens = [t for t in text.split() if t not in fluff and t.strip("-")]
    return " ".join(tokens)


def tokenize(text: str | None, fluff_words: Iterable[str] = ()) -> set[str]:
    """Return the token set of a cleaned title."""
    cleaned = clean_title(text, fluff_words)
    return set(cleaned.split()) if cleaned else set()
