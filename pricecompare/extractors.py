"""Attribute extraction: brand, model number, spec words and numeric tokens."""

import re

from pricecompare.config import Vocabulary
from pricecompare.models import Listing, NormalizedAttributes
from pricecompare.normalize import normalize

NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")

_PUNCTUATION = re.compile(r"[^\w\s'-]|_")
_CAPACITY_CHUNK = re.compile(r"^\d+(?:\.\d+)?(?:gb|tb|mb|mah|mm|cm|w|g|kg|ml|l|hz|inch)?$")
# Hyphenated specs that name a component or feature, not the product: i5-12450h, usb-3, 5g-ready
_COMPONENT_CODE = re.compile(r"^(?:[ir][3579]-|ryzen|usb-|wi-fi|5g-)")

# Part-number style codes, tried first. A match here identifies one SKU.
PART_NUMBER_PATTERNS = [
    # Hyphenated codes: SM-S928B, WH-1000XM5, RTX-4060-TI
    re.compile(r"\b(?=[a-z0-9-]*\d)(?=[a-z0-9-]*[a-z])[a-z0-9]+(?:-[a-z0-9]+)+(?:/[a-z0-9]+)?\b"),
    # Apple style order codes: MTP03HN/A
    re.compile(r"\b(?=[a-z0-9]*\d)[a-z0-9]{4,}/[a-z]{1,2}\b"),
    # Compact codes with 3+ digits: A2849, ZE552KL, S928B
    re.compile(r"\b[a-z]{1,3}\d{3,6}[a-z]{0,3}\b"),
]

# Named device lines followed by a number: Galaxy S24, iPhone 15, Redmi Note 13
NAMED_DEVICE_PATTERN = re.compile(
    r"\b(?:galaxy|iphone|pixel|redmi|nord|xperia|ipad|rockerz|airdopes|narzo|moto|vivobook|ideapad|pavilion)"
    r"\s*(?:note\s*|fold\s*|flip\s*|tab\s*)?[a-z]?\d{1,4}[a-z]?\b"
)

# Any letters-then-digits block: s24, m34, x3
GENERIC_MODEL_PATTERN = re.compile(r"\b[a-z]+\d+[a-z0-9]*\b")


def _is_part_number(code: str) -> bool:
    if _COMPONENT_CODE.match(code):
        return False
    return not all(_CAPACITY_CHUNK.match(part) for part in re.split(r"[-/]", code))


class AttributeExtractor:
    """Pulls structured identity signals out of listing titles."""

    def __init__(self, vocabulary: Vocabulary | None = None):
        """Initialize extractor with a vocabulary.

        Args:
            vocabulary: Brand and spec word lists. Uses defaults if None.
        """
        self.vocabulary = vocabulary or Vocabulary.default()
        self._brand_patterns = [
            (brand, re.compile(rf"\b{re.escape(brand)}\b")) for brand in self.vocabulary.brands
        ]
        self._known_brands = {self._canonical_brand(b) for b in self.vocabulary.brands}

    def _canonical_brand(self, brand: str) -> str:
        return self.vocabulary.brand_aliases.get(brand, brand)

    def match_brand(self, title: str | None) -> tuple[str | None, bool]:
        """Find the brand of a title and whether it came from the vocabulary.

        Args:
            title: Raw title.

        Returns:
            (brand, recognized). ``recognized`` is False for first-word guesses.
        """
        text = normalize(title)
        if not text:
            return None, False

        for brand, pattern in self._brand_patterns:
            if pattern.search(text):
                return self._canonical_brand(brand), True

        first_word = text.split(" ")[0].strip(".,:;!?\"()[]{}")
        if first_word and first_word not in self.vocabulary.stop_words and len(first_word) >= 3:
            return self._canonical_brand(first_word), False
        return None, False

    def extract_brand(self, title: str | None) -> str | None:
        """Return the brand of a title, falling back to its first word."""
        brand, _ = self.match_brand(title)
        return brand

    def is_known_brand(self, brand: str | None) -> bool:
        """Check whether a brand belongs to the vocabulary."""
        if not brand:
            return False
        return self._canonical_brand(normalize(brand)) in self._known_brands

    def match_model_number(self, title: str | None) -> tuple[str | None, bool]:
        """Find the model number of a title.

        Args:
            title: Raw title.

        Returns:
            (model, is_part_number). Whitespace is removed from the model.
        """
        text = normalize(title)
        if not text:
            return None, False

        for pattern in PART_NUMBER_PATTERNS:
            for match in pattern.finditer(text):
                code = match.group(0)
                if _is_part_number(code):
                    return code, True

        for pattern in (NAMED_DEVICE_PATTERN, GENERIC_MODEL_PATTERN):
            for match in pattern.finditer(text):
                model = re.sub(r"\s+", "", match.group(0))
                if not _CAPACITY_CHUNK.match(model):
                    return model, False

        return None, False

    def extract_model_number(self, title: str | None) -> str | None:
        """Return the first model number found in a title."""
        model, _ = self.match_model_number(title)
        return model

    def extract_spec_words(self, title: str | None) -> frozenset[str]:
        """Return the spec/variant words present in a title.

        "iPhone 15 Pro Max" -> {"pro", "max"}
        """
        text = _PUNCTUATION.sub(" ", normalize(title))
        padded = f" {' '.join(text.split())} "
        return frozenset(spec for spec in self.vocabulary.spec_words if f" {spec} " in padded)

    def extract_numeric_tokens(self, title: str | None) -> frozenset[str]:
        """Return every digit sequence in the raw title ("8GB" -> "8")."""
        if not title:
            return frozenset()
        return frozenset(NUMBER_PATTERN.findall(title))

    def extract(self, listing: Listing) -> NormalizedAttributes:
        """Compute all attributes of a listing, honouring pre-supplied overrides.

        Args:
            listing: The listing to analyse.

        Returns:
            NormalizedAttributes for the listing's title.
        """
        if listing.brand and normalize(listing.brand):
            brand: str | None = self._canonical_brand(normalize(listing.brand))
            recognized = self.is_known_brand(listing.brand)
        else:
            brand, recognized = self.match_brand(listing.title)

        if listing.model_number and normalize(listing.model_number):
            model: str | None = re.sub(r"\s+", "", normalize(listing.model_number))
            is_part_number = True
        else:
            model, is_part_number = self.match_model_number(listing.title)

        return NormalizedAttributes(
            brand=brand,
            brand_recognized=recognized,
            model_number=model,
            model_is_part_number=is_part_number,
            spec_words=self.extract_spec_words(listing.title),
            numeric_tokens=self.extract_numeric_tokens(listing.title),
        )
