"""Price parsing and winner selection."""

import re

NOT_FOUND = "NOT_FOUND"
OUT_OF_STOCK = "OUT_OF_STOCK"
SAME_PRICE = "Same Price"
NO_WINNER = "N/A"

OUT_OF_STOCK_KEYWORDS = ("out of stock", "currently unavailable", "sold out")
NOT_FOUND_KEYWORDS = ("n/a", "not found", "not_found", "unavailable")

_NON_PRICE_CHARS = re.compile(r"[^0-9.]")


def parse_price(value: str | float | int | None) -> float | str:
    """Parse a scraped price into a number or a sentinel.

    "₹1,29,999" -> 129999.0, "Out of Stock" -> OUT_OF_STOCK, "N/A" -> NOT_FOUND.

    Args:
        value: Raw price from a scraper.

    Returns:
        Float amount, or NOT_FOUND / OUT_OF_STOCK.
    """
    if value is None or isinstance(value, bool):
        return NOT_FOUND
    if isinstance(value, (int, float)):
        return float(value) if value == value else NOT_FOUND  # NaN check

    text = str(value).strip()
    if text in (NOT_FOUND, OUT_OF_STOCK):
        return text

    lowered = text.lower()
    if any(keyword in lowered for keyword in OUT_OF_STOCK_KEYWORDS):
        return OUT_OF_STOCK
    if not lowered or lowered in NOT_FOUND_KEYWORDS:
        return NOT_FOUND

    digits = _NON_PRICE_CHARS.sub("", text).strip(".")
    # Several dots left means the dots were grouping, not a decimal point
    if digits.count(".") > 1:
        digits = digits.replace(".", "")
    try:
        return float(digits)
    except ValueError:
        return NOT_FOUND


def is_numeric_price(price: float | str) -> bool:
    """Whether a parsed price is an actual amount."""
    return isinstance(price, float)


def decide_winner(price_a: float | str, price_b: float | str, name_a: str, name_b: str) -> str:
    """Name the source with the lower price.

    Args:
        price_a: Parsed price on source A.
        price_b: Parsed price on source B.
        name_a: Display name of source A.
        name_b: Display name of source B.

    Returns:
        Source name, "Same Price" when equal, or "N/A" when neither has a price.
        A source with a price wins against one without.
    """
    a_valid = is_numeric_price(price_a)
    b_valid = is_numeric_price(price_b)

    if a_valid and b_valid:
        if price_a < price_b:  # type: ignore[operator]
            return name_a
        if price_b < price_a:  # type: ignore[operator]
            return name_b
        return SAME_PRICE
    if a_valid:
        return name_a
    if b_valid:
        return name_b
    return NO_WINNER
