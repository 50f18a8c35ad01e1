"""Heuristic parsing of order cards rendered on the order-history page."""

import re
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from order_spend.domain.orders import UNKNOWN_RESTAURANT, OrderRecord

AMOUNT_PATTERN = re.compile(r"₹\s*(\d+(?:,\d+)*(?:\.\d+)?)")
DATE_PATTERN = re.compile(
    r"(\d{1,2})\s+(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(\d{4})",
    re.IGNORECASE,
)
_MONTHS = {
    name: index
    for index, name in enumerate(
        "jan feb mar apr may jun jul aug sep oct nov dec".split(), start=1
    )
}


def parse_amount(text: str) -> Decimal | None:
    """Return the first rupee amount in the text, commas stripped."""
    match = AMOUNT_PATTERN.search(text)
    if match is None:
        return None
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return None


def parse_order_date(text: str) -> date | None:
    """Return the first "15 Mar 2024" style date in the text."""
    match = DATE_PATTERN.search(text)
    if match is None:
        return None
    day, month_name, year = match.groups()
    try:
        return datetime(int(year), _MONTHS[month_name.lower()], int(day)).date()
    except ValueError:
        return None


def parse_restaurant_name(text: str) -> str:
    """Return the first non-blank line of the card text."""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return UNKNOWN_RESTAURANT


def parse_order_text(text: str) -> OrderRecord | None:
    """Build an order from one card's text; partial matches yield None."""
    amount = parse_amount(text)
    order_date = parse_order_date(text)
    if amount is None or order_date is None:
        return None
    return OrderRecord(
        date=order_date,
        amount=amount,
        restaurant_name=parse_restaurant_name(text),
    )


def parse_order_texts(texts: Iterable[str]) -> list[OrderRecord]:
    """Parse every card text, keeping only complete orders in page order."""
    orders = []
    for text in texts:
        order = parse_order_text(text or "")
        if order is not None:
            orders.append(order)
    return orders
