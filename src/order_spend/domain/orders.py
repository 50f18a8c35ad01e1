"""Domain models for extracted orders."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

UNKNOWN_RESTAURANT = "Unknown"


@dataclass(frozen=True)
class OrderRecord:
    """A single order recovered from the order-history page."""

    date: date
    amount: Decimal
    restaurant_name: str = UNKNOWN_RESTAURANT
