"""Domain models for spend analysis."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class SpendSummary:
    """Totals and monthly buckets for a full order list."""

    total_spend: Decimal
    monthly_spend: dict[str, Decimal]
    average_order_value: Decimal
    order_count: int
    first_order: date | None
    last_order: date | None


@dataclass(frozen=True)
class RangeSummary:
    """Totals and monthly buckets for orders inside a date range."""

    total_spend: Decimal
    monthly_spend: dict[str, Decimal]
    order_count: int
    start: date
    end: date
