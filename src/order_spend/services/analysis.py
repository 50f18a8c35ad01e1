"""Spend analysis over extracted orders."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from order_spend.domain.analysis import RangeSummary, SpendSummary
from order_spend.domain.orders import OrderRecord

ZERO = Decimal("0")


def month_key(day: date) -> str:
    """Return the YYYY-MM bucket for a date."""
    return f"{day.year:04d}-{day.month:02d}"


def monthly_spend(orders: Iterable[OrderRecord]) -> dict[str, Decimal]:
    """Sum order amounts per calendar month, keys in ascending order."""
    buckets: dict[str, Decimal] = {}
    for order in orders:
        key = month_key(order.date)
        buckets[key] = buckets.get(key, ZERO) + order.amount
    return dict(sorted(buckets.items()))


def total_spend(orders: Iterable[OrderRecord]) -> Decimal:
    return sum((order.amount for order in orders), ZERO)


def average_order_value(orders: list[OrderRecord]) -> Decimal:
    if not orders:
        return ZERO
    return total_spend(orders) / len(orders)


def filter_by_range(
    orders: Iterable[OrderRecord], start: date, end: date
) -> list[OrderRecord]:
    """Return orders dated between start and end, both inclusive."""
    return [order for order in orders if start <= order.date <= end]


def summarize(orders: list[OrderRecord]) -> SpendSummary:
    """Summarize every order in the list."""
    dates = [order.date for order in orders]
    return SpendSummary(
        total_spend=total_spend(orders),
        monthly_spend=monthly_spend(orders),
        average_order_value=average_order_value(orders),
        order_count=len(orders),
        first_order=min(dates) if dates else None,
        last_order=max(dates) if dates else None,
    )


def summarize_range(
    orders: list[OrderRecord], start: date, end: date
) -> RangeSummary:
    """Summarize the orders that fall inside the date range."""
    selected = filter_by_range(orders, start, end)
    return RangeSummary(
        total_spend=total_spend(selected),
        monthly_spend=monthly_spend(selected),
        order_count=len(selected),
        start=start,
        end=end,
    )
