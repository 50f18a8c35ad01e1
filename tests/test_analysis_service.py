"""Tests for spend analysis."""

from datetime import date
from decimal import Decimal

from order_spend.domain.orders import OrderRecord
from order_spend.services.analysis import (
    average_order_value,
    filter_by_range,
    month_key,
    monthly_spend,
    summarize,
    summarize_range,
)


def _orders() -> list[OrderRecord]:
    return [
        OrderRecord(date(2024, 3, 15), Decimal("250.50"), "Truffles"),
        OrderRecord(date(2024, 1, 2), Decimal("100"), "Meghana Foods"),
        OrderRecord(date(2024, 3, 1), Decimal("49.50")),
        OrderRecord(date(2023, 12, 31), Decimal("300")),
    ]


def test_month_key_zero_pads() -> None:
    assert month_key(date(2024, 3, 9)) == "2024-03"


def test_monthly_spend_sorted_by_month() -> None:
    buckets = monthly_spend(_orders())

    assert list(buckets) == ["2023-12", "2024-01", "2024-03"]
    assert buckets["2024-03"] == Decimal("300.00")


def test_average_of_no_orders_is_zero() -> None:
    assert average_order_value([]) == Decimal("0")


def test_summarize() -> None:
    summary = summarize(_orders())

    assert summary.total_spend == Decimal("700.00")
    assert summary.order_count == 4
    assert summary.average_order_value == Decimal("175")
    assert summary.first_order == date(2023, 12, 31)
    assert summary.last_order == date(2024, 3, 15)


def test_summarize_empty() -> None:
    summary = summarize([])

    assert summary.total_spend == Decimal("0")
    assert summary.monthly_spend == {}
    assert summary.first_order is None
    assert summary.last_order is None


def test_filter_by_range_is_inclusive() -> None:
    selected = filter_by_range(_orders(), date(2024, 1, 2), date(2024, 3, 1))

    assert sorted(order.date for order in selected) == [
        date(2024, 1, 2),
        date(2024, 3, 1),
    ]


def test_summarize_range() -> None:
    summary = summarize_range(_orders(), date(2024, 1, 1), date(2024, 12, 31))

    assert summary.total_spend == Decimal("400.00")
    assert summary.order_count == 3
    assert summary.monthly_spend == {
        "2024-01": Decimal("100"),
        "2024-03": Decimal("300.00"),
    }
    assert summary.start == date(2024, 1, 1)
