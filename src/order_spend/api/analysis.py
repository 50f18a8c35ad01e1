"""Spend analysis endpoints over already-extracted orders."""

from decimal import Decimal

from fastapi import APIRouter, HTTPException, status

from order_spend.api.models import AnalyzeRangeRequest, AnalyzeRequest
from order_spend.services.analysis import summarize, summarize_range

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post("/analyze")
async def analyze(payload: AnalyzeRequest) -> dict[str, object]:
    """Return totals, monthly spend and the covered date range."""
    if payload.orders is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Orders array is required",
        )
    summary = summarize([order.to_record() for order in payload.orders])
    return {
        "totalSpend": _money(summary.total_spend),
        "monthlySpend": _monthly(summary.monthly_spend),
        "averageOrderValue": _money(summary.average_order_value),
        "orderCount": summary.order_count,
        "dateRange": {
            "start": summary.first_order.isoformat() if summary.first_order else None,
            "end": summary.last_order.isoformat() if summary.last_order else None,
        },
    }


@router.post("/analyze-range")
async def analyze_range(payload: AnalyzeRangeRequest) -> dict[str, object]:
    """Return totals and monthly spend for orders inside an inclusive range."""
    if payload.orders is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Orders array is required",
        )
    if payload.start_date is None or payload.end_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date and end date are required",
        )
    summary = summarize_range(
        [order.to_record() for order in payload.orders],
        payload.start_date,
        payload.end_date,
    )
    return {
        "totalSpend": _money(summary.total_spend),
        "orderCount": summary.order_count,
        "monthlySpend": _monthly(summary.monthly_spend),
        "dateRange": {
            "start": summary.start.isoformat(),
            "end": summary.end.isoformat(),
        },
    }


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def _monthly(buckets: dict[str, Decimal]) -> dict[str, float]:
    return {key: float(value) for key, value in buckets.items()}
