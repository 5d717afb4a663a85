"""Dashboard aggregation - derived values over the current session lists"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence, Tuple
from business_manager.domain.models import (
    ChartSeries,
    CollectionRecord,
    DashboardAggregates,
    EMIRecord,
)

PROFIT_MARGIN = Decimal("0.30")
COST_SHARE = Decimal("1") - PROFIT_MARGIN

ZERO = Decimal("0")


def monthly_collection_total(collections: Iterable[CollectionRecord], today: date) -> Decimal:
    """Sum of collections whose stored month/year matches today's"""
    return sum(
        (c.amount for c in collections if c.month == today.month and c.year == today.year),
        ZERO,
    )


def profit_of(total: Decimal) -> Decimal:
    return total * PROFIT_MARGIN


def cost_share_of(total: Decimal) -> Decimal:
    return total * COST_SHARE


def pending_emi_total(emis: Iterable[EMIRecord]) -> Decimal:
    """Sum of installments not yet marked paid this month"""
    return sum((e.amount for e in emis if not e.is_paid_this_month), ZERO)


def emi_counts(emis: Iterable[EMIRecord]) -> Tuple[int, int]:
    """Return (completed, pending) installment counts"""
    completed = 0
    pending = 0
    for emi in emis:
        if emi.is_paid_this_month:
            completed += 1
        else:
            pending += 1
    return completed, pending


def compute_dashboard(
    collections: Sequence[CollectionRecord],
    emis: Sequence[EMIRecord],
    today: date | None = None,
) -> DashboardAggregates:
    """
    Recompute every dashboard figure from the full lists.

    Requirements:
    - Monthly total only counts records of the current calendar month
    - Profit is a fixed 30% margin of the monthly total, cost share the other 70%
    - Net balance = monthly total - pending EMI total (may be negative)
    - Collection summary covers all collections regardless of month

    Nothing is cached: both lists are rescanned on every call.
    """
    if today is None:
        today = date.today()

    monthly_total = monthly_collection_total(collections, today)
    monthly_profit = profit_of(monthly_total)
    monthly_cost = cost_share_of(monthly_total)
    pending_total = pending_emi_total(emis)
    completed, pending = emi_counts(emis)

    all_time_total = sum((c.amount for c in collections), ZERO)

    return DashboardAggregates(
        month=today.month,
        year=today.year,
        monthly_collection_total=monthly_total,
        monthly_profit=monthly_profit,
        monthly_cost_share=monthly_cost,
        pending_emi_total=pending_total,
        net_balance=monthly_total - pending_total,
        emi_completed_count=completed,
        emi_pending_count=pending,
        collections_total=all_time_total,
        collections_profit=profit_of(all_time_total),
        collections_vs_emi=ChartSeries(
            title="Collections vs EMI",
            labels=("Collections", "EMI"),
            values=(monthly_total, pending_total),
        ),
        profit_split=ChartSeries(
            title="Profit split",
            labels=("Profit (30%)", "Cost (70%)"),
            values=(monthly_profit, monthly_cost),
        ),
    )
