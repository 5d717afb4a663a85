"""Unit tests for dashboard aggregation"""

from datetime import date
from decimal import Decimal
from business_manager.domain.aggregation import (
    compute_dashboard,
    emi_counts,
    monthly_collection_total,
    pending_emi_total,
)
from conftest import TODAY, make_collection, make_emi

LAST_MONTH = date(2026, 9, 30)


def test_monthly_total_excludes_other_months():
    """This-month [100, 250] plus last-month 500 -> 350, not 850"""
    collections = [
        make_collection("c1", TODAY, "100"),
        make_collection("c2", date(2026, 10, 1), "250"),
        make_collection("c3", LAST_MONTH, "500"),
    ]

    assert monthly_collection_total(collections, TODAY) == Decimal("350")


def test_monthly_total_excludes_same_month_of_other_year():
    collections = [make_collection("c1", date(2025, 10, 19), "900")]
    assert monthly_collection_total(collections, TODAY) == Decimal("0")


def test_profit_split_is_exact():
    """Total 1000 -> profit 300.00, cost share 700.00"""
    aggregates = compute_dashboard([make_collection("c1", TODAY, "1000")], [], TODAY)

    assert aggregates.monthly_profit == Decimal("300.00")
    assert aggregates.monthly_cost_share == Decimal("700.00")
    assert aggregates.profit_split.values == (Decimal("300.00"), Decimal("700.00"))


def test_pending_emi_total_and_counts():
    """EMIs [{500,false},{300,true},{200,false}] -> pending 700, completed 1, pending 2"""
    emis = [make_emi("e1", "500"), make_emi("e2", "300", paid=True), make_emi("e3", "200")]

    assert pending_emi_total(emis) == Decimal("700")
    assert emi_counts(emis) == (1, 2)


def test_net_balance_may_be_negative():
    collections = [make_collection("c1", TODAY, "100"), make_collection("c2", TODAY, "250")]
    emis = [make_emi("e1", "500"), make_emi("e2", "300", paid=True), make_emi("e3", "200")]

    aggregates = compute_dashboard(collections, emis, TODAY)

    assert aggregates.monthly_collection_total == Decimal("350")
    assert aggregates.pending_emi_total == Decimal("700")
    assert aggregates.net_balance == Decimal("-350")
    assert aggregates.collections_vs_emi.values == (Decimal("350"), Decimal("700"))
    assert aggregates.collections_vs_emi.labels == ("Collections", "EMI")


def test_collection_summary_covers_all_months():
    collections = [make_collection("c1", TODAY, "100"), make_collection("c2", LAST_MONTH, "500")]

    aggregates = compute_dashboard(collections, [], TODAY)

    assert aggregates.collections_total == Decimal("600")
    assert aggregates.collections_profit == Decimal("180.00")
    assert aggregates.monthly_collection_total == Decimal("100")


def test_empty_lists():
    aggregates = compute_dashboard([], [], TODAY)

    assert aggregates.monthly_collection_total == 0
    assert aggregates.net_balance == 0
    assert aggregates.emi_completed_count == 0
    assert aggregates.emi_pending_count == 0
    assert (aggregates.month, aggregates.year) == (10, 2026)


def test_month_uses_stored_month_not_date():
    """month/year are cached at creation and are what the filter reads"""
    record = make_collection("c1", LAST_MONTH, "75")
    relabelled = type(record)(id="c1", date=LAST_MONTH, amount=record.amount, month=10, year=2026)

    assert monthly_collection_total([relabelled], TODAY) == Decimal("75")
