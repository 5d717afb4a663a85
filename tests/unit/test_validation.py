"""Unit tests for local command input validation"""

import pytest
from datetime import date
from decimal import Decimal
from business_manager.domain.exceptions import ValidationError
from business_manager.domain.validation import (
    validate_collection,
    validate_emi,
    validate_sign_in,
    validate_sign_up,
)


def test_collection_accepts_iso_date_and_string_amount():
    collection = validate_collection("2026-10-19", "250.50")
    assert collection.date == date(2026, 10, 19)
    assert collection.amount == Decimal("250.50")


@pytest.mark.parametrize(
    "date_value, amount",
    [
        ("2026-10-19", 0),
        ("2026-10-19", -10),
        ("2026-10-19", None),
        ("2026-10-19", "abc"),
        (None, 100),
        ("", 100),
        ("2026-13-40", 100),
    ],
)
def test_collection_rejects_invalid_input(date_value, amount):
    with pytest.raises(ValidationError) as exc_info:
        validate_collection(date_value, amount)
    assert exc_info.value.message == "Please enter a valid date and amount"


def test_emi_strips_name():
    emi = validate_emi("  Car loan ", "12000", 5, "2026-01-01", 36)
    assert emi.name == "Car loan"
    assert emi.due_date == 5
    assert emi.total_months == 36


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"amount": 0},
        {"due_date": 0},
        {"due_date": 32},
        {"start_date": None},
        {"total_months": 0},
        {"total_months": None},
    ],
)
def test_emi_rejects_invalid_input(overrides):
    fields = {"name": "Car loan", "amount": "12000", "due_date": 5, "start_date": "2026-01-01", "total_months": 36}
    fields.update(overrides)

    with pytest.raises(ValidationError) as exc_info:
        validate_emi(**fields)
    assert exc_info.value.message == "Please fill all fields correctly"


def test_sign_in_requires_both_fields():
    assert validate_sign_in(" owner@example.com ", "pw") == ("owner@example.com", "pw")
    with pytest.raises(ValidationError, match="both email and password"):
        validate_sign_in("owner@example.com", "")


def test_sign_up_rules_in_order():
    with pytest.raises(ValidationError, match="Please fill in all fields"):
        validate_sign_up("", "a@b.c", "secret1", "secret1")
    with pytest.raises(ValidationError, match="at least 6 characters"):
        validate_sign_up("Ann", "a@b.c", "short", "short")
    with pytest.raises(ValidationError, match="Passwords do not match"):
        validate_sign_up("Ann", "a@b.c", "secret1", "secret2")

    assert validate_sign_up(" Ann ", "a@b.c", "secret1", "secret1") == ("Ann", "a@b.c", "secret1")
