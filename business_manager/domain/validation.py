"""Local input validation for commands, run before any remote call"""

import logging
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from business_manager.domain.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6


class CollectionInput(BaseModel):
    """Fields required to record a collection"""

    date: date
    amount: Decimal = Field(..., gt=0)


class EMIInput(BaseModel):
    """Fields required to register an EMI"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    due_date: int = Field(..., ge=1, le=31, description="Day of month the installment is due")
    start_date: date
    total_months: int = Field(..., gt=0)


def validate_collection(date_value, amount) -> CollectionInput:
    """
    Raises:
        ValidationError: Missing/invalid date or non-positive amount
    """
    try:
        return CollectionInput(date=date_value, amount=amount)
    except PydanticValidationError as e:
        logging.debug("Collection input rejected", extra={"errors": e.errors(include_url=False)})
        raise ValidationError(
            "Please enter a valid date and amount",
            details=e.errors(include_url=False),
        ) from e


def validate_emi(name, amount, due_date, start_date, total_months) -> EMIInput:
    """
    Raises:
        ValidationError: Any field missing or out of range
    """
    try:
        return EMIInput(
            name=name,
            amount=amount,
            due_date=due_date,
            start_date=start_date,
            total_months=total_months,
        )
    except PydanticValidationError as e:
        logging.debug("EMI input rejected", extra={"errors": e.errors(include_url=False)})
        raise ValidationError(
            "Please fill all fields correctly",
            details=e.errors(include_url=False),
        ) from e


def validate_sign_in(email: str | None, password: str | None) -> tuple[str, str]:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Please enter both email and password")
    return email, password


def validate_sign_up(
    name: str | None,
    email: str | None,
    password: str | None,
    confirm_password: str | None,
) -> tuple[str, str, str]:
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email or not password or not confirm_password:
        raise ValidationError("Please fill in all fields")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    return name, email, password
