"""Display formatting helpers (rupee amounts, day-of-month ordinals)"""

from decimal import Decimal, ROUND_HALF_UP
from business_manager.domain.models import EMIRecord

CURRENCY_SYMBOL = "₹"


def group_indian(digits: str) -> str:
    """Group an integer digit string the en-IN way: 12,34,56,789"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_amount(amount: Decimal) -> str:
    """
    Format a money amount with Indian digit grouping.

    At most two fraction digits, trailing zeros dropped:
        Decimal("123456")    -> "1,23,456"
        Decimal("1234.50")   -> "1,234.5"
        Decimal("-350")      -> "-350"
    """
    rounded = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    whole, _, fraction = f"{abs(rounded):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = group_indian(whole)
    if fraction:
        text = f"{text}.{fraction}"
    return sign + text


def format_currency(amount: Decimal) -> str:
    text = format_amount(amount)
    if text.startswith("-"):
        return f"-{CURRENCY_SYMBOL}{text[1:]}"
    return f"{CURRENCY_SYMBOL}{text}"


def day_suffix(day: int) -> str:
    if 11 <= day <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_due_day(day: int) -> str:
    return f"{day}{day_suffix(day)} of month"


def describe_emi(emi: EMIRecord) -> str:
    """Summary shown when asking the user to confirm an EMI payment"""
    return f"{emi.name} - Amount: {format_currency(emi.amount)} - Due Date: {format_due_day(emi.due_date)}"
