"""Wire shape of store documents and conversion to domain records"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union
from business_manager.domain.exceptions import RemoteUnavailable
from business_manager.domain.models import CollectionRecord, EMIRecord, RecordKind
from business_manager.domain.validation import CollectionInput, EMIInput

Record = Union[CollectionRecord, EMIRecord]


@dataclass(frozen=True)
class StoredDocument:
    """Raw document as held by the store"""

    id: str
    data: Dict[str, Any]
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


def encode_amount(amount: Decimal) -> Union[int, float]:
    """JSON number for a money amount; integral amounts stay integers"""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def decode_amount(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"amount must be a number, got {value!r}")
    return Decimal(str(value))


def collection_fields(collection: CollectionInput) -> Dict[str, Any]:
    """Fields written when a collection is created; month/year are derived once here"""
    return {
        "date": collection.date.isoformat(),
        "amount": encode_amount(collection.amount),
        "month": collection.date.month,
        "year": collection.date.year,
    }


def emi_fields(emi: EMIInput) -> Dict[str, Any]:
    """Fields written when an EMI is created; the paid flag always starts false"""
    return {
        "name": emi.name,
        "amount": encode_amount(emi.amount),
        "dueDate": emi.due_date,
        "startDate": emi.start_date.isoformat(),
        "totalMonths": emi.total_months,
        "paidMonths": 0,
        "isPaidThisMonth": False,
    }


def paid_fields(paid_on: date) -> Dict[str, Any]:
    return {"isPaidThisMonth": True, "paidDate": paid_on.isoformat()}


def _parse_date(value: Any) -> date:
    # Older documents may carry a full ISO timestamp
    return date.fromisoformat(str(value)[:10])


def decode_collection(document: StoredDocument) -> CollectionRecord:
    data = document.data
    collected_on = _parse_date(data["date"])
    return CollectionRecord(
        id=document.id,
        date=collected_on,
        amount=decode_amount(data["amount"]),
        month=int(data.get("month", collected_on.month)),
        year=int(data.get("year", collected_on.year)),
        created_at=document.created_at,
    )


def decode_emi(document: StoredDocument) -> EMIRecord:
    data = document.data
    paid_date = data.get("paidDate")
    return EMIRecord(
        id=document.id,
        name=str(data["name"]),
        amount=decode_amount(data["amount"]),
        due_date=int(data["dueDate"]),
        start_date=_parse_date(data["startDate"]),
        total_months=int(data["totalMonths"]),
        paid_months=int(data.get("paidMonths", 0)),
        is_paid_this_month=bool(data.get("isPaidThisMonth", False)),
        paid_date=_parse_date(paid_date) if paid_date else None,
        created_at=document.created_at,
        last_updated=document.last_updated,
    )


DECODERS = {
    RecordKind.COLLECTIONS: decode_collection,
    RecordKind.EMIS: decode_emi,
}


def decode_record(kind: RecordKind, document: StoredDocument) -> Record:
    """
    Raises:
        RemoteUnavailable: Document does not match the wire shape of its kind
    """
    try:
        return DECODERS[kind](document)
    except (KeyError, ValueError, TypeError, InvalidOperation) as e:
        raise RemoteUnavailable(f"Malformed {kind.value} document {document.id}: {e}") from e
