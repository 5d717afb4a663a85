"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class RecordKind(str, Enum):
    """Record collections kept under each principal"""

    COLLECTIONS = "collections"
    EMIS = "emis"


class Severity(str, Enum):
    """Notification severity understood by the presentation layer"""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Principal:
    """Authenticated identity owning a namespace of records"""

    uid: str
    email: str
    display_name: Optional[str] = None
    id_token: Optional[str] = None

    @property
    def name(self) -> str:
        if self.display_name:
            return self.display_name
        return self.email.split("@")[0]


@dataclass(frozen=True)
class CollectionRecord:
    """Cash inflow recorded on a calendar day"""

    id: str
    date: date
    amount: Decimal
    month: int  # derived from date at creation
    year: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class EMIRecord:
    """Recurring monthly installment obligation"""

    id: str
    name: str
    amount: Decimal
    due_date: int  # day of month, 1-31
    start_date: date
    total_months: int
    paid_months: int = 0
    is_paid_this_month: bool = False
    paid_date: Optional[date] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class ChartSeries:
    """Labelled values for a single chart"""

    title: str
    labels: Tuple[str, ...]
    values: Tuple[Decimal, ...]


@dataclass(frozen=True)
class DashboardAggregates:
    """Derived values recomputed on every snapshot"""

    month: int
    year: int
    monthly_collection_total: Decimal
    monthly_profit: Decimal
    monthly_cost_share: Decimal
    pending_emi_total: Decimal
    net_balance: Decimal
    emi_completed_count: int
    emi_pending_count: int
    collections_total: Decimal
    collections_profit: Decimal
    collections_vs_emi: ChartSeries
    profit_split: ChartSeries
