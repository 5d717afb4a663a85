"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

# Loose request fields: the command handlers validate and report their own messages
Loose = Optional[Union[str, float]]


class SignInRequest(BaseModel):
    """Request body for POST /v1/auth/sign-in"""

    email: Optional[str] = None
    password: Optional[str] = None


class SignUpRequest(BaseModel):
    """Request body for POST /v1/auth/sign-up"""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class PrincipalResponse(BaseModel):
    uid: str
    email: str
    name: str


class OutcomeResponse(BaseModel):
    """Result of a command"""

    ok: bool
    message: str
    severity: str
    record_id: Optional[str] = None


class CollectionCreate(BaseModel):
    """Request body for POST /v1/collections"""

    date: Optional[str] = Field(None, description="ISO calendar date")
    amount: Loose = None


class CollectionSchema(BaseModel):
    id: str
    date: date
    amount: Decimal
    amount_display: str
    month: int
    year: int


class CollectionListResponse(BaseModel):
    collections: List[CollectionSchema]
    total: Decimal
    total_display: str
    profit: Decimal
    profit_display: str


class EMICreate(BaseModel):
    """Request body for POST /v1/emis"""

    name: Optional[str] = None
    amount: Loose = None
    due_date: Loose = Field(None, description="Day of month, 1-31")
    start_date: Optional[str] = None
    total_months: Loose = None


class EMISchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    amount_display: str
    due_date: int
    due_display: str
    start_date: date
    total_months: int
    paid_months: int
    is_paid_this_month: bool
    paid_date: Optional[date] = None
    status: str  # Paid | Pending


class EMIListResponse(BaseModel):
    emis: List[EMISchema]
    pending_total: Decimal
    pending_total_display: str
    completed: int
    pending: int


class ChartSchema(BaseModel):
    title: str
    labels: List[str]
    values: List[Decimal]


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    month: int
    year: int
    monthly_collection_total: Decimal
    monthly_profit: Decimal
    monthly_cost_share: Decimal
    pending_emi_total: Decimal
    net_balance: Decimal
    emi_completed_count: int
    emi_pending_count: int
    display: dict
    charts: List[ChartSchema]


class NotificationSchema(BaseModel):
    message: str
    severity: str
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationSchema]
