"""GET /v1/dashboard and /v1/notifications - Derived figures and recent messages"""

from fastapi import APIRouter, Depends, HTTPException

from business_manager.api.v1.schemas import (
    ChartSchema,
    DashboardResponse,
    NotificationListResponse,
    NotificationSchema,
)
from business_manager.api.dependencies import get_commands, get_presenter, require_principal
from business_manager.commands import CommandHandlers
from business_manager.presentation.adapter import LatestStatePresenter
from business_manager.utils.formatting import format_currency

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse, dependencies=[Depends(require_principal)])
async def get_dashboard(
    presenter: LatestStatePresenter = Depends(get_presenter),
    commands: CommandHandlers = Depends(get_commands),
):
    """
    Current month figures and chart series, evaluated for today's date.

    Returns:
        503 until the first snapshot has been synced
    """
    aggregates = presenter.aggregates_at(commands.clock())
    if aggregates is None:
        raise HTTPException(status_code=503, detail="Dashboard not synced yet")

    return DashboardResponse(
        month=aggregates.month,
        year=aggregates.year,
        monthly_collection_total=aggregates.monthly_collection_total,
        monthly_profit=aggregates.monthly_profit,
        monthly_cost_share=aggregates.monthly_cost_share,
        pending_emi_total=aggregates.pending_emi_total,
        net_balance=aggregates.net_balance,
        emi_completed_count=aggregates.emi_completed_count,
        emi_pending_count=aggregates.emi_pending_count,
        display={
            "total_collection": format_currency(aggregates.monthly_collection_total),
            "monthly_profit": format_currency(aggregates.monthly_profit),
            "pending_emi": format_currency(aggregates.pending_emi_total),
            "net_balance": format_currency(aggregates.net_balance),
        },
        charts=[
            ChartSchema(title=series.title, labels=list(series.labels), values=list(series.values))
            for series in (aggregates.collections_vs_emi, aggregates.profit_split)
        ],
    )


@router.get("/notifications", response_model=NotificationListResponse)
async def get_notifications(presenter: LatestStatePresenter = Depends(get_presenter)):
    return NotificationListResponse(
        notifications=[
            NotificationSchema(message=n.message, severity=n.severity.value, created_at=n.created_at)
            for n in presenter.recent_notifications()
        ]
    )
