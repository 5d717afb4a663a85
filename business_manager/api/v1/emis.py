"""/v1/emis - List, add, pay and delete EMIs"""

from fastapi import APIRouter, Depends

from business_manager.api.v1.auth import to_response
from business_manager.api.v1.schemas import EMICreate, EMIListResponse, EMISchema, OutcomeResponse
from business_manager.api.dependencies import check_outcome, get_commands, get_presenter, require_principal
from business_manager.commands import CommandHandlers
from business_manager.domain.aggregation import emi_counts, pending_emi_total
from business_manager.domain.models import EMIRecord
from business_manager.presentation.adapter import LatestStatePresenter
from business_manager.utils.formatting import format_currency, format_due_day

router = APIRouter()


def to_schema(emi: EMIRecord) -> EMISchema:
    return EMISchema(
        id=emi.id,
        name=emi.name,
        amount=emi.amount,
        amount_display=format_currency(emi.amount),
        due_date=emi.due_date,
        due_display=format_due_day(emi.due_date),
        start_date=emi.start_date,
        total_months=emi.total_months,
        paid_months=emi.paid_months,
        is_paid_this_month=emi.is_paid_this_month,
        paid_date=emi.paid_date,
        status="Paid" if emi.is_paid_this_month else "Pending",
    )


@router.get("/emis", response_model=EMIListResponse, dependencies=[Depends(require_principal)])
async def list_emis(presenter: LatestStatePresenter = Depends(get_presenter)):
    emis = presenter.emis
    completed, pending = emi_counts(emis)
    pending_total = pending_emi_total(emis)
    return EMIListResponse(
        emis=[to_schema(e) for e in emis],
        pending_total=pending_total,
        pending_total_display=format_currency(pending_total),
        completed=completed,
        pending=pending,
    )


@router.post("/emis", response_model=OutcomeResponse, status_code=201)
async def add_emi(body: EMICreate, commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.add_emi(body.name, body.amount, body.due_date, body.start_date, body.total_months)
    return to_response(check_outcome(outcome))


@router.post("/emis/payment/confirm", response_model=OutcomeResponse)
async def confirm_payment(commands: CommandHandlers = Depends(get_commands)):
    """Mark the EMI selected with POST /v1/emis/{emi_id}/payment as paid today"""
    outcome = await commands.confirm_emi_payment()
    return to_response(check_outcome(outcome))


@router.delete("/emis/payment", response_model=OutcomeResponse)
async def cancel_payment(commands: CommandHandlers = Depends(get_commands)):
    outcome = commands.cancel_emi_payment()
    return to_response(check_outcome(outcome))


@router.post("/emis/{emi_id}/payment", response_model=OutcomeResponse)
async def begin_payment(emi_id: str, commands: CommandHandlers = Depends(get_commands)):
    """
    Select an EMI for payment confirmation.

    Returns:
        Name, amount and due day of the EMI to confirm
    """
    outcome = commands.begin_emi_payment(emi_id)
    return to_response(check_outcome(outcome))


@router.delete("/emis/{emi_id}", response_model=OutcomeResponse)
async def delete_emi(emi_id: str, commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.delete_emi(emi_id)
    return to_response(check_outcome(outcome))
