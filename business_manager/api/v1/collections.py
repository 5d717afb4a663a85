"""/v1/collections - List, add and delete cash collections"""

from fastapi import APIRouter, Depends

from business_manager.api.v1.auth import to_response
from business_manager.api.v1.schemas import (
    CollectionCreate,
    CollectionListResponse,
    CollectionSchema,
    OutcomeResponse,
)
from business_manager.api.dependencies import check_outcome, get_commands, get_presenter, require_principal
from business_manager.commands import CommandHandlers
from business_manager.domain.aggregation import ZERO
from business_manager.presentation.adapter import LatestStatePresenter
from business_manager.utils.formatting import format_currency

router = APIRouter()


@router.get("/collections", response_model=CollectionListResponse, dependencies=[Depends(require_principal)])
async def list_collections(presenter: LatestStatePresenter = Depends(get_presenter)):
    """
    Latest synced collections, most recent date first.

    Returns:
        Collections with the all-time total and its 30% profit
    """
    collections = presenter.collections
    aggregates = presenter.aggregates
    total = aggregates.collections_total if aggregates else ZERO
    profit = aggregates.collections_profit if aggregates else ZERO
    return CollectionListResponse(
        collections=[
            CollectionSchema(
                id=c.id,
                date=c.date,
                amount=c.amount,
                amount_display=format_currency(c.amount),
                month=c.month,
                year=c.year,
            )
            for c in collections
        ],
        total=total,
        total_display=format_currency(total),
        profit=profit,
        profit_display=format_currency(profit),
    )


@router.post("/collections", response_model=OutcomeResponse, status_code=201)
async def add_collection(body: CollectionCreate, commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.add_collection(body.date, body.amount)
    return to_response(check_outcome(outcome))


@router.delete("/collections/{collection_id}", response_model=OutcomeResponse)
async def delete_collection(collection_id: str, commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.delete_collection(collection_id)
    return to_response(check_outcome(outcome))
