"""POST /v1/auth/* - Sign-in, sign-up and sign-out"""

from fastapi import APIRouter, Depends

from business_manager.api.v1.schemas import OutcomeResponse, PrincipalResponse, SignInRequest, SignUpRequest
from business_manager.api.dependencies import check_outcome, get_commands, require_principal
from business_manager.commands import CommandHandlers, CommandOutcome
from business_manager.domain.models import Principal

router = APIRouter()


def to_response(outcome: CommandOutcome) -> OutcomeResponse:
    return OutcomeResponse(
        ok=outcome.ok,
        message=outcome.message,
        severity=outcome.severity.value,
        record_id=outcome.record_id,
    )


@router.post("/auth/sign-in", response_model=OutcomeResponse)
async def sign_in(body: SignInRequest, commands: CommandHandlers = Depends(get_commands)):
    """Authenticate and start syncing the principal's records"""
    outcome = await commands.sign_in(body.email, body.password)
    return to_response(check_outcome(outcome))


@router.post("/auth/sign-up", response_model=OutcomeResponse, status_code=201)
async def sign_up(body: SignUpRequest, commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.sign_up(body.name, body.email, body.password, body.confirm_password)
    return to_response(check_outcome(outcome))


@router.post("/auth/sign-out", response_model=OutcomeResponse)
async def sign_out(commands: CommandHandlers = Depends(get_commands)):
    outcome = await commands.sign_out()
    return to_response(check_outcome(outcome))


@router.get("/auth/me", response_model=PrincipalResponse)
async def me(principal: Principal = Depends(require_principal)):
    return PrincipalResponse(uid=principal.uid, email=principal.email, name=principal.name)
