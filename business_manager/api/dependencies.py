"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from business_manager.commands import CommandHandlers, CommandOutcome
from business_manager.domain.models import Principal
from business_manager.presentation.adapter import LatestStatePresenter

# Command error class -> HTTP status
ERROR_STATUS = {
    "ValidationError": 422,
    "AuthenticationError": 401,
    "AuthenticationRequired": 401,
    "RecordNotFound": 404,
    "RemoteUnavailable": 503,
}


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_commands(request: Request) -> CommandHandlers:
    """Provide the process-wide command handlers"""
    return request.app.state.commands


def get_presenter(request: Request) -> LatestStatePresenter:
    """Provide the presenter holding the latest rendered state"""
    return request.app.state.presenter


def require_principal(request: Request) -> Principal:
    principal = get_commands(request).principal
    if principal is None:
        raise HTTPException(status_code=401, detail="Please sign in to continue")
    return principal


def check_outcome(outcome: CommandOutcome) -> CommandOutcome:
    """Raise the HTTP error matching a failed command"""
    if not outcome.ok:
        raise HTTPException(status_code=ERROR_STATUS.get(outcome.error, 500), detail=outcome.message)
    return outcome
