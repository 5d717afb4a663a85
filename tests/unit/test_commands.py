"""Unit tests for command handlers with a stubbed store client"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from business_manager.commands import CommandHandlers
from business_manager.domain.exceptions import AuthenticationError, RemoteUnavailable
from business_manager.domain.models import Principal, RecordKind, Severity
from business_manager.infrastructure.store.client import RecordStoreClient
from business_manager.sync.session import SessionState
from conftest import TODAY, make_emi


@pytest.fixture
def stub_client() -> AsyncMock:
    client = AsyncMock(spec=RecordStoreClient)
    client.create.return_value = "new_id"
    client.update.return_value = True
    client.delete.return_value = True
    return client


@pytest.fixture
def signed_in(presenter, stub_client) -> CommandHandlers:
    """Handlers with an active session but no live sync"""
    handlers = CommandHandlers(AsyncMock(), MagicMock(), presenter, clock=lambda: TODAY)
    handlers.session = SessionState(principal=Principal(uid="u1", email="u1@example.com"))
    handlers.client = stub_client
    return handlers


@pytest.mark.parametrize("date_value, amount", [("2026-10-19", 0), ("2026-10-19", -5), (None, 100), ("bad", 100)])
async def test_invalid_collection_never_writes(signed_in, stub_client, presenter, date_value, amount):
    outcome = await signed_in.add_collection(date_value, amount)

    assert outcome.ok is False
    assert outcome.error == "ValidationError"
    stub_client.create.assert_not_called()
    assert presenter.recent_notifications()[-1].message == "Please enter a valid date and amount"
    assert presenter.recent_notifications()[-1].severity is Severity.ERROR


async def test_invalid_emi_never_writes(signed_in, stub_client):
    outcome = await signed_in.add_emi("Loan", "1000", 40, "2026-01-01", 12)

    assert outcome.ok is False
    stub_client.create.assert_not_called()


async def test_add_collection_writes_wire_fields(signed_in, stub_client):
    outcome = await signed_in.add_collection("2026-10-19", "350")

    assert outcome.ok is True
    assert outcome.record_id == "new_id"
    assert outcome.message == "Collection added successfully"
    stub_client.create.assert_awaited_once_with(
        RecordKind.COLLECTIONS,
        {"date": "2026-10-19", "amount": 350, "month": 10, "year": 2026},
    )


async def test_remote_failure_is_reported_not_raised(signed_in, stub_client, presenter):
    stub_client.create.side_effect = RemoteUnavailable("connection refused")

    outcome = await signed_in.add_emi("Loan", "1000", 5, "2026-01-01", 12)

    assert outcome.ok is False
    assert outcome.error == "RemoteUnavailable"
    assert presenter.recent_notifications()[-1].message == "Failed to add EMI"


async def test_delete_reports_info(signed_in, stub_client):
    outcome = await signed_in.delete_collection("c1")

    assert outcome.ok is True
    assert outcome.severity is Severity.INFO
    stub_client.delete.assert_awaited_once_with(RecordKind.COLLECTIONS, "c1")


async def test_commands_without_session_require_authentication(presenter):
    handlers = CommandHandlers(AsyncMock(), MagicMock(), presenter)

    outcome = await handlers.add_collection("2026-10-19", "100")

    assert outcome.ok is False
    assert outcome.error == "AuthenticationRequired"


async def test_confirm_payment_only_touches_paid_fields(signed_in, stub_client):
    signed_in.session.emis = (make_emi("e1", "500", name="Car loan"),)

    begin = signed_in.begin_emi_payment("e1")
    assert begin.ok is True
    assert "Car loan" in begin.message
    assert signed_in.session.pending_emi_id == "e1"

    outcome = await signed_in.confirm_emi_payment()

    assert outcome.ok is True
    stub_client.update.assert_awaited_once_with(
        RecordKind.EMIS, "e1", {"isPaidThisMonth": True, "paidDate": TODAY.isoformat()}
    )
    assert signed_in.session.pending_emi_id is None


async def test_confirm_already_paid_is_idempotent(signed_in, stub_client):
    signed_in.session.emis = (make_emi("e1", "500", paid=True),)
    signed_in.begin_emi_payment("e1")

    outcome = await signed_in.confirm_emi_payment()

    assert outcome.ok is True
    stub_client.update.assert_not_called()
    assert signed_in.session.pending_emi_id is None


async def test_failed_confirmation_keeps_pending_emi(signed_in, stub_client):
    signed_in.session.emis = (make_emi("e1", "500"),)
    signed_in.begin_emi_payment("e1")
    stub_client.update.side_effect = RemoteUnavailable("timeout")

    outcome = await signed_in.confirm_emi_payment()

    assert outcome.ok is False
    assert outcome.message == "Failed to update EMI status"
    assert signed_in.session.pending_emi_id == "e1"


async def test_confirm_without_selection_fails(signed_in, stub_client):
    outcome = await signed_in.confirm_emi_payment()

    assert outcome.ok is False
    assert outcome.error == "ValidationError"
    stub_client.update.assert_not_called()


def test_begin_payment_unknown_emi(signed_in):
    outcome = signed_in.begin_emi_payment("missing")

    assert outcome.ok is False
    assert outcome.error == "RecordNotFound"
    assert signed_in.session.pending_emi_id is None


def test_cancel_payment_clears_selection(signed_in):
    signed_in.session.emis = (make_emi("e1", "500"),)
    signed_in.begin_emi_payment("e1")

    assert signed_in.cancel_emi_payment().ok is True
    assert signed_in.session.pending_emi_id is None


async def test_sign_in_error_message_is_mapped(presenter):
    identity = AsyncMock()
    identity.sign_in.side_effect = AuthenticationError("wrong-password", "INVALID_PASSWORD")
    handlers = CommandHandlers(identity, MagicMock(), presenter)

    outcome = await handlers.sign_in("owner@example.com", "nope")

    assert outcome.ok is False
    assert outcome.message == "Login failed. Incorrect password."
    assert handlers.session is None


async def test_unmapped_sign_up_error_uses_raw_message(presenter):
    identity = AsyncMock()
    identity.sign_up.side_effect = AuthenticationError("too-many-attempts-try-later", "TOO_MANY_ATTEMPTS_TRY_LATER")
    handlers = CommandHandlers(identity, MagicMock(), presenter)

    outcome = await handlers.sign_up("Ann", "ann@example.com", "secret1", "secret1")

    assert outcome.message == "Signup failed. TOO_MANY_ATTEMPTS_TRY_LATER"
    identity.sign_up.assert_awaited_once_with("Ann", "ann@example.com", "secret1")


async def test_sign_up_validation_skips_provider(presenter):
    identity = AsyncMock()
    handlers = CommandHandlers(identity, MagicMock(), presenter)

    outcome = await handlers.sign_up("Ann", "ann@example.com", "secret1", "secret2")

    assert outcome.message == "Passwords do not match"
    identity.sign_up.assert_not_called()
