"""Pytest fixtures for testing"""

import asyncio
import httpx
import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable
from business_manager.commands import CommandHandlers
from business_manager.domain.models import CollectionRecord, EMIRecord, Principal
from business_manager.infrastructure.clients.identity import IdentityClient
from business_manager.infrastructure.store.client import RecordStoreClient
from business_manager.infrastructure.store.documents import DocumentStore
from business_manager.presentation.adapter import LatestStatePresenter
from business_manager.sync.session import SessionState
from mock_services.identity_server.main import create_app as create_identity_app

TODAY = date(2026, 10, 19)


@pytest.fixture
def store(tmp_path) -> DocumentStore:
    """SQLite-backed document store in a temporary directory"""
    store = DocumentStore(f"sqlite:///{tmp_path / 'test.db'}")
    yield store
    store.dispose()


@pytest.fixture
def principal() -> Principal:
    return Principal(uid="user_owner", email="owner@example.com", id_token="token")


@pytest.fixture
def session(principal: Principal) -> SessionState:
    return SessionState(principal=principal)


@pytest.fixture
def store_client(store: DocumentStore, session: SessionState) -> RecordStoreClient:
    return RecordStoreClient(store, session)


@pytest.fixture
def presenter() -> LatestStatePresenter:
    return LatestStatePresenter(history=20)


@pytest.fixture
def identity_app():
    """Mock identity provider with one registered account"""
    app = create_identity_app()
    app.state.users["owner@example.com"] = {
        "localId": "user_owner",
        "email": "owner@example.com",
        "password": "secret123",
        "disabled": False,
        "displayName": "Owner",
    }
    return app


@pytest.fixture
def identity(identity_app) -> IdentityClient:
    return IdentityClient(
        base_url="http://identity.test",
        api_key="test-key",
        transport=httpx.ASGITransport(app=identity_app),
    )


@pytest.fixture
async def handlers(identity: IdentityClient, store: DocumentStore, presenter: LatestStatePresenter):
    """Command handlers pinned to TODAY; any live session is stopped afterwards"""
    handlers = CommandHandlers(identity, store, presenter, clock=lambda: TODAY)
    yield handlers
    if handlers.engine is not None:
        await handlers.engine.stop()


async def wait_for(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    """Poll until the live-synced state satisfies predicate"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached before timeout")
        await asyncio.sleep(0.01)


def make_collection(id: str, day: date, amount: str) -> CollectionRecord:
    return CollectionRecord(id=id, date=day, amount=Decimal(amount), month=day.month, year=day.year)


def make_emi(id: str, amount: str, paid: bool = False, name: str | None = None, due_date: int = 5) -> EMIRecord:
    return EMIRecord(
        id=id,
        name=name or f"Loan {id}",
        amount=Decimal(amount),
        due_date=due_date,
        start_date=TODAY - timedelta(days=60),
        total_months=12,
        is_paid_this_month=paid,
        paid_date=TODAY if paid else None,
    )
