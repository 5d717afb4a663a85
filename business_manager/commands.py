"""Command handlers - validate input, write through the store client, report outcomes"""

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Optional
from business_manager.domain.auth import describe_sign_in_error, describe_sign_up_error
from business_manager.domain.exceptions import (
    AuthenticationError,
    AuthenticationRequired,
    DomainException,
    RecordNotFound,
    ValidationError,
)
from business_manager.domain.models import Principal, RecordKind, Severity
from business_manager.domain.validation import (
    validate_collection,
    validate_emi,
    validate_sign_in,
    validate_sign_up,
)
from business_manager.infrastructure.clients.identity import IdentityClient
from business_manager.infrastructure.observability.logging import log_command
from business_manager.infrastructure.observability.metrics import record_command
from business_manager.infrastructure.store.client import RecordStoreClient
from business_manager.infrastructure.store.codec import collection_fields, emi_fields, paid_fields
from business_manager.infrastructure.store.documents import DocumentStore
from business_manager.presentation.adapter import PresentationAdapter
from business_manager.sync.engine import LiveSyncEngine
from business_manager.sync.session import SessionState
from business_manager.utils.formatting import describe_emi


@dataclass(frozen=True)
class CommandOutcome:
    """Result of a command as shown to the user"""

    ok: bool
    message: str
    severity: Severity
    error: Optional[str] = None  # exception class name on failure
    record_id: Optional[str] = None


class CommandHandlers:
    """
    Entry points for every user action.

    ValidationError never reaches the store. AuthenticationError and
    RemoteUnavailable are caught here, logged and turned into an error
    notification; the session lists are left to the sync engine.
    """

    def __init__(
        self,
        identity: IdentityClient,
        store: DocumentStore,
        presenter: PresentationAdapter,
        clock: Callable[[], date] = date.today,
    ):
        self.identity = identity
        self.store = store
        self.presenter = presenter
        self.clock = clock
        self.session: Optional[SessionState] = None
        self.client: Optional[RecordStoreClient] = None
        self.engine: Optional[LiveSyncEngine] = None

    @property
    def principal(self) -> Optional[Principal]:
        return self.session.principal if self.session else None

    # Outcome plumbing

    def _finish(
        self,
        command: str,
        started: float,
        ok: bool,
        message: str,
        severity: Severity,
        error: Optional[Exception] = None,
        record_id: Optional[str] = None,
    ) -> CommandOutcome:
        duration_ms = (time.time() - started) * 1000
        record_command(command, ok)
        log_command(
            command,
            self.principal.uid if self.principal else None,
            ok,
            duration_ms,
            error=type(error).__name__ if error else None,
        )
        if message:
            self.presenter.notify(message, severity)
        return CommandOutcome(
            ok=ok,
            message=message,
            severity=severity,
            error=type(error).__name__ if error else None,
            record_id=record_id,
        )

    async def _write(
        self,
        command: str,
        action: Callable[[RecordStoreClient], Awaitable[Optional[str]]],
        success: str,
        failure: str,
        success_severity: Severity = Severity.SUCCESS,
    ) -> CommandOutcome:
        """Run a store write for the signed-in principal and report it"""
        started = time.time()
        try:
            if self.client is None:
                raise AuthenticationRequired()
            record_id = await action(self.client)
        except (ValidationError, AuthenticationRequired) as e:
            return self._finish(command, started, False, e.message, Severity.ERROR, e)
        except DomainException as e:
            logging.error(f"{command} failed: {e}")
            return self._finish(command, started, False, failure, Severity.ERROR, e)
        return self._finish(command, started, True, success, success_severity, record_id=record_id)

    # Session lifecycle

    async def _start_session(self, principal: Principal) -> None:
        if self.session is not None:
            await self._end_session()
        self.session = SessionState(principal=principal)
        self.client = RecordStoreClient(self.store, self.session)
        self.engine = LiveSyncEngine(self.client, self.session, self.presenter, self.clock)
        self.engine.start()
        logging.info("Session started", extra={"principal_id": principal.uid})

    async def _end_session(self) -> None:
        if self.engine is not None:
            await self.engine.stop()
        if self.session is not None:
            self.session.teardown()
        reset = getattr(self.presenter, "reset", None)
        if reset is not None:
            reset()
        self.session = None
        self.client = None
        self.engine = None

    async def resume(self, principal: Principal) -> CommandOutcome:
        """Start a session for a principal that is already authenticated"""
        started = time.time()
        await self._start_session(principal)
        return self._finish("resume", started, True, "", Severity.INFO)

    async def sign_in(self, email: str | None, password: str | None) -> CommandOutcome:
        started = time.time()
        try:
            email, password = validate_sign_in(email, password)
            principal = await self.identity.sign_in(email, password)
        except ValidationError as e:
            return self._finish("sign_in", started, False, e.message, Severity.ERROR, e)
        except AuthenticationError as e:
            logging.error(f"Login error: {e.code}")
            return self._finish("sign_in", started, False, describe_sign_in_error(e), Severity.ERROR, e)

        await self._start_session(principal)
        return self._finish("sign_in", started, True, f"Welcome, {principal.name}", Severity.SUCCESS)

    async def sign_up(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> CommandOutcome:
        started = time.time()
        try:
            name, email, password = validate_sign_up(name, email, password, confirm_password)
            principal = await self.identity.sign_up(name, email, password)
        except ValidationError as e:
            return self._finish("sign_up", started, False, e.message, Severity.ERROR, e)
        except AuthenticationError as e:
            logging.error(f"Signup error: {e.code}")
            return self._finish("sign_up", started, False, describe_sign_up_error(e), Severity.ERROR, e)

        # The new account is signed in straight away
        await self._start_session(principal)
        try:
            await self.client.put_profile(name, email)
        except DomainException as e:
            logging.error(f"Profile write failed: {e}")
            return self._finish("sign_up", started, False, f"Signup failed. {e}", Severity.ERROR, e)
        return self._finish("sign_up", started, True, "Account created successfully!", Severity.SUCCESS)

    async def sign_out(self) -> CommandOutcome:
        started = time.time()
        principal = self.principal
        try:
            if principal is not None:
                await self.identity.sign_out(principal)
        except AuthenticationError as e:
            logging.error(f"Logout error: {e}")
            return self._finish("sign_out", started, False, "Logout failed", Severity.ERROR, e)
        await self._end_session()
        return self._finish("sign_out", started, True, "Logged out successfully", Severity.INFO)

    # Collections

    async def add_collection(self, date_value, amount) -> CommandOutcome:
        async def action(client: RecordStoreClient) -> str:
            collection = validate_collection(date_value, amount)
            return await client.create(RecordKind.COLLECTIONS, collection_fields(collection))

        return await self._write(
            "add_collection",
            action,
            success="Collection added successfully",
            failure="Failed to add collection",
        )

    async def delete_collection(self, collection_id: str) -> CommandOutcome:
        async def action(client: RecordStoreClient) -> str:
            await client.delete(RecordKind.COLLECTIONS, collection_id)
            return collection_id

        return await self._write(
            "delete_collection",
            action,
            success="Collection deleted",
            failure="Failed to delete collection",
            success_severity=Severity.INFO,
        )

    # EMIs

    async def add_emi(self, name, amount, due_date, start_date, total_months) -> CommandOutcome:
        async def action(client: RecordStoreClient) -> str:
            emi = validate_emi(name, amount, due_date, start_date, total_months)
            return await client.create(RecordKind.EMIS, emi_fields(emi))

        return await self._write(
            "add_emi",
            action,
            success="EMI added successfully",
            failure="Failed to add EMI",
        )

    async def delete_emi(self, emi_id: str) -> CommandOutcome:
        async def action(client: RecordStoreClient) -> str:
            await client.delete(RecordKind.EMIS, emi_id)
            return emi_id

        return await self._write(
            "delete_emi",
            action,
            success="EMI deleted",
            failure="Failed to delete EMI",
            success_severity=Severity.INFO,
        )

    def begin_emi_payment(self, emi_id: str) -> CommandOutcome:
        """Remember which EMI awaits confirmation and describe it"""
        started = time.time()
        if self.session is None:
            error = AuthenticationRequired()
            return self._finish("begin_emi_payment", started, False, error.message, Severity.ERROR, error)

        emi = self.session.find_emi(emi_id)
        if emi is None:
            error = RecordNotFound(f"No emis record {emi_id}")
            return self._finish("begin_emi_payment", started, False, "EMI not found", Severity.ERROR, error)

        self.session.begin_confirmation(emi_id)
        # Details go back to the caller only; no notification
        self._finish("begin_emi_payment", started, True, "", Severity.INFO, record_id=emi_id)
        return CommandOutcome(ok=True, message=describe_emi(emi), severity=Severity.INFO, record_id=emi_id)

    def cancel_emi_payment(self) -> CommandOutcome:
        started = time.time()
        if self.session is not None:
            self.session.clear_confirmation()
        return self._finish("cancel_emi_payment", started, True, "", Severity.INFO)

    async def confirm_emi_payment(self) -> CommandOutcome:
        """
        Mark the pending EMI as paid today.

        Only the paid flag and paid date change. Confirming an EMI the session
        already shows as paid succeeds without writing, so the original paid
        date is kept. The pending id is kept on failure so the user can retry.
        """
        session = self.session
        emi_id = session.pending_emi_id if session else None

        async def action(client: RecordStoreClient) -> Optional[str]:
            if emi_id is None:
                raise ValidationError("No EMI selected for payment")
            emi = session.find_emi(emi_id)
            if emi is None or not emi.is_paid_this_month:
                await client.update(RecordKind.EMIS, emi_id, paid_fields(self.clock()))
            session.clear_confirmation()
            return emi_id

        return await self._write(
            "confirm_emi_payment",
            action,
            success="EMI marked as paid",
            failure="Failed to update EMI status",
        )
