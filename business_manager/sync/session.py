"""Per-session state shared by the sync engine and command handlers"""

from dataclasses import dataclass
from typing import Optional, Tuple
from business_manager.domain.models import CollectionRecord, EMIRecord, Principal


@dataclass
class SessionState:
    """
    State owned by one authenticated session.

    The record lists are immutable tuples that are only ever replaced as a
    whole by the sync engine, so readers never see a partial update.
    """

    principal: Optional[Principal]
    collections: Tuple[CollectionRecord, ...] = ()
    emis: Tuple[EMIRecord, ...] = ()
    pending_emi_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.principal is not None

    def find_emi(self, emi_id: str) -> Optional[EMIRecord]:
        return next((e for e in self.emis if e.id == emi_id), None)

    def find_collection(self, collection_id: str) -> Optional[CollectionRecord]:
        return next((c for c in self.collections if c.id == collection_id), None)

    def begin_confirmation(self, emi_id: str) -> None:
        self.pending_emi_id = emi_id

    def clear_confirmation(self) -> None:
        self.pending_emi_id = None

    def teardown(self) -> None:
        """End of session: forget the principal and every mirrored record"""
        self.principal = None
        self.collections = ()
        self.emis = ()
        self.pending_emi_id = None
