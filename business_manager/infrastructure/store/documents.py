"""SQLAlchemy-backed document store shared by every session"""

from typing import Any, Dict, Tuple
from business_manager.config import settings
from business_manager.infrastructure.database.models import Base, RecordDocument
from business_manager.infrastructure.database.repositories import DocumentRepository, ProfileRepository
from business_manager.infrastructure.database.session import make_engine, make_session_factory, session_scope
from business_manager.infrastructure.store.codec import StoredDocument
from business_manager.infrastructure.store.hub import SnapshotHub


def to_stored(document: RecordDocument) -> StoredDocument:
    return StoredDocument(
        id=document.id,
        data=dict(document.data),
        created_at=document.created_at,
        last_updated=document.last_updated,
    )


class DocumentStore:
    """
    Blocking document operations plus the snapshot hub.

    The blocking methods are meant to run in a worker thread; the hub is
    only touched from the event loop by RecordStoreClient.
    """

    def __init__(self, database_url: str | None = None):
        self.engine = make_engine(database_url or settings.database_url)
        self.session_factory = make_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine)
        self.hub = SnapshotHub()

    def insert(self, principal_id: str, kind: str, data: Dict[str, Any]) -> str:
        with session_scope(self.session_factory) as db:
            document = DocumentRepository(db).add_document(principal_id, kind, data)
            return document.id

    def merge(self, principal_id: str, kind: str, document_id: str, partial: Dict[str, Any]) -> bool:
        with session_scope(self.session_factory) as db:
            return DocumentRepository(db).update_document(principal_id, kind, document_id, partial) is not None

    def remove(self, principal_id: str, kind: str, document_id: str) -> bool:
        with session_scope(self.session_factory) as db:
            return DocumentRepository(db).delete_document(principal_id, kind, document_id)

    def read_all(self, principal_id: str, kind: str) -> Tuple[StoredDocument, ...]:
        with session_scope(self.session_factory) as db:
            return tuple(to_stored(d) for d in DocumentRepository(db).list_documents(principal_id, kind))

    def save_profile(self, principal_id: str, name: str, email: str) -> None:
        with session_scope(self.session_factory) as db:
            ProfileRepository(db).upsert_profile(principal_id, name, email)

    def dispose(self) -> None:
        self.engine.dispose()
