"""Data access layer for record documents and user profiles"""

from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from business_manager.infrastructure.database.models import RecordDocument, UserProfile, utcnow


class DocumentRepository:
    """Repository for collection and EMI documents"""

    def __init__(self, db: Session):
        self.db = db

    def add_document(self, principal_id: str, kind: str, data: Dict[str, Any]) -> RecordDocument:
        """Persist a new document and return it with its assigned ID"""
        document = RecordDocument(principal_id=principal_id, kind=kind, data=dict(data))
        self.db.add(document)
        self.db.flush()  # Get ID without committing
        return document

    def get_document(self, principal_id: str, kind: str, document_id: str) -> Optional[RecordDocument]:
        return (
            self.db.query(RecordDocument)
            .filter(
                RecordDocument.principal_id == principal_id,
                RecordDocument.kind == kind,
                RecordDocument.id == document_id,
            )
            .first()
        )

    def update_document(
        self,
        principal_id: str,
        kind: str,
        document_id: str,
        partial: Dict[str, Any],
    ) -> Optional[RecordDocument]:
        """Merge fields into an existing document; None when it does not exist"""
        document = self.get_document(principal_id, kind, document_id)
        if document is None:
            return None

        # JSON columns only track reassignment, not in-place mutation
        document.data = {**document.data, **partial}
        self.db.flush()
        return document

    def delete_document(self, principal_id: str, kind: str, document_id: str) -> bool:
        """Delete a document; returns False when there was nothing to delete"""
        document = self.get_document(principal_id, kind, document_id)
        if document is None:
            return False
        self.db.delete(document)
        self.db.flush()
        return True

    def list_documents(self, principal_id: str, kind: str) -> List[RecordDocument]:
        """All documents of a kind in creation order"""
        return (
            self.db.query(RecordDocument)
            .filter(RecordDocument.principal_id == principal_id, RecordDocument.kind == kind)
            .order_by(RecordDocument.seq.asc())
            .all()
        )


class ProfileRepository:
    """Repository for user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def upsert_profile(self, principal_id: str, name: str, email: str) -> UserProfile:
        profile = self.db.get(UserProfile, principal_id)
        now = utcnow()
        if profile is None:
            profile = UserProfile(principal_id=principal_id, name=name, email=email, created_at=now, last_login=now)
            self.db.add(profile)
        else:
            profile.name = name
            profile.email = email
            profile.last_login = now
        self.db.flush()
        return profile

    def get_profile(self, principal_id: str) -> Optional[UserProfile]:
        return self.db.get(UserProfile, principal_id)
