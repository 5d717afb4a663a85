"""SQLAlchemy ORM models backing the per-principal document store"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def new_document_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordDocument(Base):
    """Single collection or EMI document owned by a principal"""

    __tablename__ = "record_document"
    __table_args__ = (Index("ix_record_document_owner_kind", "principal_id", "kind"),)

    # Insertion sequence; gives creation order even when timestamps tie
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False, default=new_document_id)
    principal_id = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)  # collections | emis
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


class UserProfile(Base):
    """Profile written once on sign-up"""

    __tablename__ = "user_profile"

    principal_id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
