"""SQLAlchemy ORM models for stored loan and deposit records"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LoanRecord(Base):
    """Loan as uploaded by a device; `data` holds the device's fields verbatim"""

    __tablename__ = "loan_record"
    __table_args__ = (UniqueConstraint("user_id", "loan_id", name="uq_loan_record_user_loan"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    loan_id = Column(String(128), nullable=False, index=True)
    data = Column(JSON, nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class DepositRecord(Base):
    """Deposit account with its transaction log stored in `data`"""

    __tablename__ = "deposit_record"
    __table_args__ = (UniqueConstraint("user_id", "deposit_id", name="uq_deposit_record_user_deposit"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    deposit_id = Column(String(128), nullable=False, index=True)
    data = Column(JSON, nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class SyncLog(Base):
    """One row per sync upload, used by the stats endpoint"""

    __tablename__ = "sync_log"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    device_id = Column(Text, nullable=True)
    sync_type = Column(String(16), nullable=False, default="incremental")
    loans_count = Column(Integer, nullable=False, default=0)
    deposits_count = Column(Integer, nullable=False, default=0)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
