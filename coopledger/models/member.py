from sqlalchemy import Column, String, Date, DateTime, Boolean, Numeric, Enum as SQLEnum, Uuid, text
import uuid
from coopledger.db.base import Base
import enum


class MemberStatus(str, enum.Enum):
    """Member status enum."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Member(Base):
    """Society member, scoped to one client (tenant)."""
    __tablename__ = "members"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    name = Column(String(200), nullable=True)
    phone = Column(String(30), nullable=True)
    join_date = Column(Date, nullable=True)
    status = Column(SQLEnum(MemberStatus, native_enum=False, values_callable=lambda obj: [e.value for e in obj]), default=MemberStatus.ACTIVE, nullable=False)
    total_deposits = Column(Numeric(12, 2), nullable=True)  # cached by the CRUD layer, never trusted here
    maturity_is_override = Column(Boolean, nullable=False, default=False)
    maturity_manual_amount = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
