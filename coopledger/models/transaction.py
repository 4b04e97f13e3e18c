from sqlalchemy import Column, String, ForeignKey, DateTime, Numeric, Text, Uuid, text
import uuid
from coopledger.db.base import Base
import enum


class LoanStatus(str, enum.Enum):
    """Loan status as stored by the CRUD layer (advisory only)."""
    ACTIVE = "active"
    CLOSED = "closed"


class ExpenseType(str, enum.Enum):
    """Expense ledger entry type."""
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class PassbookEntry(Base):
    """One member cash-flow event: deposit, loan installment, interest and/or fine."""
    __tablename__ = "passbook_entries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    member_id = Column(Uuid(as_uuid=True), ForeignKey("members.id"), nullable=False, index=True)
    member_name = Column(String(200), nullable=True)
    date = Column(DateTime, nullable=True)
    deposit_amount = Column(Numeric(12, 2), nullable=True)
    installment_amount = Column(Numeric(12, 2), nullable=True)
    interest_amount = Column(Numeric(12, 2), nullable=True)
    fine_amount = Column(Numeric(12, 2), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    payment_mode = Column(String(50), nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))


class ExpenseLedgerEntry(Base):
    """Operational outflow (or misc. income) recorded against the society."""
    __tablename__ = "expenses_ledger"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    member_id = Column(Uuid(as_uuid=True), ForeignKey("members.id"), nullable=True, index=True)
    date = Column(DateTime, nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    type = Column(String(20), nullable=True, default=ExpenseType.EXPENSE.value)
    category = Column(String(100), nullable=True)
    payment_mode = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))


class Loan(Base):
    """Loan disbursement. Stored balance/status are advisory; reports rederive them."""
    __tablename__ = "loans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    member_id = Column(Uuid(as_uuid=True), ForeignKey("members.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=True)
    remaining_balance = Column(Numeric(12, 2), nullable=True)
    status = Column(String(20), nullable=True, default=LoanStatus.ACTIVE.value)
    payment_mode = Column(String(50), nullable=True)
    start_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))


class AdminFundLedgerEntry(Base):
    """Admin fund ledger movement."""
    __tablename__ = "admin_fund_ledger"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    date = Column(DateTime, nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    type = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
