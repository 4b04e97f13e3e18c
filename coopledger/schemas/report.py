import datetime as dt
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal internally, plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

ZERO = Decimal("0")

InstrumentName = Literal["cash", "bank", "upi"]


class RecordModel(BaseModel):
    """Canonical, immutable input record."""

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class ReportModel(BaseModel):
    """Derived report row, serialized camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ---------------------------------------------------------------------------
# Canonical inputs
# ---------------------------------------------------------------------------

class DepositEntry(RecordModel):
    """One passbook entry: deposit, loan installment, interest and fine in one row."""
    id: Optional[str] = None
    member_id: Optional[str] = None
    member_name: Optional[str] = None
    occurred_at: Optional[dt.datetime] = None
    deposit_amount: Money = ZERO
    installment_amount: Money = ZERO
    interest_amount: Money = ZERO
    fine_amount: Money = ZERO
    total_amount: Money = ZERO  # independent of the parts, never re-summed
    payment_mode: Optional[str] = None
    note: Optional[str] = None


class ExpenseEntry(RecordModel):
    id: Optional[str] = None
    member_id: Optional[str] = None
    occurred_at: Optional[dt.datetime] = None
    amount: Money = ZERO
    entry_type: Optional[str] = None
    payment_mode: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.entry_type == "INCOME"


class LoanRecord(RecordModel):
    id: Optional[str] = None
    member_id: Optional[str] = None
    amount: Money = ZERO
    started_at: Optional[dt.datetime] = None
    stored_status: Optional[str] = None
    stored_balance: Money = ZERO
    payment_mode: Optional[str] = None


class MemberRecord(RecordModel):
    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    join_date: Optional[dt.date] = None
    status: str = "active"
    is_override: bool = False
    manual_amount: Money = ZERO


class AdminFundEntry(RecordModel):
    id: Optional[str] = None
    occurred_at: Optional[dt.datetime] = None
    amount: Money = ZERO
    entry_type: Optional[str] = None
    description: Optional[str] = None


class RecordSnapshot(RecordModel):
    """Consistent snapshot of one tenant's raw records."""
    deposits: Tuple[DepositEntry, ...] = ()
    expenses: Tuple[ExpenseEntry, ...] = ()
    loans: Tuple[LoanRecord, ...] = ()
    members: Tuple[MemberRecord, ...] = ()
    admin_funds: Tuple[AdminFundEntry, ...] = ()


class ReportFilter(RecordModel):
    """Caller-supplied reporting window and refinements."""
    start_date: Optional[dt.date] = Field(None, description="First day of the window (inclusive)")
    end_date: Optional[dt.date] = Field(None, description="Last day of the window (inclusive, end of day)")
    member_id: Optional[str] = Field(None, description="Restrict to one member; None or 'ALL' for everyone")
    transaction_mode: Literal["all", "cash", "bank", "upi"] = "all"
    transaction_type: Literal["all", "deposit", "loan", "expense"] = "all"

    @property
    def selected_member(self) -> Optional[str]:
        if not self.member_id or self.member_id.upper() == "ALL":
            return None
        return self.member_id


class RawRecords(RecordModel):
    """Raw record collections as returned by the hosted data store."""
    deposits: List[Dict[str, Any]] = Field(default_factory=list)
    expenses: List[Dict[str, Any]] = Field(default_factory=list)
    loans: List[Dict[str, Any]] = Field(default_factory=list)
    members: List[Dict[str, Any]] = Field(default_factory=list)
    admin_funds: List[Dict[str, Any]] = Field(default_factory=list)


class ComputeRequest(RecordModel):
    records: RawRecords = Field(default_factory=RawRecords)
    filter: ReportFilter = Field(default_factory=ReportFilter)
    today: Optional[dt.date] = Field(None, description="Reference day for loan ageing and maturity; defaults to the server date")


# ---------------------------------------------------------------------------
# Derived outputs
# ---------------------------------------------------------------------------

class IncomeSummary(ReportModel):
    interest: Money = ZERO
    fine: Money = ZERO
    other: Money = ZERO
    total: Money = ZERO


class ExpenseSummary(ReportModel):
    ops: Money = ZERO
    maturity_interest_liability: Money = ZERO
    total: Money = ZERO


class AssetSummary(ReportModel):
    deposits: Money = ZERO


class LoanSummary(ReportModel):
    issued: Money = ZERO
    recovered: Money = ZERO
    pending: Money = ZERO
    active_count: int = 0
    closed_count: int = 0


class ReportSummary(ReportModel):
    income: IncomeSummary = Field(default_factory=IncomeSummary)
    expenses: ExpenseSummary = Field(default_factory=ExpenseSummary)
    assets: AssetSummary = Field(default_factory=AssetSummary)
    loans: LoanSummary = Field(default_factory=LoanSummary)
    net_profit: Money = ZERO


class DailyLedgerEntry(ReportModel):
    date: dt.date
    deposit: Money = ZERO
    emi: Money = ZERO
    loan_out: Money = ZERO
    interest: Money = ZERO
    fine: Money = ZERO
    total_in: Money = ZERO
    total_out: Money = ZERO
    net_flow: Money = ZERO
    cash_in: Money = ZERO
    cash_out: Money = ZERO
    bank_in: Money = ZERO
    bank_out: Money = ZERO
    upi_in: Money = ZERO
    upi_out: Money = ZERO
    running_balance: Money = ZERO


class CashbookEntry(ReportModel):
    date: dt.date
    cash_in: Money = ZERO
    cash_out: Money = ZERO
    bank_in: Money = ZERO
    bank_out: Money = ZERO
    upi_in: Money = ZERO
    upi_out: Money = ZERO
    closing: Money = ZERO


class ModeStats(ReportModel):
    cash_balance: Money = ZERO
    bank_balance: Money = ZERO
    upi_balance: Money = ZERO


class LoanView(ReportModel):
    id: Optional[str] = None
    member_id: Optional[str] = None
    amount: Money = ZERO
    started_at: Optional[dt.datetime] = None
    stored_status: Optional[str] = None
    remaining_balance: Money = ZERO
    principal_paid: Money = ZERO
    status: Literal["active", "closed"] = "closed"
    monthly_interest: Money = ZERO
    interest_collected: Money = ZERO


class MemberReport(ReportModel):
    member_id: str
    name: str
    phone: str = ""
    status: str = "active"
    total_deposits: Money = ZERO
    loan_taken: Money = ZERO
    principal_paid: Money = ZERO
    interest_paid: Money = ZERO
    fine_paid: Money = ZERO
    active_loan_balance: Money = ZERO
    net_worth: Money = ZERO


class MaturityProjection(ReportModel):
    member_id: str
    member_name: str
    join_date: Optional[dt.date] = None
    tenure: int
    monthly_deposit: Money = ZERO
    deposit_count: int = 0
    current_deposit: Money = ZERO
    target_deposit: Money = ZERO
    projected_interest: Money = ZERO
    settled_interest: Money = ZERO
    interest_basis: Literal["projected", "manual"] = "projected"
    maturity_amount: Money = ZERO
    outstanding_loan: Money = ZERO
    net_payable: Money = ZERO
    start_date: Optional[dt.date] = None
    maturity_date: Optional[dt.date] = None
    months_completed: int = 0
    remaining_months: int = 0
    days_remaining: int = 0
    status: Literal["pending", "active", "matured"] = "pending"


class DefaulterEntry(ReportModel):
    loan_id: Optional[str] = None
    member_id: Optional[str] = None
    member_name: str = "Unknown"
    member_phone: str = ""
    amount: Money = ZERO
    remaining_balance: Money = ZERO
    days_open: int = 0
    days_overdue: int = 0
    severity: Literal["Overdue", "Critical"] = "Overdue"


class PassbookLine(ReportModel):
    id: Optional[str] = None
    date: Optional[dt.datetime] = None
    member_id: Optional[str] = None
    member_name: Optional[str] = None
    type: Literal["DEPOSIT", "LOAN_REPAYMENT"] = "DEPOSIT"
    payment_mode: str = "CASH"
    instrument: InstrumentName = "cash"
    description: str = "Passbook Entry"
    deposit_amount: Money = ZERO
    installment_amount: Money = ZERO
    interest_amount: Money = ZERO
    fine_amount: Money = ZERO
    amount: Money = ZERO
    balance: Money = ZERO


class AdminFundLine(ReportModel):
    id: Optional[str] = None
    date: Optional[dt.datetime] = None
    amount: Money = ZERO
    type: Optional[str] = None
    description: Optional[str] = None


class ReportBundle(ReportModel):
    """Everything the reporting dashboard renders, recomputed in one pass."""
    summary: ReportSummary = Field(default_factory=ReportSummary)
    daily_ledger: List[DailyLedgerEntry] = Field(default_factory=list)
    cashbook: List[CashbookEntry] = Field(default_factory=list)
    mode_stats: ModeStats = Field(default_factory=ModeStats)
    loans: List[LoanView] = Field(default_factory=list)
    member_reports: List[MemberReport] = Field(default_factory=list)
    maturity: List[MaturityProjection] = Field(default_factory=list)
    defaulters: List[DefaulterEntry] = Field(default_factory=list)
    passbook: List[PassbookLine] = Field(default_factory=list)
    admin_fund: List[AdminFundLine] = Field(default_factory=list)
