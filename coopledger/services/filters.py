from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from coopledger.schemas.report import (
    AdminFundEntry,
    DepositEntry,
    ExpenseEntry,
    LoanRecord,
    MemberRecord,
    RecordSnapshot,
    ReportFilter,
)
from coopledger.services.instruments import classify_instrument, loan_instrument


@dataclass(frozen=True)
class FilteredRecords:
    """Records inside the caller's window, plus the visible member roster."""
    deposits: Tuple[DepositEntry, ...]
    expenses: Tuple[ExpenseEntry, ...]
    disbursements: Tuple[LoanRecord, ...]
    members: Tuple[MemberRecord, ...]
    admin_funds: Tuple[AdminFundEntry, ...]


def in_window(moment: Optional[datetime], report_filter: ReportFilter) -> bool:
    """Inclusive calendar-day check. Undated records are never in a window."""
    if moment is None:
        return False
    day = moment.date()
    if report_filter.start_date and day < report_filter.start_date:
        return False
    if report_filter.end_date and day > report_filter.end_date:
        return False
    return True


def _member_matches(member_id: Optional[str], report_filter: ReportFilter) -> bool:
    selected = report_filter.selected_member
    return selected is None or member_id == selected


def _mode_matches(instrument, report_filter: ReportFilter) -> bool:
    return report_filter.transaction_mode == "all" or instrument.value == report_filter.transaction_mode


def _deposit_type_matches(entry: DepositEntry, report_filter: ReportFilter) -> bool:
    kind = report_filter.transaction_type
    if kind == "deposit":
        return entry.deposit_amount > 0
    if kind == "loan":
        return entry.installment_amount > 0
    if kind == "expense":
        return False
    return True


def visible_members(snapshot: RecordSnapshot, report_filter: ReportFilter) -> Tuple[MemberRecord, ...]:
    return tuple(m for m in snapshot.members if _member_matches(m.id, report_filter))


def visible_loans(snapshot: RecordSnapshot, report_filter: ReportFilter) -> Tuple[LoanRecord, ...]:
    """Loans of the selected member(s), regardless of the date window."""
    return tuple(loan for loan in snapshot.loans if _member_matches(loan.member_id, report_filter))


def apply_filter(snapshot: RecordSnapshot, report_filter: ReportFilter) -> FilteredRecords:
    """Restrict the three transaction streams to the caller's window."""
    deposits = tuple(
        e for e in snapshot.deposits
        if in_window(e.occurred_at, report_filter)
        and _member_matches(e.member_id, report_filter)
        and _mode_matches(classify_instrument(e.payment_mode), report_filter)
        and _deposit_type_matches(e, report_filter)
    )

    expenses: Tuple[ExpenseEntry, ...] = ()
    if report_filter.transaction_type in ("all", "expense"):
        expenses = tuple(
            e for e in snapshot.expenses
            if in_window(e.occurred_at, report_filter)
            and _member_matches(e.member_id, report_filter)
            and _mode_matches(classify_instrument(e.payment_mode), report_filter)
        )

    disbursements: Tuple[LoanRecord, ...] = ()
    if report_filter.transaction_type in ("all", "loan"):
        disbursements = tuple(
            loan for loan in visible_loans(snapshot, report_filter)
            if in_window(loan.started_at, report_filter)
            and _mode_matches(loan_instrument(loan.payment_mode), report_filter)
        )

    return FilteredRecords(
        deposits=deposits,
        expenses=expenses,
        disbursements=disbursements,
        members=visible_members(snapshot, report_filter),
        admin_funds=tuple(a for a in snapshot.admin_funds if in_window(a.occurred_at, report_filter)),
    )
