from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from coopledger.schemas.report import DepositEntry, LoanView, MemberRecord, MemberReport, ZERO


def build_member_reports(
    members: Sequence[MemberRecord],
    deposits: Iterable[DepositEntry],
    loan_views: Iterable[LoanView],
) -> List[MemberReport]:
    """
    Per-member statement as of now.

    ``deposits`` is the full passbook history, not the report window: a member
    statement is never a partial-period figure.
    """
    deposited: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    interest_paid: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    fine_paid: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in deposits:
        deposited[entry.member_id] += entry.deposit_amount
        interest_paid[entry.member_id] += entry.interest_amount
        fine_paid[entry.member_id] += entry.fine_amount

    taken: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    outstanding: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for view in loan_views:
        taken[view.member_id] += view.amount
        outstanding[view.member_id] += view.remaining_balance

    reports = []
    for member in members:
        total_deposits = deposited.get(member.id, ZERO)
        loan_taken = taken.get(member.id, ZERO)
        balance = outstanding.get(member.id, ZERO)
        reports.append(MemberReport(
            member_id=member.id,
            name=member.name or "Member",
            phone=member.phone or "",
            status=member.status,
            total_deposits=total_deposits,
            loan_taken=loan_taken,
            principal_paid=loan_taken - balance,
            interest_paid=interest_paid.get(member.id, ZERO),
            fine_paid=fine_paid.get(member.id, ZERO),
            active_loan_balance=balance,
            net_worth=total_deposits - balance,
        ))
    return reports
