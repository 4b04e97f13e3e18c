from datetime import date
from typing import Iterable, List

from coopledger.models.transaction import LoanStatus
from coopledger.schemas.report import DefaulterEntry, LoanView, MemberRecord
from coopledger.services.policy import ReportPolicy


def build_defaulters(
    loan_views: Iterable[LoanView],
    members: Iterable[MemberRecord],
    policy: ReportPolicy,
    today: date,
) -> List[DefaulterEntry]:
    """
    Flag active loans that have stayed open past the overdue threshold.

    There is no installment schedule in the stored data, so "overdue" means
    loan age: a loan open more than ``overdue_threshold_days`` is overdue, and
    more than ``critical_threshold_days`` is critical.
    """
    roster = {m.id: m for m in members}
    flagged = []
    for view in loan_views:
        if view.status != LoanStatus.ACTIVE.value or view.remaining_balance <= 0:
            continue
        if view.started_at is None:
            continue
        days_open = (today - view.started_at.date()).days
        days_overdue = days_open if days_open > policy.overdue_threshold_days else 0
        if days_overdue == 0:
            continue
        member = roster.get(view.member_id)
        flagged.append(DefaulterEntry(
            loan_id=view.id,
            member_id=view.member_id,
            member_name=(member.name if member and member.name else "Unknown"),
            member_phone=(member.phone if member and member.phone else ""),
            amount=view.amount,
            remaining_balance=view.remaining_balance,
            days_open=days_open,
            days_overdue=days_overdue,
            severity="Critical" if days_open > policy.critical_threshold_days else "Overdue",
        ))
    flagged.sort(key=lambda d: (-d.days_overdue, d.member_id or ""))
    return flagged
