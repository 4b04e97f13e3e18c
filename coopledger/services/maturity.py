"""Fixed-tenure savings maturity projection.

A member's first recorded deposit is taken as their fixed monthly deposit.
The interest settled at maturity is either the flat-rate projection or a
manual amount set on the member record, never a mix of the two.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from coopledger.schemas.report import DepositEntry, MaturityProjection, MemberRecord, ZERO
from coopledger.services.policy import ReportPolicy


@dataclass(frozen=True)
class ProjectedInterest:
    rate: Decimal

    basis = "projected"

    def amount(self, target_deposit: Decimal) -> Decimal:
        return target_deposit * self.rate


@dataclass(frozen=True)
class ManualInterest:
    manual_amount: Decimal

    basis = "manual"

    def amount(self, target_deposit: Decimal) -> Decimal:
        return self.manual_amount


SettledInterest = Union[ProjectedInterest, ManualInterest]


def interest_settlement(member: MemberRecord, policy: ReportPolicy) -> SettledInterest:
    if member.is_override:
        return ManualInterest(member.manual_amount)
    return ProjectedInterest(policy.maturity_interest_rate)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``; 0 if end is earlier."""
    delta = relativedelta(end, start)
    return max(0, delta.years * 12 + delta.months)


def _earliest(entries: Sequence[DepositEntry]) -> Optional[DepositEntry]:
    if not entries:
        return None
    # undated entries sort last
    return min(entries, key=lambda e: (e.occurred_at is None, e.occurred_at or datetime.max))


def project_maturity(
    member: MemberRecord,
    deposits: Sequence[DepositEntry],
    outstanding_loan: Decimal,
    policy: ReportPolicy,
    today: date,
) -> MaturityProjection:
    """Project one member's maturity from their own passbook deposits."""
    contributions = [e for e in deposits if e.deposit_amount > 0]
    first = _earliest(contributions)
    monthly_deposit = first.deposit_amount if first else ZERO

    tenure = policy.tenure_months
    target_deposit = monthly_deposit * tenure
    projected_interest = target_deposit * policy.maturity_interest_rate
    settlement = interest_settlement(member, policy)
    settled_interest = settlement.amount(target_deposit)
    maturity_amount = target_deposit + settled_interest

    start_date = first.occurred_at.date() if first and first.occurred_at else None
    maturity_date = None
    months_completed = 0
    days_remaining = 0
    status = "pending"
    if start_date is not None:
        maturity_date = start_date + relativedelta(months=tenure)
        months_completed = months_between(start_date, today)
        days_remaining = max(0, (maturity_date - today).days)
        status = "matured" if months_completed >= tenure else "active"

    return MaturityProjection(
        member_id=member.id,
        member_name=member.name or "Member",
        join_date=member.join_date,
        tenure=tenure,
        monthly_deposit=monthly_deposit,
        deposit_count=len(contributions),
        current_deposit=sum((e.deposit_amount for e in contributions), ZERO),
        target_deposit=target_deposit,
        projected_interest=projected_interest,
        settled_interest=settled_interest,
        interest_basis=settlement.basis,
        maturity_amount=maturity_amount,
        outstanding_loan=outstanding_loan,
        net_payable=maturity_amount - outstanding_loan,
        start_date=start_date,
        maturity_date=maturity_date,
        months_completed=months_completed,
        remaining_months=max(0, tenure - months_completed),
        days_remaining=days_remaining,
        status=status,
    )


def build_maturity(
    members: Iterable[MemberRecord],
    deposits: Iterable[DepositEntry],
    outstanding: Dict[str, Decimal],
    policy: ReportPolicy,
    today: date,
) -> List[MaturityProjection]:
    by_member: Dict[str, List[DepositEntry]] = defaultdict(list)
    for entry in deposits:
        by_member[entry.member_id].append(entry)
    return [
        project_maturity(m, by_member.get(m.id, []), outstanding.get(m.id, ZERO), policy, today)
        for m in members
    ]
