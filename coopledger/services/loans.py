from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Sequence

from coopledger.models.transaction import LoanStatus
from coopledger.schemas.report import DepositEntry, LoanRecord, LoanView, ZERO
from coopledger.services.policy import InstallmentAllocation

CENT = Decimal("0.01")


def installment_totals(deposits: Iterable[DepositEntry]) -> Dict[str, Decimal]:
    """Sum positive installment payments per member."""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in deposits:
        if entry.member_id and entry.installment_amount > 0:
            totals[entry.member_id] += entry.installment_amount
    return totals


def interest_totals(deposits: Iterable[DepositEntry]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in deposits:
        if entry.member_id:
            totals[entry.member_id] += entry.interest_amount
    return totals


def _pooled_balances(loans: Sequence[LoanRecord], paid: Dict[str, Decimal]) -> List[Decimal]:
    return [max(ZERO, loan.amount - paid.get(loan.member_id, ZERO)) for loan in loans]


def _oldest_first_balances(loans: Sequence[LoanRecord], paid: Dict[str, Decimal]) -> List[Decimal]:
    balances = [ZERO] * len(loans)
    remaining_pool = dict(paid)
    # undated loans are treated as the newest
    order = sorted(
        range(len(loans)),
        key=lambda i: (loans[i].started_at is None, loans[i].started_at or datetime.max),
    )
    for i in order:
        loan = loans[i]
        pool = remaining_pool.get(loan.member_id, ZERO)
        applied = min(pool, max(ZERO, loan.amount))
        remaining_pool[loan.member_id] = pool - applied
        balances[i] = max(ZERO, loan.amount - applied)
    return balances


def recompute_loans(
    loans: Sequence[LoanRecord],
    deposits: Iterable[DepositEntry],
    allocation: InstallmentAllocation = InstallmentAllocation.POOLED,
    monthly_interest_rate: Decimal = Decimal("0.01"),
) -> List[LoanView]:
    """
    Rederive every loan's outstanding balance from installment history.

    ``deposits`` must be the tenant's full, unfiltered passbook: a balance is
    never a windowed figure. Stored balance and status are ignored; a loan is
    active exactly when its recomputed balance is positive.
    """
    deposits = list(deposits)
    paid = installment_totals(deposits)
    interest = interest_totals(deposits)

    if allocation == InstallmentAllocation.OLDEST_FIRST:
        balances = _oldest_first_balances(loans, paid)
    else:
        balances = _pooled_balances(loans, paid)

    loan_counts: Dict[str, int] = defaultdict(int)
    for loan in loans:
        loan_counts[loan.member_id] += 1

    views = []
    for loan, balance in zip(loans, balances):
        status = LoanStatus.ACTIVE if balance > 0 else LoanStatus.CLOSED
        views.append(LoanView(
            id=loan.id,
            member_id=loan.member_id,
            amount=loan.amount,
            started_at=loan.started_at,
            stored_status=loan.stored_status,
            remaining_balance=balance,
            principal_paid=loan.amount - balance,
            status=status.value,
            monthly_interest=(balance * monthly_interest_rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP),
            interest_collected=(interest.get(loan.member_id, ZERO) / loan_counts[loan.member_id]).quantize(CENT, rounding=ROUND_HALF_UP),
        ))
    return views


def outstanding_by_member(loan_views: Iterable[LoanView]) -> Dict[str, Decimal]:
    """Total active balance per member."""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for view in loan_views:
        if view.member_id and view.status == LoanStatus.ACTIVE.value:
            totals[view.member_id] += view.remaining_balance
    return totals
