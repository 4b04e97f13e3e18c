from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

from coopledger.models.transaction import ExpenseType, LoanStatus
from coopledger.schemas.report import (
    AssetSummary,
    DepositEntry,
    ExpenseSummary,
    IncomeSummary,
    LoanSummary,
    LoanView,
    MaturityProjection,
    ReportSummary,
    ZERO,
)
from coopledger.services.filters import FilteredRecords

CENT = Decimal("0.01")


def maturity_interest_liability(
    deposits: Iterable[DepositEntry],
    projections: Iterable[MaturityProjection],
) -> Decimal:
    """Interest accrued so far on maturity schemes: monthly share per in-window deposit."""
    counts = Counter(e.member_id for e in deposits if e.deposit_amount > 0)
    liability = ZERO
    for projection in projections:
        count = counts.get(projection.member_id, 0)
        if count and projection.tenure:
            liability += projection.settled_interest / projection.tenure * count
    return liability.quantize(CENT, rounding=ROUND_HALF_UP)


def summarize_loans(issued: Sequence[LoanView]) -> LoanSummary:
    """Loan totals for loans started in-window; balances come from full history."""
    issued_total = sum((v.amount for v in issued), ZERO)
    active = [v for v in issued if v.status == LoanStatus.ACTIVE.value]
    pending = sum((v.remaining_balance for v in active), ZERO)
    return LoanSummary(
        issued=issued_total,
        recovered=issued_total - pending,
        pending=pending,
        active_count=len(active),
        closed_count=len(issued) - len(active),
    )


def build_summary(
    filtered: FilteredRecords,
    issued_loans: Sequence[LoanView],
    projections: Iterable[MaturityProjection] = (),
) -> ReportSummary:
    interest = sum((e.interest_amount for e in filtered.deposits), ZERO)
    fine = sum((e.fine_amount for e in filtered.deposits), ZERO)
    deposits = sum((e.deposit_amount for e in filtered.deposits), ZERO)
    receipts = sum((e.total_amount for e in filtered.deposits), ZERO)

    misc_income = ZERO
    ops_expense = ZERO
    total_expense = ZERO
    for entry in filtered.expenses:
        if entry.is_income:
            misc_income += entry.amount
            continue
        total_expense += entry.amount
        if entry.entry_type == ExpenseType.EXPENSE.value:
            ops_expense += entry.amount

    total_income = receipts + misc_income
    return ReportSummary(
        income=IncomeSummary(
            interest=interest,
            fine=fine,
            other=total_income - interest - fine,
            total=total_income,
        ),
        expenses=ExpenseSummary(
            ops=ops_expense,
            maturity_interest_liability=maturity_interest_liability(filtered.deposits, projections),
            total=total_expense,
        ),
        assets=AssetSummary(deposits=deposits),
        loans=summarize_loans(issued_loans),
        net_profit=total_income - total_expense,
    )
