from typing import Iterable, List

from coopledger.schemas.report import AdminFundEntry, AdminFundLine, DepositEntry, PassbookLine, ZERO
from coopledger.services.instruments import classify_instrument


def build_passbook(deposits: Iterable[DepositEntry]) -> List[PassbookLine]:
    """In-window passbook lines with a running total, newest first."""
    ordered = sorted(deposits, key=lambda e: e.occurred_at)
    balance = ZERO
    lines = []
    for entry in ordered:
        balance += entry.total_amount
        lines.append(PassbookLine(
            id=entry.id,
            date=entry.occurred_at,
            member_id=entry.member_id,
            member_name=entry.member_name,
            type="LOAN_REPAYMENT" if entry.installment_amount > 0 else "DEPOSIT",
            payment_mode=entry.payment_mode or "CASH",
            instrument=classify_instrument(entry.payment_mode).value,
            description=entry.note or "Passbook Entry",
            deposit_amount=entry.deposit_amount,
            installment_amount=entry.installment_amount,
            interest_amount=entry.interest_amount,
            fine_amount=entry.fine_amount,
            amount=entry.total_amount,
            balance=balance,
        ))
    lines.reverse()
    return lines


def build_admin_fund(entries: Iterable[AdminFundEntry]) -> List[AdminFundLine]:
    ordered = sorted(entries, key=lambda e: e.occurred_at, reverse=True)
    return [
        AdminFundLine(
            id=e.id,
            date=e.occurred_at,
            amount=e.amount,
            type=e.entry_type,
            description=e.description,
        )
        for e in ordered
    ]
