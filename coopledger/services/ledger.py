"""Daily ledger and instrument-wise cashbook.

All three transaction streams are merged into one oldest-first sequence and
replayed against a single running balance. Each calendar day keeps one
accumulator; the day's balance snapshot is the balance after its last
transaction. Results are returned newest-first.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
import enum
from decimal import Decimal
from typing import Dict, Iterable, List, Union

from coopledger.schemas.report import (
    CashbookEntry,
    DailyLedgerEntry,
    DepositEntry,
    ExpenseEntry,
    LoanRecord,
    ModeStats,
    ZERO,
)
from coopledger.services.instruments import Instrument, classify_instrument, loan_instrument


class TransactionKind(str, enum.Enum):
    IN = "IN"      # passbook receipt
    INC = "INC"    # miscellaneous income from the expense ledger
    EXP = "EXP"
    LOAN = "LOAN"


@dataclass(frozen=True)
class TaggedTransaction:
    kind: TransactionKind
    occurred_at: datetime
    amount: Decimal
    instrument: Instrument
    source: Union[DepositEntry, ExpenseEntry, LoanRecord]


@dataclass
class DayBucket:
    """Per-day accumulator."""
    day: date
    deposit: Decimal = ZERO
    emi: Decimal = ZERO
    loan_out: Decimal = ZERO
    interest: Decimal = ZERO
    fine: Decimal = ZERO
    flows_in: Dict[Instrument, Decimal] = field(default_factory=lambda: {i: ZERO for i in Instrument})
    flows_out: Dict[Instrument, Decimal] = field(default_factory=lambda: {i: ZERO for i in Instrument})
    running_balance: Decimal = ZERO

    @property
    def total_in(self) -> Decimal:
        return sum(self.flows_in.values(), ZERO)

    @property
    def total_out(self) -> Decimal:
        return sum(self.flows_out.values(), ZERO)


@dataclass(frozen=True)
class LedgerResult:
    daily_ledger: List[DailyLedgerEntry]
    cashbook: List[CashbookEntry]
    mode_stats: ModeStats


def tag_transactions(
    deposits: Iterable[DepositEntry],
    expenses: Iterable[ExpenseEntry],
    disbursements: Iterable[LoanRecord],
) -> List[TaggedTransaction]:
    """Tag each dated record with its direction and instrument, oldest first."""
    tagged: List[TaggedTransaction] = []
    for entry in deposits:
        if entry.occurred_at is not None:
            tagged.append(TaggedTransaction(
                TransactionKind.IN, entry.occurred_at, entry.total_amount,
                classify_instrument(entry.payment_mode), entry,
            ))
    for entry in expenses:
        if entry.occurred_at is not None:
            kind = TransactionKind.INC if entry.is_income else TransactionKind.EXP
            tagged.append(TaggedTransaction(
                kind, entry.occurred_at, entry.amount,
                classify_instrument(entry.payment_mode), entry,
            ))
    for loan in disbursements:
        if loan.started_at is not None:
            tagged.append(TaggedTransaction(
                TransactionKind.LOAN, loan.started_at, loan.amount,
                loan_instrument(loan.payment_mode), loan,
            ))
    # stable sort: same-instant records keep stream order
    tagged.sort(key=lambda t: t.occurred_at)
    return tagged


def accumulate_days(transactions: Iterable[TaggedTransaction]) -> Dict[date, DayBucket]:
    """Replay transactions oldest-first into day buckets, keyed and ordered by date."""
    buckets: Dict[date, DayBucket] = {}
    balance = ZERO
    for txn in transactions:
        day = txn.occurred_at.date()
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = DayBucket(day=day)

        if txn.kind == TransactionKind.IN:
            entry = txn.source
            bucket.deposit += entry.deposit_amount
            bucket.emi += entry.installment_amount
            bucket.interest += entry.interest_amount
            bucket.fine += entry.fine_amount
            bucket.flows_in[txn.instrument] += txn.amount
            balance += txn.amount
        elif txn.kind == TransactionKind.INC:
            bucket.flows_in[txn.instrument] += txn.amount
            balance += txn.amount
        elif txn.kind == TransactionKind.EXP:
            bucket.flows_out[txn.instrument] += txn.amount
            balance -= txn.amount
        else:
            bucket.loan_out += txn.amount
            bucket.flows_out[txn.instrument] += txn.amount
            balance -= txn.amount

        bucket.running_balance = balance
    return dict(sorted(buckets.items()))


def _ledger_row(bucket: DayBucket) -> DailyLedgerEntry:
    return DailyLedgerEntry(
        date=bucket.day,
        deposit=bucket.deposit,
        emi=bucket.emi,
        loan_out=bucket.loan_out,
        interest=bucket.interest,
        fine=bucket.fine,
        total_in=bucket.total_in,
        total_out=bucket.total_out,
        net_flow=bucket.total_in - bucket.total_out,
        cash_in=bucket.flows_in[Instrument.CASH],
        cash_out=bucket.flows_out[Instrument.CASH],
        bank_in=bucket.flows_in[Instrument.BANK],
        bank_out=bucket.flows_out[Instrument.BANK],
        upi_in=bucket.flows_in[Instrument.UPI],
        upi_out=bucket.flows_out[Instrument.UPI],
        running_balance=bucket.running_balance,
    )


def _cashbook_row(bucket: DayBucket) -> CashbookEntry:
    return CashbookEntry(
        date=bucket.day,
        cash_in=bucket.flows_in[Instrument.CASH],
        cash_out=bucket.flows_out[Instrument.CASH],
        bank_in=bucket.flows_in[Instrument.BANK],
        bank_out=bucket.flows_out[Instrument.BANK],
        upi_in=bucket.flows_in[Instrument.UPI],
        upi_out=bucket.flows_out[Instrument.UPI],
        closing=bucket.running_balance,
    )


def mode_balances(buckets: Iterable[DayBucket]) -> ModeStats:
    """Net in-minus-out per instrument across the window."""
    net = {i: ZERO for i in Instrument}
    for bucket in buckets:
        for instrument in Instrument:
            net[instrument] += bucket.flows_in[instrument] - bucket.flows_out[instrument]
    return ModeStats(
        cash_balance=net[Instrument.CASH],
        bank_balance=net[Instrument.BANK],
        upi_balance=net[Instrument.UPI],
    )


def build_ledger(
    deposits: Iterable[DepositEntry],
    expenses: Iterable[ExpenseEntry],
    disbursements: Iterable[LoanRecord],
) -> LedgerResult:
    buckets = accumulate_days(tag_transactions(deposits, expenses, disbursements))
    ordered = list(buckets.values())
    newest_first = list(reversed(ordered))
    return LedgerResult(
        daily_ledger=[_ledger_row(b) for b in newest_first],
        cashbook=[_cashbook_row(b) for b in newest_first],
        mode_stats=mode_balances(ordered),
    )
