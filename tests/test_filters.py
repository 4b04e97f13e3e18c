from datetime import date

from coopledger.schemas.report import RecordSnapshot, ReportFilter
from coopledger.services.filters import apply_filter, in_window
from coopledger.services.instruments import Instrument, classify_instrument, loan_instrument
from coopledger.services.intake import parse_datetime


def test_classify_instrument_keywords():
    assert classify_instrument("Cash") == Instrument.CASH
    assert classify_instrument("NEFT transfer") == Instrument.BANK
    assert classify_instrument("cheque") == Instrument.BANK
    assert classify_instrument("GPay") == Instrument.UPI
    assert classify_instrument("PhonePe") == Instrument.UPI
    assert classify_instrument("online") == Instrument.UPI


def test_unrecognized_mode_defaults_to_cash():
    assert classify_instrument(None) == Instrument.CASH
    assert classify_instrument("") == Instrument.CASH
    assert classify_instrument("barter") == Instrument.CASH


def test_loan_mode_defaults_to_bank():
    assert loan_instrument(None) == Instrument.BANK
    assert loan_instrument("transfer") == Instrument.BANK
    assert loan_instrument("Cash") == Instrument.CASH
    assert loan_instrument("UPI") == Instrument.UPI


def test_window_end_is_inclusive_to_end_of_day():
    window = ReportFilter(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
    assert in_window(parse_datetime("2024-01-31T23:59:59"), window)
    assert in_window(parse_datetime("2024-01-01T00:00:00"), window)
    assert not in_window(parse_datetime("2024-02-01T00:00:00"), window)
    assert not in_window(parse_datetime("2023-12-31T23:59:59"), window)


def test_undated_entries_are_never_in_window():
    assert not in_window(None, ReportFilter())
    assert not in_window(None, ReportFilter(start_date=date(2024, 1, 1)))


def test_open_filter_accepts_every_dated_entry():
    assert in_window(parse_datetime("1999-05-05"), ReportFilter())


def test_reversed_window_is_empty(deposit):
    snapshot = RecordSnapshot(deposits=(deposit(date="2024-01-05", total_amount=10),))
    filtered = apply_filter(snapshot, ReportFilter(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1)))
    assert filtered.deposits == ()


def test_unparseable_date_is_excluded(deposit):
    snapshot = RecordSnapshot(deposits=(
        deposit(date="garbage", total_amount=10),
        deposit(date="2024-01-05", total_amount=20),
    ))
    filtered = apply_filter(snapshot, ReportFilter())
    assert [e.total_amount for e in filtered.deposits] == [20]


def test_member_filter(deposit, expense, loan, member):
    snapshot = RecordSnapshot(
        deposits=(deposit(member_id="M1", total_amount=1), deposit(member_id="M2", total_amount=2)),
        expenses=(expense(5, member_id="M1"), expense(7)),
        loans=(loan(100, member_id="M1"), loan(200, member_id="M2")),
        members=(member("M1"), member("M2")),
    )
    filtered = apply_filter(snapshot, ReportFilter(member_id="M1"))
    assert [e.member_id for e in filtered.deposits] == ["M1"]
    assert [e.amount for e in filtered.expenses] == [5]
    assert [l.member_id for l in filtered.disbursements] == ["M1"]
    assert [m.id for m in filtered.members] == ["M1"]

    everyone = apply_filter(snapshot, ReportFilter(member_id="ALL"))
    assert len(everyone.deposits) == 2
    assert len(everyone.members) == 2


def test_mode_filter_uses_classified_instrument(deposit, loan):
    snapshot = RecordSnapshot(
        deposits=(
            deposit(payment_mode="GPay", total_amount=1),
            deposit(payment_mode="cash", total_amount=2),
            deposit(payment_mode=None, total_amount=3),
        ),
        loans=(loan(100),),
    )
    upi = apply_filter(snapshot, ReportFilter(transaction_mode="upi"))
    assert [e.total_amount for e in upi.deposits] == [1]
    assert upi.disbursements == ()

    cash = apply_filter(snapshot, ReportFilter(transaction_mode="cash"))
    assert [e.total_amount for e in cash.deposits] == [2, 3]

    bank = apply_filter(snapshot, ReportFilter(transaction_mode="bank"))
    assert len(bank.disbursements) == 1


def test_type_filter(deposit, expense, loan):
    snapshot = RecordSnapshot(
        deposits=(
            deposit(deposit_amount=500, total_amount=500),
            deposit(installment_amount=300, total_amount=300),
        ),
        expenses=(expense(50),),
        loans=(loan(1000),),
    )
    deposits_only = apply_filter(snapshot, ReportFilter(transaction_type="deposit"))
    assert [e.deposit_amount for e in deposits_only.deposits] == [500]
    assert deposits_only.expenses == ()
    assert deposits_only.disbursements == ()

    loans_only = apply_filter(snapshot, ReportFilter(transaction_type="loan"))
    assert [e.installment_amount for e in loans_only.deposits] == [300]
    assert len(loans_only.disbursements) == 1
    assert loans_only.expenses == ()

    expenses_only = apply_filter(snapshot, ReportFilter(transaction_type="expense"))
    assert expenses_only.deposits == ()
    assert len(expenses_only.expenses) == 1
