from datetime import date
from decimal import Decimal

from coopledger.services.ledger import build_ledger


def test_single_cash_deposit(deposit):
    result = build_ledger([deposit(deposit_amount=500, total_amount=500)], [], [])
    [day] = result.daily_ledger
    assert day.date == date(2024, 1, 5)
    assert day.deposit == 500
    assert day.cash_in == 500
    assert day.total_in == 500
    assert day.running_balance == 500
    [book] = result.cashbook
    assert book.cash_in == 500
    assert book.closing == 500


def test_same_day_transactions_share_one_bucket(deposit, expense):
    result = build_ledger(
        [
            deposit(date="2024-01-05T09:00:00", deposit_amount=500, interest_amount=20, total_amount=520),
            deposit(date="2024-01-05T15:00:00", installment_amount=1000, fine_amount=10, total_amount=1010, payment_mode="UPI"),
        ],
        [expense(100, date="2024-01-05T12:00:00", payment_mode="bank")],
        [],
    )
    [day] = result.daily_ledger
    assert day.deposit == 500
    assert day.emi == 1000
    assert day.interest == 20
    assert day.fine == 10
    assert day.cash_in == 520
    assert day.upi_in == 1010
    assert day.bank_out == 100
    assert day.total_out == 100
    assert day.net_flow == 1430
    assert day.running_balance == 1430


def test_running_balance_carries_across_days_newest_first(deposit, expense, loan):
    result = build_ledger(
        [
            deposit(date="2024-01-05", total_amount=1000),
            deposit(date="2024-01-20", total_amount=700),
        ],
        [expense(300, date="2024-01-10")],
        [loan(900, member_id="M2", start_date="2024-01-15")],
    )
    dates = [d.date for d in result.daily_ledger]
    assert dates == [date(2024, 1, 20), date(2024, 1, 15), date(2024, 1, 10), date(2024, 1, 5)]
    assert [d.running_balance for d in result.daily_ledger] == [500, -200, 700, 1000]
    assert [c.closing for c in result.cashbook] == [500, -200, 700, 1000]


def test_loan_disbursement_defaults_to_bank(loan):
    result = build_ledger([], [], [loan(2500), loan(100, payment_mode="cash", start_date="2024-01-16")])
    newest, oldest = result.daily_ledger
    assert oldest.loan_out == 2500
    assert oldest.bank_out == 2500
    assert oldest.cash_out == 0
    assert newest.cash_out == 100


def test_expense_with_unknown_mode_defaults_to_cash(expense):
    result = build_ledger([], [expense(40, payment_mode="voucher")], [])
    assert result.daily_ledger[0].cash_out == 40


def test_income_typed_expense_entries_are_inflows(expense):
    result = build_ledger([], [expense(75, type="INCOME")], [])
    [day] = result.daily_ledger
    assert day.cash_in == 75
    assert day.total_out == 0
    assert day.running_balance == 75


def test_total_amount_is_used_not_the_sum_of_parts(deposit):
    result = build_ledger([deposit(deposit_amount=500, interest_amount=50, total_amount=400)], [], [])
    [day] = result.daily_ledger
    assert day.deposit == 500
    assert day.interest == 50
    assert day.total_in == 400
    assert day.running_balance == 400


def test_undated_records_are_skipped(deposit):
    result = build_ledger([deposit(date=None, total_amount=100)], [], [])
    assert result.daily_ledger == []
    assert result.cashbook == []


def test_mode_stats_match_net_flow(deposit, expense, loan):
    result = build_ledger(
        [
            deposit(total_amount=1000, payment_mode="cash"),
            deposit(total_amount=400, payment_mode="NEFT"),
            deposit(total_amount=250, payment_mode="upi"),
        ],
        [expense(150, payment_mode="gpay")],
        [loan(600)],
    )
    stats = result.mode_stats
    assert stats.cash_balance == 1000
    assert stats.bank_balance == -200
    assert stats.upi_balance == 100
    total = stats.cash_balance + stats.bank_balance + stats.upi_balance
    assert total == result.daily_ledger[0].running_balance == Decimal("900")
