"""Normalization of raw store records into canonical report inputs.

The hosted store has grown several spellings for the same field over time
(``date`` vs ``created_at``, ``payment_mode`` vs ``mode``, snake_case vs
camelCase). Every such fallback is resolved here and nowhere else, so the
report builders only ever see the canonical types from
``coopledger.schemas.report``.

Bad values never raise: numbers coerce to zero and unparseable dates become
``None`` (which keeps the record out of any date window).
"""
import enum
import logging
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from dateutil.parser import isoparse

from coopledger.schemas.report import (
    AdminFundEntry,
    DepositEntry,
    ExpenseEntry,
    LoanRecord,
    MemberRecord,
    RecordSnapshot,
    ZERO,
)

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}

# Stored amounts are Numeric(12, 2)
MAX_AMOUNT = Decimal("1e10")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored amount to Decimal; missing or garbage values become 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            logger.debug(f"Coercing non-numeric amount {value!r} to 0")
            return ZERO
    if not result.is_finite():
        return ZERO
    if abs(result) >= MAX_AMOUNT:
        logger.debug(f"Coercing out-of-range amount {value!r} to 0")
        return ZERO
    return result


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp into a naive UTC datetime, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable date {value!r}; record will fall outside every window")
            return None
    else:
        logger.debug(f"Unsupported date value {value!r} ({type(value).__name__})")
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def _as_mapping(raw: Any) -> Mapping:
    if isinstance(raw, Mapping):
        return raw
    table = getattr(raw, "__table__", None)
    if table is not None:
        # SQLAlchemy row object
        return {column.key: getattr(raw, column.key) for column in table.columns}
    return vars(raw)


def _pick(data: Mapping, *keys: str) -> Any:
    """Return the first present, non-empty value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    return str(value).strip() or None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    return False


def _upper(value: Any) -> Optional[str]:
    text = _as_str(value)
    return text.upper() if text else None


def _lower(value: Any) -> Optional[str]:
    text = _as_str(value)
    return text.lower() if text else None


def normalize_deposit(raw: Any) -> DepositEntry:
    data = _as_mapping(raw)
    return DepositEntry(
        id=_as_str(_pick(data, "id")),
        member_id=_as_str(_pick(data, "member_id", "memberId")),
        member_name=_as_str(_pick(data, "member_name", "memberName")),
        occurred_at=parse_datetime(_pick(data, "date", "transaction_date", "transactionDate", "created_at", "createdAt")),
        deposit_amount=to_decimal(_pick(data, "deposit_amount", "depositAmount")),
        installment_amount=to_decimal(_pick(data, "installment_amount", "installmentAmount")),
        interest_amount=to_decimal(_pick(data, "interest_amount", "interestAmount")),
        fine_amount=to_decimal(_pick(data, "fine_amount", "fineAmount")),
        total_amount=to_decimal(_pick(data, "total_amount", "totalAmount", "amount")),
        payment_mode=_as_str(_pick(data, "payment_mode", "paymentMode", "mode", "category")),
        note=_as_str(_pick(data, "note", "description")),
    )


def normalize_expense(raw: Any) -> ExpenseEntry:
    data = _as_mapping(raw)
    return ExpenseEntry(
        id=_as_str(_pick(data, "id")),
        member_id=_as_str(_pick(data, "member_id", "memberId")),
        occurred_at=parse_datetime(_pick(data, "date", "created_at", "createdAt")),
        amount=to_decimal(_pick(data, "amount")),
        entry_type=_upper(_pick(data, "type", "entry_type", "entryType")),
        payment_mode=_as_str(_pick(data, "payment_mode", "paymentMode", "mode", "category")),
        description=_as_str(_pick(data, "description", "note")),
    )


def normalize_loan(raw: Any) -> LoanRecord:
    data = _as_mapping(raw)
    return LoanRecord(
        id=_as_str(_pick(data, "id")),
        member_id=_as_str(_pick(data, "member_id", "memberId")),
        amount=to_decimal(_pick(data, "amount")),
        started_at=parse_datetime(_pick(data, "start_date", "startDate", "created_at", "createdAt")),
        stored_status=_lower(_pick(data, "status")),
        stored_balance=to_decimal(_pick(data, "remaining_balance", "remainingBalance")),
        payment_mode=_as_str(_pick(data, "payment_mode", "paymentMode", "mode")),
    )


def normalize_member(raw: Any) -> MemberRecord:
    data = _as_mapping(raw)
    return MemberRecord(
        id=_as_str(_pick(data, "id")) or "",
        name=_as_str(_pick(data, "name", "member_name", "memberName")),
        phone=_as_str(_pick(data, "phone")),
        join_date=parse_date(_pick(data, "join_date", "joinDate", "created_at", "createdAt")),
        status=_lower(_pick(data, "status")) or "active",
        is_override=_as_bool(_pick(data, "maturity_is_override", "isOverride", "is_override")),
        manual_amount=to_decimal(_pick(data, "maturity_manual_amount", "manualAmount", "manual_amount")),
    )


def normalize_admin_fund(raw: Any) -> AdminFundEntry:
    data = _as_mapping(raw)
    return AdminFundEntry(
        id=_as_str(_pick(data, "id")),
        occurred_at=parse_datetime(_pick(data, "date", "created_at", "createdAt")),
        amount=to_decimal(_pick(data, "amount")),
        entry_type=_upper(_pick(data, "type")),
        description=_as_str(_pick(data, "description", "note")),
    )


def snapshot_from_raw(
    deposits: Iterable[Any] = (),
    expenses: Iterable[Any] = (),
    loans: Iterable[Any] = (),
    members: Iterable[Any] = (),
    admin_funds: Iterable[Any] = (),
) -> RecordSnapshot:
    """Normalize raw record collections into one immutable snapshot."""
    return RecordSnapshot(
        deposits=tuple(normalize_deposit(r) for r in deposits),
        expenses=tuple(normalize_expense(r) for r in expenses),
        loans=tuple(normalize_loan(r) for r in loans),
        members=tuple(normalize_member(r) for r in members),
        admin_funds=tuple(normalize_admin_fund(r) for r in admin_funds),
    )
