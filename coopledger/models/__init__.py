from coopledger.db.base import Base

# Import all models so metadata.create_all can see them
from coopledger.models.member import Member, MemberStatus
from coopledger.models.transaction import (
    PassbookEntry,
    ExpenseLedgerEntry,
    ExpenseType,
    Loan,
    LoanStatus,
    AdminFundLedgerEntry,
)

__all__ = [
    "Base",
    "Member",
    "MemberStatus",
    "PassbookEntry",
    "ExpenseLedgerEntry",
    "ExpenseType",
    "Loan",
    "LoanStatus",
    "AdminFundLedgerEntry",
]
