import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coopledger.models.member import Member
from coopledger.models.transaction import AdminFundLedgerEntry, ExpenseLedgerEntry, Loan, PassbookEntry
from coopledger.schemas.report import RecordSnapshot
from coopledger.services.intake import snapshot_from_raw

logger = logging.getLogger(__name__)


class RecordFetchError(Exception):
    """Raised when the record store cannot return a tenant snapshot."""
    pass


def fetch_snapshot(db: Session, client_id: UUID) -> RecordSnapshot:
    """Read every record collection for one client and normalize it."""
    try:
        members = db.query(Member).filter(Member.client_id == client_id).all()
        loans = db.query(Loan).filter(Loan.client_id == client_id).all()
        passbook = db.query(PassbookEntry).filter(
            PassbookEntry.client_id == client_id
        ).order_by(PassbookEntry.date.asc()).all()
        expenses = db.query(ExpenseLedgerEntry).filter(ExpenseLedgerEntry.client_id == client_id).all()
        admin_funds = db.query(AdminFundLedgerEntry).filter(AdminFundLedgerEntry.client_id == client_id).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch records for client {client_id}: {e}")
        raise RecordFetchError(f"Could not load records for client {client_id}") from e

    logger.info(
        f"Fetched client {client_id}: {len(members)} members, {len(loans)} loans, "
        f"{len(passbook)} passbook entries, {len(expenses)} expenses, {len(admin_funds)} admin fund entries"
    )
    return snapshot_from_raw(
        deposits=passbook,
        expenses=expenses,
        loans=loans,
        members=members,
        admin_funds=admin_funds,
    )
