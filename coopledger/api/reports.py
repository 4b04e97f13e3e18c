from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from coopledger.db.base import get_db
from coopledger.schemas.report import ComputeRequest, ReportBundle, ReportFilter
from coopledger.services.intake import snapshot_from_raw
from coopledger.services.records import RecordFetchError, fetch_snapshot
from coopledger.services.reports import compute
from typing import Literal, Optional
from uuid import UUID
from datetime import date

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("/compute", response_model=ReportBundle)
def compute_report(request: ComputeRequest):
    """Compute the reporting bundle from raw records supplied by the caller."""
    records = request.records
    snapshot = snapshot_from_raw(
        deposits=records.deposits,
        expenses=records.expenses,
        loans=records.loans,
        members=records.members,
        admin_funds=records.admin_funds,
    )
    return compute(snapshot, request.filter, today=request.today)


@router.get("/{client_id}", response_model=ReportBundle)
def get_client_report(
    client_id: str,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    transaction_mode: Literal["all", "cash", "bank", "upi"] = Query("all", alias="transactionMode"),
    transaction_type: Literal["all", "deposit", "loan", "expense"] = Query("all", alias="transactionType"),
    today: Optional[date] = None,
    db: Session = Depends(get_db)
):
    """Compute the reporting bundle for one client from the record store."""
    try:
        client_uuid = UUID(client_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid client ID format")

    try:
        snapshot = fetch_snapshot(db, client_uuid)
    except RecordFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))

    report_filter = ReportFilter(
        start_date=start_date,
        end_date=end_date,
        member_id=member_id,
        transaction_mode=transaction_mode,
        transaction_type=transaction_type,
    )
    return compute(snapshot, report_filter, today=today)
