import logging
from datetime import date
from typing import Optional

from coopledger.schemas.report import RecordSnapshot, ReportBundle, ReportFilter
from coopledger.services.defaulters import build_defaulters
from coopledger.services.filters import apply_filter, visible_loans
from coopledger.services.ledger import build_ledger
from coopledger.services.loans import outstanding_by_member, recompute_loans
from coopledger.services.maturity import build_maturity
from coopledger.services.member import build_member_reports
from coopledger.services.passbook import build_admin_fund, build_passbook
from coopledger.services.policy import ReportPolicy
from coopledger.services.summary import build_summary

logger = logging.getLogger(__name__)


def compute(
    records: RecordSnapshot,
    report_filter: Optional[ReportFilter] = None,
    today: Optional[date] = None,
    policy: Optional[ReportPolicy] = None,
) -> ReportBundle:
    """
    Build the complete reporting bundle for one tenant snapshot.

    Pure and synchronous: the same snapshot, filter, ``today`` and policy
    always give the same bundle. Window-scoped figures (summary, ledger,
    cashbook, passbook) use the filtered streams; loan balances, member
    statements and maturity always use the full history.
    """
    report_filter = report_filter or ReportFilter()
    today = today or date.today()
    policy = policy or ReportPolicy.from_settings()

    logger.info(
        f"Computing report: {len(records.deposits)} passbook entries, {len(records.expenses)} expenses, "
        f"{len(records.loans)} loans, {len(records.members)} members, "
        f"window {report_filter.start_date or '-'}..{report_filter.end_date or '-'}"
    )

    filtered = apply_filter(records, report_filter)

    # Balances are rederived over every loan and the whole passbook
    all_views = recompute_loans(
        records.loans,
        records.deposits,
        allocation=policy.installment_allocation,
        monthly_interest_rate=policy.loan_monthly_interest_rate,
    )
    view_for = dict(zip(map(id, records.loans), all_views))
    member_loans = [view_for[id(loan)] for loan in visible_loans(records, report_filter)]
    issued_loans = [view_for[id(loan)] for loan in filtered.disbursements]
    outstanding = outstanding_by_member(all_views)

    maturity = build_maturity(filtered.members, records.deposits, outstanding, policy, today)
    ledger = build_ledger(filtered.deposits, filtered.expenses, filtered.disbursements)

    bundle = ReportBundle(
        summary=build_summary(filtered, issued_loans, maturity),
        daily_ledger=ledger.daily_ledger,
        cashbook=ledger.cashbook,
        mode_stats=ledger.mode_stats,
        loans=member_loans,
        member_reports=build_member_reports(filtered.members, records.deposits, all_views),
        maturity=maturity,
        defaulters=build_defaulters(member_loans, records.members, policy, today),
        passbook=build_passbook(filtered.deposits),
        admin_fund=build_admin_fund(filtered.admin_funds),
    )
    logger.debug(
        f"Report ready: {len(bundle.daily_ledger)} ledger days, "
        f"{len(bundle.defaulters)} defaulters, net profit {bundle.summary.net_profit}"
    )
    return bundle
