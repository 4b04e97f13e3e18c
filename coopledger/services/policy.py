from dataclasses import dataclass
from decimal import Decimal
import enum

from coopledger.core.config import settings


class InstallmentAllocation(str, enum.Enum):
    """How a member's installment payments are applied to their loans.

    POOLED: every loan of the member is reduced by the member's whole
        installment total (the stored-data semantics; no loan is preferred).
    OLDEST_FIRST: the installment total pays off loans in start-date order.
    """
    POOLED = "pooled"
    OLDEST_FIRST = "oldest_first"


@dataclass(frozen=True)
class ReportPolicy:
    """Numeric rules the reporting engine applies."""
    tenure_months: int = 36
    maturity_interest_rate: Decimal = Decimal("0.12")
    overdue_threshold_days: int = 30
    critical_threshold_days: int = 90
    loan_monthly_interest_rate: Decimal = Decimal("0.01")
    installment_allocation: InstallmentAllocation = InstallmentAllocation.POOLED

    @classmethod
    def from_settings(cls) -> "ReportPolicy":
        """Build the policy from application settings."""
        return cls(
            tenure_months=settings.MATURITY_TENURE_MONTHS,
            maturity_interest_rate=Decimal(str(settings.MATURITY_INTEREST_RATE)),
            overdue_threshold_days=settings.OVERDUE_THRESHOLD_DAYS,
            critical_threshold_days=settings.CRITICAL_THRESHOLD_DAYS,
            loan_monthly_interest_rate=Decimal(str(settings.LOAN_MONTHLY_INTEREST_RATE)),
            installment_allocation=InstallmentAllocation(settings.INSTALLMENT_ALLOCATION.lower()),
        )
