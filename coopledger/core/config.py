from pydantic_settings import BaseSettings
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # Database (hosted record store, read-only for reporting)
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'coopledger.db'}"

    # Maturity scheme
    MATURITY_TENURE_MONTHS: int = 36
    MATURITY_INTEREST_RATE: float = 0.12

    # Defaulter thresholds (loan age in days)
    OVERDUE_THRESHOLD_DAYS: int = 30
    CRITICAL_THRESHOLD_DAYS: int = 90

    # Loan portfolio
    LOAN_MONTHLY_INTEREST_RATE: float = 0.01
    INSTALLMENT_ALLOCATION: str = "pooled"  # pooled | oldest_first

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = BASE_DIR / ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
