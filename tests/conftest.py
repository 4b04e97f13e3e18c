from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coopledger.models import Base
from coopledger.services.intake import normalize_deposit, normalize_expense, normalize_loan, normalize_member
from coopledger.services.policy import ReportPolicy

TODAY = date(2024, 6, 30)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def policy():
    return ReportPolicy()


@pytest.fixture
def deposit():
    """Factory for canonical passbook entries."""
    def _make(member_id="M1", date="2024-01-05", payment_mode="cash", **fields):
        raw = {"member_id": member_id, "date": date, "payment_mode": payment_mode}
        raw.update(fields)
        return normalize_deposit(raw)
    return _make


@pytest.fixture
def expense():
    def _make(amount, date="2024-01-10", type="EXPENSE", payment_mode="cash", **fields):
        raw = {"amount": amount, "date": date, "type": type, "payment_mode": payment_mode}
        raw.update(fields)
        return normalize_expense(raw)
    return _make


@pytest.fixture
def loan():
    def _make(amount, member_id="M2", start_date="2024-01-15", **fields):
        raw = {"amount": amount, "member_id": member_id, "start_date": start_date}
        raw.update(fields)
        return normalize_loan(raw)
    return _make


@pytest.fixture
def member():
    def _make(id="M1", name=None, **fields):
        raw = {"id": id, "name": name or f"Member {id}"}
        raw.update(fields)
        return normalize_member(raw)
    return _make


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
