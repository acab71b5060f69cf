"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from loan_ledger.api.main import create_app
from loan_ledger.api.dependencies import get_as_of
from loan_ledger.infrastructure.database.models import Base
from loan_ledger.infrastructure.database.session import get_db


# Test database: one shared in-memory connection
TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# "Day 0" for loan scenarios
ORIGIN = datetime(2024, 1, 1, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    """Instant n whole days after ORIGIN"""
    return ORIGIN + timedelta(days=n)


@pytest.fixture
def as_of() -> datetime:
    """Pinned evaluation instant for API reads (day 40)"""
    return day(40)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, as_of: datetime) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_as_of] = lambda: as_of
    return TestClient(app)


@pytest.fixture
def sample_loan() -> Dict[str, Any]:
    """10000 at 12% from day 0, one payment of 500 on day 40"""
    return {
        "loanId": "loan_1",
        "name": "Sita Sharma",
        "date": ORIGIN.isoformat(),
        "duration": 12,
        "interestRate": 12,
        "type": "gold",
        "jewelleryName": "Necklace",
        "serialNumber": "SN-001",
        "phone": "9800000000",
        "address": "Kathmandu",
        "amountGiven": 10000,
        "partialRepayments": [
            {"amount": 500, "date": day(40).isoformat(), "daysSinceLoan": 40},
        ],
    }


@pytest.fixture
def sample_deposit() -> Dict[str, Any]:
    """Deposit account with a deposit of 100 and a withdrawal of 30"""
    return {
        "depositId": "dep_1",
        "name": "Ram Thapa",
        "address": "Pokhara",
        "phone": "9811111111",
        "interestRate": 6,
        "transactions": [
            {"type": "Deposit", "amount": 100, "dateNepali": "2080-09-16", "dateAD": day(0).isoformat()},
            {"type": "Withdrawal", "amount": 30, "dateNepali": "2080-09-26", "dateAD": day(10).isoformat()},
        ],
    }
