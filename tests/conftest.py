"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from microlend_gateway.api.main import create_app
from microlend_gateway.infrastructure.database.models import Base
from microlend_gateway.infrastructure.database.session import get_db
from microlend_gateway.domain.models import (
    KycStatus,
    LoanRecord,
    LoanStatus,
    PaymentRecord,
    PaymentStatus,
    UserHistory,
    UserSnapshot,
)

# Fixed evaluation time so account-age tiers are deterministic
AS_OF = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def make_user(
    kyc_status: KycStatus = KycStatus.VERIFIED,
    age_days: int = 30,
    **fields,
) -> UserSnapshot:
    """User snapshot with neutral defaults; account age is relative to AS_OF"""
    return UserSnapshot(
        id=fields.pop("id", "user_1"),
        kyc_status=kyc_status,
        created_at=AS_OF - timedelta(days=age_days),
        **fields,
    )


def make_loans(
    status: LoanStatus, count: int, total_amount: float = 10_000, total_paid: float = 0, **fields
) -> list[LoanRecord]:
    return [
        LoanRecord(
            id=f"{status.value}_{i}",
            status=status,
            amount=total_amount,
            total_amount=total_amount,
            total_paid=total_paid,
            **fields,
        )
        for i in range(count)
    ]


def make_payments(count: int) -> list[PaymentRecord]:
    return [PaymentRecord(id=f"pay_{i}", status=PaymentStatus.COMPLETED, amount=500) for i in range(count)]


@pytest.fixture
def history_factory() -> Callable[..., UserHistory]:
    """Build a UserHistory from a user plus loan and payment lists"""

    def _build(user: UserSnapshot | None = None, loans=None, payments=None) -> UserHistory:
        return UserHistory(
            user=user or make_user(),
            loans=list(loans or []),
            completed_payments=list(payments or []),
        )

    return _build


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def user_factory() -> Callable[..., UserSnapshot]:
    return make_user


@pytest.fixture
def loans_factory() -> Callable[..., list[LoanRecord]]:
    return make_loans


@pytest.fixture
def payments_factory() -> Callable[..., list[PaymentRecord]]:
    return make_payments
