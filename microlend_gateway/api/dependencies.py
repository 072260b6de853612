"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from microlend_gateway.config import settings
from microlend_gateway.infrastructure.database.repositories import (
    SqlLoanRepository,
    SqlPaymentRepository,
    SqlUserRepository,
)
from microlend_gateway.infrastructure.database.session import get_db
from microlend_gateway.services.credit_engine import CreditEngine


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_repository(db: Session = Depends(get_db)) -> SqlUserRepository:
    return SqlUserRepository(db)


def get_credit_engine(db: Session = Depends(get_db)) -> CreditEngine:
    """Provide a credit engine whose repositories share the request's session"""
    return CreditEngine(
        users=SqlUserRepository(db),
        loans=SqlLoanRepository(db),
        payments=SqlPaymentRepository(db),
        default_interest_rate=settings.default_interest_rate,
    )
