"""Data access layer: SQL implementations of the credit engine's read contracts"""

from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from microlend_gateway.domain.exceptions import DataUnavailableError, LoanNotFoundError, UserNotFoundError
from microlend_gateway.domain.loan_terms import calculate_due_date
from microlend_gateway.domain.models import (
    OPEN_LOAN_STATUSES,
    KycStatus,
    LoanRecord,
    LoanStatus,
    PaymentRecord,
    PaymentStatus,
    UserSnapshot,
)
from microlend_gateway.infrastructure.database.models import Loan, Payment, User


def _to_user_snapshot(row: User) -> UserSnapshot:
    return UserSnapshot(
        id=row.id,
        kyc_status=KycStatus(row.kyc_status),
        created_at=row.created_at,
        monthly_income=row.monthly_income,
        missed_payments=row.missed_payments or 0,
        referral_count=row.referral_count or 0,
        active_loan_count=row.active_loan_count or 0,
        credit_score=row.credit_score,
        total_loans=row.total_loans or 0,
        defaulted_loans=row.defaulted_loans or 0,
    )


class SqlUserRepository:
    """Repository for borrowers"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserSnapshot:
        try:
            row = self.db.query(User).filter(User.id == user_id).first()
            if row is None:
                raise UserNotFoundError(user_id)
            return _to_user_snapshot(row)
        except (SQLAlchemyError, ValueError) as e:
            raise DataUnavailableError(f"Could not read user {user_id}: {e}") from e

    def update_credit_score(self, user_id: str, score: int) -> None:
        """Persist a cached score; the credit engine itself never writes"""
        try:
            row = self.db.query(User).filter(User.id == user_id).first()
            if row is None:
                raise UserNotFoundError(user_id)
            row.credit_score = score
            self.db.flush()
        except SQLAlchemyError as e:
            raise DataUnavailableError(f"Could not store score for {user_id}: {e}") from e


def _to_loan_record(row: Loan) -> LoanRecord:
    due_date = row.due_date
    if due_date is None and row.disbursed_at is not None:
        due_date = calculate_due_date(row.disbursed_at.date(), row.term_days)
    return LoanRecord(
        id=row.id,
        status=LoanStatus(row.status),
        amount=row.amount,
        total_amount=row.total_amount,
        total_paid=row.total_paid or 0.0,
        due_date=due_date,
        extension_count=row.extension_count or 0,
    )


class SqlLoanRepository:
    """Repository for loans"""

    def __init__(self, db: Session):
        self.db = db

    def get_loan(self, loan_id: str) -> LoanRecord:
        try:
            row = self.db.query(Loan).filter(Loan.id == loan_id).first()
            if row is None:
                raise LoanNotFoundError(loan_id)
            return _to_loan_record(row)
        except (SQLAlchemyError, ValueError) as e:
            raise DataUnavailableError(f"Could not read loan {loan_id}: {e}") from e

    def list_loans(self, user_id: str, statuses: Optional[Iterable[LoanStatus]] = None) -> List[LoanRecord]:
        try:
            query = self.db.query(Loan).filter(Loan.user_id == user_id)
            if statuses is not None:
                query = query.filter(Loan.status.in_([LoanStatus(s).value for s in statuses]))
            return [_to_loan_record(loan) for loan in query.all()]
        except (SQLAlchemyError, ValueError) as e:
            raise DataUnavailableError(f"Could not read loans for {user_id}: {e}") from e

    def count_active_loans(self, user_id: str) -> int:
        try:
            return (
                self.db.query(func.count(Loan.id))
                .filter(Loan.user_id == user_id)
                .filter(Loan.status.in_([s.value for s in OPEN_LOAN_STATUSES]))
                .scalar()
            )
        except SQLAlchemyError as e:
            raise DataUnavailableError(f"Could not count loans for {user_id}: {e}") from e


class SqlPaymentRepository:
    """Repository for repayments"""

    def __init__(self, db: Session):
        self.db = db

    def list_payments(self, user_id: str, status: PaymentStatus = PaymentStatus.COMPLETED) -> List[PaymentRecord]:
        try:
            rows = (
                self.db.query(Payment)
                .filter(Payment.user_id == user_id)
                .filter(Payment.status == PaymentStatus(status).value)
                .all()
            )
            return [
                PaymentRecord(id=p.id, status=PaymentStatus(p.status), amount=p.amount)
                for p in rows
            ]
        except (SQLAlchemyError, ValueError) as e:
            raise DataUnavailableError(f"Could not read payments for {user_id}: {e}") from e
