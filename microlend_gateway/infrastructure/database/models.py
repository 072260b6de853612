"""SQLAlchemy ORM models for the borrower, loan and payment tables"""

import uuid
from sqlalchemy import Column, String, Float, Date, DateTime, Integer, ForeignKey, Text, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Borrower with KYC and cached credit fields"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    phone = Column(Text, nullable=True)
    kyc_status = Column(Text, nullable=False, default="pending")  # pending | verified | rejected
    monthly_income = Column(Float, nullable=True)
    missed_payments = Column(Integer, nullable=False, default=0)
    referral_count = Column(Integer, nullable=False, default=0)
    credit_score = Column(Integer, nullable=False, default=500)
    total_loans = Column(Integer, nullable=False, default=0)
    active_loan_count = Column(Integer, nullable=False, default=0)
    defaulted_loans = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loans = relationship("Loan", back_populates="user", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="user", cascade="all, delete-orphan")


class Loan(Base):
    """Loan application through to completion or default"""

    __tablename__ = "loans"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False, default=15.0)
    term_days = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    total_paid = Column(Float, nullable=False, default=0.0)
    status = Column(Text, nullable=False, default="pending")
    credit_score_at_application = Column(Integer, nullable=True)
    risk_level = Column(Text, nullable=True)
    disbursed_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(Date, nullable=True)
    extension_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="loans")

    __table_args__ = (Index("ix_loans_user_status", "user_id", "status"),)


class Payment(Base):
    """Repayment attempt against a loan"""

    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    loan_id = Column(String(36), ForeignKey("loans.id", ondelete="CASCADE"), nullable=True)
    amount = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="payments")

    __table_args__ = (Index("ix_payments_user_status", "user_id", "status"),)
