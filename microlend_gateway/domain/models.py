"""Domain models - read-only snapshots and the value objects the engine returns"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class KycStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class LoanStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISBURSED = "disbursed"
    ACTIVE = "active"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"


# Loans that block a new application
OPEN_LOAN_STATUSES = frozenset({LoanStatus.APPROVED, LoanStatus.DISBURSED, LoanStatus.ACTIVE})


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class UserSnapshot:
    """Borrower fields as stored by the user service"""

    id: str
    kyc_status: KycStatus
    created_at: datetime
    monthly_income: Optional[float] = None
    missed_payments: int = 0
    referral_count: int = 0
    active_loan_count: int = 0
    credit_score: int = 500  # cached, written by the user service
    total_loans: int = 0
    defaulted_loans: int = 0

    @property
    def kyc_verified(self) -> bool:
        return self.kyc_status == KycStatus.VERIFIED

    @property
    def has_income(self) -> bool:
        # Zero income is treated the same as no declared income
        return bool(self.monthly_income) and self.monthly_income > 0


@dataclass(frozen=True)
class LoanRecord:
    """Loan as seen by the scoring engine"""

    id: str
    status: LoanStatus
    amount: float
    total_amount: float
    total_paid: float = 0.0
    due_date: Optional[date] = None
    extension_count: int = 0

    @property
    def outstanding(self) -> float:
        return self.total_amount - self.total_paid


@dataclass(frozen=True)
class PaymentRecord:
    """Repayment made against a loan"""

    id: str
    status: PaymentStatus
    amount: float


@dataclass(frozen=True)
class UserHistory:
    """
    Everything one evaluation needs, read once.

    Each public engine call builds exactly one of these, so every step of an
    evaluation sees the same user, loans and payments.
    """

    user: UserSnapshot
    loans: List[LoanRecord] = field(default_factory=list)
    completed_payments: List[PaymentRecord] = field(default_factory=list)

    def loans_with_status(self, *statuses: LoanStatus) -> List[LoanRecord]:
        return [loan for loan in self.loans if loan.status in statuses]

    @property
    def has_open_loan(self) -> bool:
        return any(loan.status in OPEN_LOAN_STATUSES for loan in self.loans)


@dataclass(frozen=True)
class EligibilityResult:
    """Whether a user may take a new loan, and on which terms"""

    eligible: bool
    max_amount: int
    reason: Optional[str] = None
    suggested_action: Optional[str] = None
    credit_score: Optional[int] = None
    recommended_amount: Optional[int] = None
    interest_rate: Optional[int] = None
    max_term: Optional[int] = None


@dataclass(frozen=True)
class RiskFactors:
    """Inputs behind a risk tier, kept for observability"""

    credit_score: int
    amount_ratio_pct: int
    max_amount: int


@dataclass(frozen=True)
class RiskAssessment:
    """Risk tier for a proposed loan amount"""

    risk_level: RiskLevel
    score: int
    factors: Optional[RiskFactors] = None


@dataclass(frozen=True)
class LoanQuote:
    """Flat-interest pricing of a loan application"""

    amount: float
    interest_rate: float
    term_days: int
    interest: float
    total_amount: float
    daily_amount: float


@dataclass(frozen=True)
class ApplicationCheck:
    """Outcome of the application-time gates"""

    accepted: bool
    loan_limit: int
    reason: Optional[str] = None
    quote: Optional[LoanQuote] = None


@dataclass(frozen=True)
class ExtensionQuote:
    """Fee and new due date for pushing back a loan's due date"""

    loan_id: str
    allowed: bool
    reason: Optional[str] = None
    extension_fee: Optional[int] = None
    previous_due_date: Optional[date] = None
    new_due_date: Optional[date] = None
    new_total_amount: Optional[float] = None
    extensions_used: int = 0
