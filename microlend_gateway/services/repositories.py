"""Read contracts the credit engine depends on"""

from typing import Iterable, List, Optional, Protocol

from microlend_gateway.domain.models import (
    LoanRecord,
    LoanStatus,
    PaymentRecord,
    PaymentStatus,
    UserHistory,
    UserSnapshot,
)


class UserRepository(Protocol):
    def get_user(self, user_id: str) -> UserSnapshot:
        """Raises UserNotFoundError or DataUnavailableError"""
        ...


class LoanRepository(Protocol):
    def get_loan(self, loan_id: str) -> LoanRecord:
        """Raises LoanNotFoundError or DataUnavailableError"""
        ...

    def list_loans(self, user_id: str, statuses: Optional[Iterable[LoanStatus]] = None) -> List[LoanRecord]:
        ...

    def count_active_loans(self, user_id: str) -> int:
        """Loans in approved, disbursed or active status"""
        ...


class PaymentRepository(Protocol):
    def list_payments(self, user_id: str, status: PaymentStatus = PaymentStatus.COMPLETED) -> List[PaymentRecord]:
        ...


def load_user_history(
    user_id: str,
    users: UserRepository,
    loans: LoanRepository,
    payments: PaymentRepository,
) -> UserHistory:
    """Read the user, all loans and completed payments into one snapshot"""
    user = users.get_user(user_id)
    return UserHistory(
        user=user,
        loans=list(loans.list_loans(user_id)),
        completed_payments=list(payments.list_payments(user_id, PaymentStatus.COMPLETED)),
    )
