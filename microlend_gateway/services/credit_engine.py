"""Credit engine - reads one history snapshot per call and runs the scoring rules over it"""

import logging
import time
from datetime import datetime

from microlend_gateway.domain.eligibility import evaluate_eligibility
from microlend_gateway.domain.exceptions import ExtensionLimitError, LoanNotFoundError
from microlend_gateway.domain.loan_limit import calculate_loan_limit
from microlend_gateway.domain.loan_terms import quote_extension, quote_loan
from microlend_gateway.domain.models import ApplicationCheck, EligibilityResult, ExtensionQuote, RiskAssessment
from microlend_gateway.domain.risk import HIGH_RISK_DEFAULT, classify_risk
from microlend_gateway.domain.scoring import DEFAULT_CREDIT_SCORE, calculate_credit_score
from microlend_gateway.infrastructure.observability.logging import log_eligibility, log_risk_assessment
from microlend_gateway.infrastructure.observability.metrics import (
    credit_score_fallback_counter,
    credit_score_histogram,
    engine_error_counter,
    record_eligibility,
    record_risk_level,
)
from microlend_gateway.services.repositories import (
    LoanRepository,
    PaymentRepository,
    UserRepository,
    load_user_history,
)

SYSTEM_ERROR = "system error"


class CreditEngine:
    """
    Entry point for scoring, eligibility, risk, limit and extension checks.

    Failure policy differs per operation:
    - calculate_credit_score fails open to the default score (500)
    - eligibility, risk, loan limit, application and extension checks fail closed
      (ineligible / high risk / zero limit / rejected / not allowed)

    No public method raises; callers inspect the returned result.
    """

    def __init__(
        self,
        users: UserRepository,
        loans: LoanRepository,
        payments: PaymentRepository,
        default_interest_rate: float = 15.0,
    ):
        self.users = users
        self.loans = loans
        self.payments = payments
        self.default_interest_rate = default_interest_rate

    def _swallow(self, operation: str, error: Exception, **context) -> None:
        engine_error_counter.labels(operation=operation).inc()
        logging.error(
            f"Credit engine {operation} failed: {error}",
            extra={**context, "operation": operation, "error_type": type(error).__name__},
        )

    def calculate_credit_score(self, user_id: str, as_of: datetime | None = None) -> int:
        try:
            history = load_user_history(user_id, self.users, self.loans, self.payments)
            score = calculate_credit_score(history, as_of)
        except Exception as e:
            self._swallow("credit_score", e, user_id=user_id)
            credit_score_fallback_counter.inc()
            return DEFAULT_CREDIT_SCORE

        credit_score_histogram.observe(score)
        return score

    def _eligibility(self, user_id: str, as_of: datetime | None, operation: str) -> EligibilityResult:
        try:
            history = load_user_history(user_id, self.users, self.loans, self.payments)
            score = calculate_credit_score(history, as_of)
            return evaluate_eligibility(score, history)
        except Exception as e:
            self._swallow(operation, e, user_id=user_id)
            return EligibilityResult(eligible=False, max_amount=0, reason=SYSTEM_ERROR)

    def get_loan_eligibility(self, user_id: str, as_of: datetime | None = None) -> EligibilityResult:
        start_time = time.time()
        result = self._eligibility(user_id, as_of, "eligibility")

        duration_ms = (time.time() - start_time) * 1000
        record_eligibility(result.eligible, result.max_amount)
        log_eligibility(user_id, result.eligible, result.max_amount, result.credit_score, result.reason, duration_ms)
        return result

    def assess_risk(self, user_id: str, loan_amount: float, as_of: datetime | None = None) -> RiskAssessment:
        """Tier a proposed amount; only risk metrics are recorded, not eligibility ones"""
        try:
            eligibility = self._eligibility(user_id, as_of, "risk")
            assessment = classify_risk(eligibility, loan_amount)
        except Exception as e:
            self._swallow("risk", e, user_id=user_id)
            assessment = HIGH_RISK_DEFAULT

        record_risk_level(assessment.risk_level.value)
        log_risk_assessment(user_id, loan_amount, assessment.risk_level.value, assessment.score)
        return assessment

    def get_user_loan_limit(self, user_id: str) -> int:
        """Application-time ceiling from the cached score; 0 if the user is unknown"""
        try:
            return calculate_loan_limit(self.users.get_user(user_id))
        except Exception as e:
            self._swallow("loan_limit", e, user_id=user_id)
            return 0

    def check_application(self, user_id: str, amount: float, term_days: int) -> ApplicationCheck:
        """
        Gates applied when a loan application is submitted.

        Order: KYC verified, no open loan, amount within the loan limit.
        Accepted applications carry a quote at the default interest rate.
        """
        try:
            user = self.users.get_user(user_id)
            loan_limit = calculate_loan_limit(user)

            if not user.kyc_verified:
                return ApplicationCheck(accepted=False, loan_limit=loan_limit, reason="KYC not verified")

            if self.loans.count_active_loans(user_id) > 0:
                return ApplicationCheck(accepted=False, loan_limit=loan_limit, reason="active loan exists")

            if amount > loan_limit:
                return ApplicationCheck(
                    accepted=False,
                    loan_limit=loan_limit,
                    reason=f"loan amount exceeds limit of {loan_limit}",
                )
        except Exception as e:
            self._swallow("application_check", e, user_id=user_id)
            return ApplicationCheck(accepted=False, loan_limit=0, reason=SYSTEM_ERROR)

        try:
            quote = quote_loan(amount, self.default_interest_rate, term_days)
        except ValueError as e:
            return ApplicationCheck(accepted=False, loan_limit=loan_limit, reason=str(e))

        return ApplicationCheck(accepted=True, loan_limit=loan_limit, quote=quote)

    def quote_extension(self, loan_id: str, extension_days: int | None = None) -> ExtensionQuote:
        """
        Price a due-date extension for an active loan without storing it.

        Refused (allowed=False with a reason) for unknown or inactive loans
        and once the loan has used its two extensions.
        """
        try:
            quote = quote_extension(self.loans.get_loan(loan_id), extension_days)
        except LoanNotFoundError:
            return ExtensionQuote(loan_id=loan_id, allowed=False, reason="loan not found")
        except (ExtensionLimitError, ValueError) as e:
            return ExtensionQuote(loan_id=loan_id, allowed=False, reason=str(e))
        except Exception as e:
            self._swallow("extension_quote", e, loan_id=loan_id)
            return ExtensionQuote(loan_id=loan_id, allowed=False, reason=SYSTEM_ERROR)

        logging.info(
            "Extension quoted",
            extra={"loan_id": loan_id, "extension_fee": quote.extension_fee, "extensions_used": quote.extensions_used},
        )
        return quote
