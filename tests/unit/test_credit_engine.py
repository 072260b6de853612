"""Unit tests for the credit engine facade and its failure policy"""

import pytest
from datetime import date
from prometheus_client import REGISTRY
from microlend_gateway.domain.exceptions import DataUnavailableError, LoanNotFoundError, UserNotFoundError
from microlend_gateway.domain.models import (
    OPEN_LOAN_STATUSES,
    KycStatus,
    LoanRecord,
    LoanStatus,
    PaymentStatus,
    RiskLevel,
    UserHistory,
)
from microlend_gateway.domain.scoring import DEFAULT_CREDIT_SCORE, calculate_credit_score
from microlend_gateway.services.credit_engine import CreditEngine


class InMemoryUsers:
    def __init__(self, *users):
        self.users = {u.id: u for u in users}

    def get_user(self, user_id):
        if user_id not in self.users:
            raise UserNotFoundError(user_id)
        return self.users[user_id]


class InMemoryLoans:
    def __init__(self, loans_by_user=None):
        self.loans_by_user = loans_by_user or {}

    def get_loan(self, loan_id):
        for loans in self.loans_by_user.values():
            for loan in loans:
                if loan.id == loan_id:
                    return loan
        raise LoanNotFoundError(loan_id)

    def list_loans(self, user_id, statuses=None):
        loans = self.loans_by_user.get(user_id, [])
        if statuses is not None:
            loans = [loan for loan in loans if loan.status in set(statuses)]
        return loans

    def count_active_loans(self, user_id):
        return len(self.list_loans(user_id, OPEN_LOAN_STATUSES))


class InMemoryPayments:
    def __init__(self, payments_by_user=None):
        self.payments_by_user = payments_by_user or {}

    def list_payments(self, user_id, status=PaymentStatus.COMPLETED):
        return [p for p in self.payments_by_user.get(user_id, []) if p.status == status]


class Unavailable:
    """Every read fails as if the store timed out"""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise DataUnavailableError("connection reset")

        return _fail


@pytest.fixture
def strong_user(user_factory):
    return user_factory(id="strong", age_days=400, credit_score=780)


@pytest.fixture
def engine(strong_user, user_factory, loans_factory, payments_factory):
    """Engine over a strong borrower (score 770, no income), a pending one and one with an open loan"""
    pending = user_factory(id="pending", kyc_status=KycStatus.PENDING)
    borrowing = user_factory(id="borrowing", credit_score=650, active_loan_count=1)
    return CreditEngine(
        users=InMemoryUsers(strong_user, pending, borrowing),
        loans=InMemoryLoans(
            {
                "strong": loans_factory(LoanStatus.COMPLETED, 10),
                "borrowing": loans_factory(LoanStatus.ACTIVE, 1),
            }
        ),
        payments=InMemoryPayments({"strong": payments_factory(20)}),
    )


def test_engine_score_matches_pure_calculation(engine, strong_user, loans_factory, payments_factory, as_of):
    history = UserHistory(
        user=strong_user,
        loans=loans_factory(LoanStatus.COMPLETED, 10),
        completed_payments=payments_factory(20),
    )
    assert engine.calculate_credit_score("strong", as_of) == calculate_credit_score(history, as_of) == 770


def test_score_falls_back_to_default_for_missing_user(engine, as_of):
    assert engine.calculate_credit_score("nobody", as_of) == DEFAULT_CREDIT_SCORE


def test_score_falls_back_to_default_when_store_unavailable(user_factory, as_of):
    engine = CreditEngine(
        users=InMemoryUsers(user_factory()),
        loans=Unavailable(),
        payments=InMemoryPayments(),
    )
    assert engine.calculate_credit_score("user_1", as_of) == DEFAULT_CREDIT_SCORE


def test_eligibility_for_strong_borrower(engine, as_of):
    result = engine.get_loan_eligibility("strong", as_of)

    assert result.eligible is True
    assert result.credit_score == 770
    assert result.max_amount == 100_000
    assert result.recommended_amount == 70_000
    assert result.interest_rate == 8
    assert result.max_term == 90


def test_eligibility_reasons_through_engine(engine, as_of):
    assert engine.get_loan_eligibility("pending", as_of).reason == "KYC not verified"
    assert engine.get_loan_eligibility("borrowing", as_of).reason == "active loan exists"


@pytest.mark.parametrize("user_id", ["nobody", "strong"])
def test_eligibility_fails_closed(user_id, strong_user, as_of):
    engine = CreditEngine(users=InMemoryUsers(strong_user), loans=Unavailable(), payments=InMemoryPayments())
    result = engine.get_loan_eligibility(user_id, as_of)

    assert result.eligible is False
    assert result.max_amount == 0
    assert result.reason == "system error"


def test_risk_low_for_strong_borrower_small_amount(engine, as_of):
    assessment = engine.assess_risk("strong", 40_000, as_of)

    assert assessment.risk_level == RiskLevel.LOW
    assert assessment.score == 770
    assert assessment.factors.amount_ratio_pct == 40


@pytest.mark.parametrize("user_id", ["pending", "borrowing", "nobody"])
def test_risk_high_when_ineligible_or_unknown(engine, user_id, as_of):
    assessment = engine.assess_risk(user_id, 1_000, as_of)

    assert assessment.risk_level == RiskLevel.HIGH
    assert assessment.score == 0


def test_risk_fails_closed_on_store_error(strong_user, as_of):
    engine = CreditEngine(users=Unavailable(), loans=InMemoryLoans(), payments=InMemoryPayments())
    assessment = engine.assess_risk("strong", 1_000, as_of)

    assert assessment.risk_level == RiskLevel.HIGH
    assert assessment.score == 0


def test_repeated_evaluations_are_identical(engine, as_of):
    assert engine.calculate_credit_score("strong", as_of) == engine.calculate_credit_score("strong", as_of)
    assert engine.get_loan_eligibility("strong", as_of) == engine.get_loan_eligibility("strong", as_of)
    assert engine.assess_risk("strong", 55_000, as_of) == engine.assess_risk("strong", 55_000, as_of)


def test_loan_limit_uses_cached_score(engine):
    assert engine.get_user_loan_limit("strong") == 60_000
    assert engine.get_user_loan_limit("pending") == 5_000
    assert engine.get_user_loan_limit("borrowing") == 6_000  # 10000 -> 5000 -> 6000


def test_loan_limit_zero_when_unknown_or_unavailable(engine):
    assert engine.get_user_loan_limit("nobody") == 0

    broken = CreditEngine(users=Unavailable(), loans=InMemoryLoans(), payments=InMemoryPayments())
    assert broken.get_user_loan_limit("strong") == 0


def test_application_accepted_with_quote(engine):
    check = engine.check_application("strong", 10_000, 30)

    assert check.accepted is True
    assert check.loan_limit == 60_000
    assert check.quote.interest_rate == 15.0
    assert check.quote.total_amount == 11_500


@pytest.mark.parametrize(
    "user_id,amount,reason",
    [
        ("pending", 1_000, "KYC not verified"),
        ("borrowing", 1_000, "active loan exists"),
        ("strong", 60_001, "loan amount exceeds limit of 60000"),
        ("nobody", 1_000, "system error"),
    ],
)
def test_application_rejections(engine, user_id, amount, reason):
    check = engine.check_application(user_id, amount, 30)

    assert check.accepted is False
    assert check.reason == reason
    assert check.quote is None


def test_application_rejects_invalid_term(engine):
    check = engine.check_application("strong", 10_000, 400)

    assert check.accepted is False
    assert check.loan_limit == 60_000
    assert "term" in check.reason


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_risk_assessment_does_not_count_as_eligibility_check(engine, as_of):
    eligible_before = _sample("microlend_eligibility_total", outcome="eligible")
    bucket_before = _sample("microlend_max_amount_bucket_total", bucket="50k+")
    low_before = _sample("microlend_risk_level_total", level="low")

    engine.assess_risk("strong", 40_000, as_of)

    assert _sample("microlend_eligibility_total", outcome="eligible") == eligible_before
    assert _sample("microlend_max_amount_bucket_total", bucket="50k+") == bucket_before
    assert _sample("microlend_risk_level_total", level="low") == low_before + 1


def test_eligibility_check_is_counted(engine, as_of):
    eligible_before = _sample("microlend_eligibility_total", outcome="eligible")

    engine.get_loan_eligibility("strong", as_of)

    assert _sample("microlend_eligibility_total", outcome="eligible") == eligible_before + 1


@pytest.fixture
def loan_engine(loans_factory, strong_user):
    """Engine holding one active loan due 2025-06-30 with a 9,000 balance, and one already extended twice"""
    (due,) = loans_factory(LoanStatus.ACTIVE, 1, total_amount=11_500, total_paid=2_500, due_date=date(2025, 6, 30))
    maxed = LoanRecord(
        id="maxed", status=LoanStatus.ACTIVE, amount=5_000, total_amount=5_750, due_date=date(2025, 7, 14), extension_count=2
    )
    return CreditEngine(
        users=InMemoryUsers(strong_user),
        loans=InMemoryLoans({"strong": [due, maxed]}),
        payments=InMemoryPayments(),
    )


def test_extension_quote(loan_engine):
    quote = loan_engine.quote_extension("active_0")

    assert quote.allowed is True
    assert quote.extension_fee == 450
    assert quote.new_due_date == date(2025, 7, 7)
    assert quote.new_total_amount == 11_950


@pytest.mark.parametrize(
    "loan_id,reason",
    [
        ("maxed", "Maximum number of extensions reached"),
        ("missing", "loan not found"),
    ],
)
def test_extension_refused(loan_engine, loan_id, reason):
    quote = loan_engine.quote_extension(loan_id)

    assert quote.allowed is False
    assert quote.reason == reason
    assert quote.extension_fee is None


def test_extension_fails_closed_on_store_error(strong_user):
    engine = CreditEngine(users=InMemoryUsers(strong_user), loans=Unavailable(), payments=InMemoryPayments())
    quote = engine.quote_extension("active_0")

    assert quote.allowed is False
    assert quote.reason == "system error"
