"""Loan eligibility - gates a new loan and derives its limit and terms from the score"""

from microlend_gateway.domain.models import EligibilityResult, UserHistory
from microlend_gateway.domain.scoring import calculate_interest_rate, calculate_max_term
from microlend_gateway.utils.money import round_half_up

MIN_ELIGIBLE_SCORE = 400
INCOME_LIMIT_SHARE = 0.5
RECOMMENDED_SHARE = 0.7


def score_to_base_limit(score: int) -> int:
    """
    Map a credit score to the base loan limit.

    Score bands:
    - 750+: 100,000
    - 700+: 50,000
    - 650+: 25,000
    - 600+: 15,000
    - 550+: 10,000
    - 500+: 7,500
    - below: 5,000
    """
    if score >= 750:
        return 100_000
    elif score >= 700:
        return 50_000
    elif score >= 650:
        return 25_000
    elif score >= 600:
        return 15_000
    elif score >= 550:
        return 10_000
    elif score >= 500:
        return 7_500
    return 5_000


def _declined(reason: str, suggested_action: str | None = None, score: int | None = None) -> EligibilityResult:
    return EligibilityResult(
        eligible=False,
        max_amount=0,
        reason=reason,
        suggested_action=suggested_action,
        credit_score=score,
    )


def evaluate_eligibility(score: int, history: UserHistory) -> EligibilityResult:
    """
    Decide whether the user may take a new loan.

    Checks run in order and the first failure wins:
    1. score below 400
    2. KYC not verified
    3. an approved, disbursed or active loan already exists

    Eligible users get a limit from score_to_base_limit, capped at half the
    declared monthly income.
    """
    user = history.user

    if score < MIN_ELIGIBLE_SCORE:
        return _declined("credit score too low", "complete KYC and build payment history", score)

    if not user.kyc_verified:
        return _declined("KYC not verified", "complete KYC verification", score)

    if history.has_open_loan:
        return _declined("active loan exists", "complete current loan repayment", score)

    limit: float = score_to_base_limit(score)
    if user.has_income:
        limit = min(limit, user.monthly_income * INCOME_LIMIT_SHARE)

    max_amount = round_half_up(limit)
    if max_amount <= 0:
        return _declined("income too low", "update declared monthly income", score)

    return EligibilityResult(
        eligible=True,
        max_amount=max_amount,
        credit_score=score,
        recommended_amount=round_half_up(limit * RECOMMENDED_SHARE),
        interest_rate=calculate_interest_rate(score),
        max_term=calculate_max_term(score),
    )
