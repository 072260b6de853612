"""Credit scoring engine - turns a borrower's history into a bounded score"""

from datetime import datetime
from typing import List, Tuple

from microlend_gateway.domain.models import LoanStatus, UserHistory, UserSnapshot
from microlend_gateway.utils.date_utils import days_between, utcnow

MIN_SCORE = 300
MAX_SCORE = 850
BASE_SCORE = 500
# Returned by the engine when the history cannot be read
DEFAULT_CREDIT_SCORE = 500

# (minimum monthly income, points), highest first
INCOME_TIERS: List[Tuple[float, int]] = [
    (100_000, 60),
    (50_000, 40),
    (20_000, 20),
    (10_000, 10),
]

# (account older than N days, points), highest first
ACCOUNT_AGE_TIERS: List[Tuple[int, int]] = [
    (365, 30),
    (180, 20),
    (90, 10),
]

# (debt-to-income ratio strictly below, points), lowest first
DEBT_RATIO_TIERS: List[Tuple[float, int]] = [
    (0.3, 30),
    (0.5, 15),
    (0.7, 5),
]
HIGH_DEBT_PENALTY = -20


def clamp_score(score: float) -> int:
    return int(round(min(max(score, MIN_SCORE), MAX_SCORE)))


def income_points(monthly_income: float | None) -> int:
    if not monthly_income:
        return 0
    for threshold, points in INCOME_TIERS:
        if monthly_income >= threshold:
            return points
    return 0


def account_age_points(created_at: datetime, as_of: datetime) -> int:
    age_days = days_between(created_at, as_of)
    for threshold, points in ACCOUNT_AGE_TIERS:
        if age_days > threshold:
            return points
    return 0


def debt_to_income_points(history: UserHistory) -> int:
    """
    Points for current outstanding debt relative to monthly income.

    Only scored when the user declares an income and has at least one loan
    in `active` status; otherwise contributes nothing.
    """
    user = history.user
    active_loans = history.loans_with_status(LoanStatus.ACTIVE)
    if not user.has_income or not active_loans:
        return 0

    outstanding = sum(loan.outstanding for loan in active_loans)
    ratio = outstanding / user.monthly_income

    for ceiling, points in DEBT_RATIO_TIERS:
        if ratio < ceiling:
            return points
    return HIGH_DEBT_PENALTY


def calculate_credit_score(history: UserHistory, as_of: datetime | None = None) -> int:
    """
    Calculate the full credit score from a user's history.

    Additive point system on a base of 500:
    - KYC verified: +50
    - Income tier: +60 / +40 / +20 / +10
    - Completed loans: +15 each
    - Completed payments: +2 each, at most +40
    - Defaulted loans: -100 each
    - Missed payments: -10 each
    - Account age: +30 (>365d) / +20 (>180d) / +10 (>90d)
    - Referrals: +5 each, at most +25
    - Debt-to-income: +30 / +15 / +5 / -20

    Result is clamped to [300, 850].
    """
    user = history.user
    as_of = as_of or utcnow()

    score = BASE_SCORE

    if user.kyc_verified:
        score += 50

    score += income_points(user.monthly_income)

    score += len(history.loans_with_status(LoanStatus.COMPLETED)) * 15
    score += min(len(history.completed_payments) * 2, 40)

    score -= len(history.loans_with_status(LoanStatus.DEFAULTED)) * 100
    score -= user.missed_payments * 10

    score += account_age_points(user.created_at, as_of)
    score += min(user.referral_count * 5, 25)
    score += debt_to_income_points(history)

    return clamp_score(score)


def quick_score_update(user: UserSnapshot) -> int:
    """
    Cheap score from the user's own counters, no loan or payment reads.

    Used where only the user row is at hand (KYC submission). Not the same
    rule as calculate_credit_score; the caller persists the result.
    """
    score = BASE_SCORE

    score += user.total_loans * 10
    if user.kyc_verified:
        score += 50
    income = user.monthly_income or 0
    if income > 20_000:
        score += 30
    if income > 50_000:
        score += 50

    score -= user.defaulted_loans * 100

    return clamp_score(score)


def calculate_interest_rate(score: int) -> int:
    """Monthly interest rate (percent) for a credit score"""
    if score >= 750:
        return 8
    elif score >= 700:
        return 10
    elif score >= 650:
        return 12
    elif score >= 600:
        return 15
    return 18


def calculate_max_term(score: int) -> int:
    """Longest loan term (days) for a credit score"""
    if score >= 750:
        return 90
    elif score >= 700:
        return 60
    elif score >= 650:
        return 45
    elif score >= 600:
        return 30
    return 14
