"""Risk tiering for a proposed loan amount"""

from microlend_gateway.domain.models import EligibilityResult, RiskAssessment, RiskFactors, RiskLevel
from microlend_gateway.utils.money import round_half_up

# Returned for ineligible users and on any failure
HIGH_RISK_DEFAULT = RiskAssessment(risk_level=RiskLevel.HIGH, score=0)


def classify_risk(eligibility: EligibilityResult, loan_amount: float) -> RiskAssessment:
    """
    Classify a loan amount against the user's eligibility.

    - low:    score >= 700 and amount is at most half the limit
    - high:   score < 550 or amount is more than 80% of the limit
    - medium: everything else
    """
    if not eligibility.eligible:
        return HIGH_RISK_DEFAULT

    score = eligibility.credit_score
    amount_ratio = loan_amount / eligibility.max_amount

    if score >= 700 and amount_ratio <= 0.5:
        risk_level = RiskLevel.LOW
    elif score < 550 or amount_ratio > 0.8:
        risk_level = RiskLevel.HIGH
    else:
        risk_level = RiskLevel.MEDIUM

    return RiskAssessment(
        risk_level=risk_level,
        score=score,
        factors=RiskFactors(
            credit_score=score,
            amount_ratio_pct=round_half_up(amount_ratio * 100),
            max_amount=eligibility.max_amount,
        ),
    )
