"""Eligibility and risk assessment endpoints"""

from fastapi import APIRouter, Depends

from microlend_gateway.api.dependencies import get_credit_engine
from microlend_gateway.api.v1.schemas import EligibilityResponse, RiskAssessmentRequest, RiskAssessmentResponse
from microlend_gateway.services.credit_engine import CreditEngine

router = APIRouter()


@router.get("/users/{user_id}/eligibility", response_model=EligibilityResponse)
def get_eligibility(user_id: str, engine: CreditEngine = Depends(get_credit_engine)):
    """Whether the user may take a new loan; ineligible results carry a reason"""
    result = engine.get_loan_eligibility(user_id)
    return EligibilityResponse.model_validate(result, from_attributes=True)


@router.post("/risk-assessment", response_model=RiskAssessmentResponse)
def assess_risk(request_body: RiskAssessmentRequest, engine: CreditEngine = Depends(get_credit_engine)):
    assessment = engine.assess_risk(request_body.user_id, request_body.amount)
    return RiskAssessmentResponse.model_validate(assessment, from_attributes=True)
