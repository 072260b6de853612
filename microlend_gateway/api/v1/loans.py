"""Loan limit, application check, extension quote and rate table endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from microlend_gateway.api.dependencies import get_credit_engine
from microlend_gateway.api.v1.schemas import (
    ApplicationCheckRequest,
    ApplicationCheckResponse,
    ExtensionQuoteRequest,
    ExtensionQuoteResponse,
    LoanLimitResponse,
    RatesResponse,
)
from microlend_gateway.domain.scoring import MAX_SCORE, MIN_SCORE, calculate_interest_rate, calculate_max_term
from microlend_gateway.services.credit_engine import CreditEngine

router = APIRouter()


@router.get("/users/{user_id}/loan-limit", response_model=LoanLimitResponse)
def get_loan_limit(user_id: str, engine: CreditEngine = Depends(get_credit_engine)):
    """Application-time ceiling; separate from the eligibility limit"""
    return LoanLimitResponse(user_id=user_id, loan_limit=engine.get_user_loan_limit(user_id))


@router.post("/loans/application-check", response_model=ApplicationCheckResponse)
def check_application(request_body: ApplicationCheckRequest, engine: CreditEngine = Depends(get_credit_engine)):
    """
    Run the gates a loan application must pass before it is stored.

    Returns:
        accepted flag, the loan limit used, a reason when rejected and a
        repayment quote when accepted
    """
    check = engine.check_application(request_body.user_id, request_body.amount, request_body.term_days)
    return ApplicationCheckResponse.model_validate(check, from_attributes=True)


@router.post("/loans/{loan_id}/extension-quote", response_model=ExtensionQuoteResponse)
def quote_extension(
    loan_id: str,
    request_body: Optional[ExtensionQuoteRequest] = None,
    engine: CreditEngine = Depends(get_credit_engine),
):
    """Fee and new due date for extending an active loan; at most two extensions per loan"""
    extension_days = request_body.extension_days if request_body else None
    quote = engine.quote_extension(loan_id, extension_days)
    return ExtensionQuoteResponse.model_validate(quote, from_attributes=True)


@router.get("/rates", response_model=RatesResponse)
def get_rates(score: int = Query(..., ge=MIN_SCORE, le=MAX_SCORE, description="Credit score")):
    return RatesResponse(
        score=score,
        interest_rate=calculate_interest_rate(score),
        max_term=calculate_max_term(score),
    )
