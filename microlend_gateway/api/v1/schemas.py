"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Optional

from microlend_gateway.domain.models import RiskLevel
from microlend_gateway.domain.loan_terms import MAX_AMOUNT, MAX_TERM_DAYS, MIN_AMOUNT, MIN_TERM_DAYS


class ResultSchema(BaseModel):
    """Base for responses built from engine value objects"""

    model_config = ConfigDict(from_attributes=True)


class CreditScoreResponse(BaseModel):
    """Response for GET /v1/users/{user_id}/credit-score"""

    user_id: str
    credit_score: int


class EligibilityResponse(ResultSchema):
    """Response for GET /v1/users/{user_id}/eligibility"""

    eligible: bool
    max_amount: int
    reason: Optional[str] = None
    suggested_action: Optional[str] = None
    credit_score: Optional[int] = None
    recommended_amount: Optional[int] = None
    interest_rate: Optional[int] = None
    max_term: Optional[int] = None


class RiskAssessmentRequest(BaseModel):
    """Request body for POST /v1/risk-assessment"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., gt=0, description="Proposed loan amount")


class RiskFactorsSchema(ResultSchema):
    credit_score: int
    amount_ratio_pct: int
    max_amount: int


class RiskAssessmentResponse(ResultSchema):
    """Response for POST /v1/risk-assessment"""

    risk_level: RiskLevel
    score: int
    factors: Optional[RiskFactorsSchema] = None


class LoanLimitResponse(BaseModel):
    """Response for GET /v1/users/{user_id}/loan-limit"""

    user_id: str
    loan_limit: int


class ApplicationCheckRequest(BaseModel):
    """Request body for POST /v1/loans/application-check"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., ge=MIN_AMOUNT, le=MAX_AMOUNT, description="Requested principal")
    term_days: int = Field(..., ge=MIN_TERM_DAYS, le=MAX_TERM_DAYS, description="Loan term in days")


class LoanQuoteSchema(ResultSchema):
    amount: float
    interest_rate: float
    term_days: int
    interest: float
    total_amount: float
    daily_amount: float


class ApplicationCheckResponse(ResultSchema):
    """Response for POST /v1/loans/application-check"""

    accepted: bool
    loan_limit: int
    reason: Optional[str] = None
    quote: Optional[LoanQuoteSchema] = None


class ExtensionQuoteRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/extension-quote"""

    extension_days: Optional[int] = Field(None, ge=1, le=MAX_TERM_DAYS, description="Days to add; a week if omitted")


class ExtensionQuoteResponse(ResultSchema):
    """Response for POST /v1/loans/{loan_id}/extension-quote"""

    loan_id: str
    allowed: bool
    reason: Optional[str] = None
    extension_fee: Optional[int] = None
    previous_due_date: Optional[date] = None
    new_due_date: Optional[date] = None
    new_total_amount: Optional[float] = None
    extensions_used: int


class RatesResponse(BaseModel):
    """Response for GET /v1/rates"""

    score: int
    interest_rate: int
    max_term: int
