"""Credit score endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from microlend_gateway.api.dependencies import get_credit_engine, get_request_id, get_user_repository
from microlend_gateway.api.v1.schemas import CreditScoreResponse
from microlend_gateway.domain.exceptions import DataUnavailableError, UserNotFoundError
from microlend_gateway.domain.scoring import quick_score_update
from microlend_gateway.infrastructure.database.repositories import SqlUserRepository
from microlend_gateway.infrastructure.database.session import get_db
from microlend_gateway.services.credit_engine import CreditEngine

router = APIRouter()


@router.get("/users/{user_id}/credit-score", response_model=CreditScoreResponse)
def get_credit_score(user_id: str, engine: CreditEngine = Depends(get_credit_engine)):
    """
    Full credit score from the user's loan and payment history.

    Returns 500 (the neutral default) when the history cannot be read, so the
    value alone does not tell a real 500 from an unavailable one.
    """
    return CreditScoreResponse(user_id=user_id, credit_score=engine.calculate_credit_score(user_id))


@router.post("/users/{user_id}/credit-score/quick", response_model=CreditScoreResponse)
def refresh_quick_score(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    users: SqlUserRepository = Depends(get_user_repository),
):
    """
    Recompute the cached score from the user row alone and store it.

    Called after KYC submission, where loan and payment history is not loaded.
    """
    request_id = get_request_id(request)
    try:
        user = users.get_user(user_id)
        score = quick_score_update(user)
        users.update_credit_score(user_id, score)
        db.commit()
    except UserNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="User not found")
    except DataUnavailableError as e:
        db.rollback()
        logging.error(f"User store unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="User store unavailable")

    logging.info(
        "Quick score stored",
        extra={"request_id": request_id, "user_id": user_id, "credit_score": score},
    )
    return CreditScoreResponse(user_id=user_id, credit_score=score)
