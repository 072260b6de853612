"""Application-time loan ceiling.

Separate from the eligibility limit in eligibility.py: works off the user's
cached credit score and counters only.
"""

import math

from microlend_gateway.domain.models import UserSnapshot

BASE_LIMIT = 5_000

# (cached score strictly above, limit), later entries override earlier ones
SCORE_LIMIT_STEPS = [
    (600, 10_000),
    (700, 25_000),
    (750, 50_000),
    (800, 100_000),
]


def calculate_loan_limit(user: UserSnapshot) -> int:
    limit = BASE_LIMIT
    for threshold, step_limit in SCORE_LIMIT_STEPS:
        if user.credit_score > threshold:
            limit = step_limit

    if user.active_loan_count > 0:
        limit = math.floor(limit * 0.5)

    if user.kyc_verified:
        limit = math.floor(limit * 1.2)

    return limit
