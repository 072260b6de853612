"""Prometheus metrics for monitoring scores, eligibility outcomes and risk tiers"""

from prometheus_client import Counter, Histogram

# Scoring metrics
credit_score_histogram = Histogram(
    "microlend_credit_score",
    "Full credit scores computed",
    buckets=[300, 400, 500, 550, 600, 650, 700, 750, 800, 850],
)

credit_score_fallback_counter = Counter(
    "credit_score_fallback_total",
    "Scores replaced by the default because the history could not be read",
)

# Decision metrics
eligibility_counter = Counter(
    "microlend_eligibility_total",
    "Eligibility evaluations",
    ["outcome"],  # eligible | ineligible
)

max_amount_bucket_counter = Counter(
    "microlend_max_amount_bucket",
    "Eligible loan limits by bucket",
    ["bucket"],  # 0-5k, 5k-15k, 15k-50k, 50k+
)

risk_level_counter = Counter(
    "microlend_risk_level_total",
    "Risk assessments by tier",
    ["level"],  # low | medium | high
)

engine_error_counter = Counter(
    "credit_engine_errors_total",
    "Errors swallowed by the credit engine",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_eligibility(eligible: bool, max_amount: int) -> None:
    """Record eligibility outcome and, for eligible users, the limit bucket"""
    outcome = "eligible" if eligible else "ineligible"
    eligibility_counter.labels(outcome=outcome).inc()

    if not eligible:
        return

    if max_amount <= 5_000:
        bucket = "0-5k"
    elif max_amount <= 15_000:
        bucket = "5k-15k"
    elif max_amount <= 50_000:
        bucket = "15k-50k"
    else:
        bucket = "50k+"

    max_amount_bucket_counter.labels(bucket=bucket).inc()


def record_risk_level(level: str) -> None:
    risk_level_counter.labels(level=level).inc()
