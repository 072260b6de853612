"""Loan pricing, due dates and extension fees"""

import math
from datetime import date

from microlend_gateway.domain.exceptions import ExtensionLimitError
from microlend_gateway.domain.models import ExtensionQuote, LoanQuote, LoanRecord, LoanStatus
from microlend_gateway.utils.date_utils import add_days
from microlend_gateway.utils.money import round_cents

MIN_AMOUNT = 500
MAX_AMOUNT = 500_000
MIN_TERM_DAYS = 7
MAX_TERM_DAYS = 365

MAX_EXTENSIONS = 2
EXTENSION_FEE_RATE = 0.05
DEFAULT_EXTENSION_DAYS = 7


def quote_loan(amount: float, interest_rate: float, term_days: int) -> LoanQuote:
    """
    Price a loan with flat interest.

    The interest rate is a monthly percentage, prorated over 30-day months:
        interest = amount * rate * term_days / (100 * 30)

    Example:
        10,000 at 15% for 30 days -> 1,500 interest, 11,500 total, 383.33/day
    """
    if not MIN_AMOUNT <= amount <= MAX_AMOUNT:
        raise ValueError(f"Loan amount must be between {MIN_AMOUNT} and {MAX_AMOUNT}")
    if not MIN_TERM_DAYS <= term_days <= MAX_TERM_DAYS:
        raise ValueError(f"Loan term must be between {MIN_TERM_DAYS} and {MAX_TERM_DAYS} days")

    interest = amount * interest_rate * term_days / (100 * 30)
    total_amount = amount + interest

    return LoanQuote(
        amount=amount,
        interest_rate=interest_rate,
        term_days=term_days,
        interest=round_cents(interest),
        total_amount=round_cents(total_amount),
        daily_amount=round_cents(total_amount / term_days),
    )


def calculate_due_date(disbursed_on: date, term_days: int) -> date:
    return add_days(disbursed_on, term_days)


def calculate_extension_fee(total_amount: float, total_paid: float, extensions_used: int) -> int:
    """
    Fee for pushing a due date back: 5% of what is still owed, floored.

    Raises:
        ExtensionLimitError: the loan already has MAX_EXTENSIONS extensions
    """
    if extensions_used >= MAX_EXTENSIONS:
        raise ExtensionLimitError("Maximum number of extensions reached")
    outstanding = max(total_amount - total_paid, 0)
    return math.floor(outstanding * EXTENSION_FEE_RATE)


def extend_due_date(due_date: date, extension_days: int | None = None) -> date:
    return add_days(due_date, extension_days or DEFAULT_EXTENSION_DAYS)


def quote_extension(loan: LoanRecord, extension_days: int | None = None) -> ExtensionQuote:
    """
    Price one due-date extension for an active loan.

    The fee is added to the amount owed and the due date moves back by
    extension_days (a week by default). Nothing is stored here.

    Raises:
        ValueError: the loan is not active or has no due date yet
        ExtensionLimitError: the loan already has MAX_EXTENSIONS extensions
    """
    if loan.status != LoanStatus.ACTIVE:
        raise ValueError("Only active loans can be extended")

    fee = calculate_extension_fee(loan.total_amount, loan.total_paid, loan.extension_count)
    if loan.due_date is None:
        raise ValueError("Loan has no due date")

    return ExtensionQuote(
        loan_id=loan.id,
        allowed=True,
        extension_fee=fee,
        previous_due_date=loan.due_date,
        new_due_date=extend_due_date(loan.due_date, extension_days),
        new_total_amount=round_cents(loan.total_amount + fee),
        extensions_used=loan.extension_count + 1,
    )
