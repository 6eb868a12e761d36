"""
Loan Calculations

EMI (equated monthly installment), repayment progress and amortization
schedules for simple fixed-rate consumer loans.

Rates are annual percentages (e.g. 8.5 for 8.5%), tenures are in months.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from fintrack.calculations.errors import InvalidInput, OutOfRange
from fintrack.calculations.rounding import (
    is_number,
    percent_of,
    round_currency,
    round_percent,
)


@dataclass
class LoanProgress:
    """Repayment status derived from a loan's stored EMI and paid months."""

    total_paid: float
    remaining_balance: float
    progress_percent: float


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly fractional rate."""
    return annual_rate_percent / 12 / 100


def compute_emi(
    principal: float, annual_rate_percent: float, tenure_months: int
) -> float:
    """
    Calculate the equated monthly installment for a loan.

    Args:
        principal: Loan amount, must be positive
        annual_rate_percent: Annual interest rate in percent, must be >= 0
        tenure_months: Number of monthly installments, integer >= 1

    Returns:
        Monthly installment rounded to cents. A zero rate gives the
        straight-line installment principal / tenure_months.

    Raises:
        InvalidInput: If any argument violates the constraints above
    """
    if not is_number(principal) or principal <= 0:
        raise InvalidInput("Loan amount must be positive")
    if not is_number(annual_rate_percent) or annual_rate_percent < 0:
        raise InvalidInput("Interest rate cannot be negative")
    if isinstance(tenure_months, bool) or not isinstance(tenure_months, int):
        raise InvalidInput("Tenure must be a whole number of months")
    if tenure_months < 1:
        raise InvalidInput("Tenure must be at least 1 month")

    r = monthly_rate(annual_rate_percent)

    if r == 0:
        return principal / tenure_months

    growth = (1 + r) ** tenure_months
    emi = principal * r * growth / (growth - 1)

    return round_currency(emi)


def compute_remaining(loan) -> LoanProgress:
    """
    Derive the outstanding balance and repayment progress of a loan.

    The balance is principal minus installments paid, clamped at zero since
    a rounded EMI times tenure rarely equals the principal exactly. Progress
    is clamped to [0, 100].
    """
    total_paid = loan.emi * loan.paid_months
    remaining = max(0.0, loan.amount - total_paid)
    progress = min(100.0, max(0.0, percent_of(loan.paid_months, loan.tenure)))

    return LoanProgress(
        total_paid=round_currency(total_paid),
        remaining_balance=round_currency(remaining),
        progress_percent=round_percent(progress),
    )


def update_paid_months(loan, new_paid_months: int):
    """
    Set the number of installments paid on a loan.

    The value is absolute, not a delta: it may move the counter forward or
    back as long as it stays within [0, tenure].

    Raises:
        OutOfRange: If new_paid_months is not an integer in [0, tenure]
    """
    if isinstance(new_paid_months, bool) or not isinstance(new_paid_months, int):
        raise OutOfRange("Paid months must be a whole number")
    if new_paid_months < 0:
        raise OutOfRange("Paid months cannot be negative")
    if new_paid_months > loan.tenure:
        raise OutOfRange("Paid months cannot exceed tenure")

    loan.paid_months = new_paid_months
    return loan


def generate_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
    emi: float,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate the month-by-month schedule for a loan repaid at a fixed EMI.

    The final installment is adjusted to clear whatever balance remains
    after rounding, so the schedule always ends at zero.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate in percent
        tenure_months: Number of installments
        emi: The loan's stored monthly installment
        start_date: Date of the first installment (defaults to today)

    Returns:
        List of schedule rows
    """
    schedule = []
    balance = principal
    r = monthly_rate(annual_rate_percent)

    if start_date is None:
        start_date = date.today()

    for period in range(1, tenure_months + 1):
        period_date = start_date + relativedelta(months=period - 1)
        interest = balance * r

        if period == tenure_months:
            principal_pmt = balance
        else:
            principal_pmt = min(emi - interest, balance)
        payment = principal_pmt + interest

        ending_balance = max(0.0, balance - principal_pmt)

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round_currency(balance),
                "payment": round_currency(payment),
                "interest": round_currency(interest),
                "principal": round_currency(principal_pmt),
                "ending_balance": round_currency(ending_balance),
            }
        )

        balance = ending_balance

        if balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the schedule."""
    return round_currency(sum(row["interest"] for row in schedule))
