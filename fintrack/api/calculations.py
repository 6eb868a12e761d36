"""
Stateless calculation endpoints.

Used by the loan form to preview the installment before a loan is saved.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fintrack.calculations import loans as loan_engine
from fintrack.calculations.errors import CalculationError
from fintrack.calculations.rounding import round_currency

router = APIRouter()


class EMIInput(BaseModel):
    """Input for EMI calculation."""

    amount: float
    interest_rate: float
    tenure: int


class EMIResponse(BaseModel):
    emi: float
    total_payment: float
    total_interest: float


@router.post("/emi", response_model=EMIResponse)
async def calculate_emi(inputs: EMIInput):
    """Preview the EMI and total cost of a loan."""
    try:
        emi = loan_engine.compute_emi(inputs.amount, inputs.interest_rate, inputs.tenure)
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    total_payment = emi * inputs.tenure

    return EMIResponse(
        emi=emi,
        total_payment=round_currency(total_payment),
        total_interest=round_currency(max(0.0, total_payment - inputs.amount)),
    )
