"""
Loan API endpoints.

EMI is computed once when a loan is created. Repayment progress is derived
on every read and never stored.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fintrack.auth.dependencies import get_current_user
from fintrack.calculations import loans as loan_engine
from fintrack.calculations.errors import CalculationError
from fintrack.db.database import get_db
from fintrack.db.models import Loan, User

router = APIRouter()


class LoanCreate(BaseModel):
    """Schema for creating a loan."""

    amount: float
    interest_rate: float
    tenure: int
    start_date: Optional[date] = None


class LoanProgressUpdate(BaseModel):
    """Absolute number of installments paid so far."""

    paid_months: int


class LoanResponse(BaseModel):
    """Loan with derived repayment fields."""

    id: str
    amount: float
    interest_rate: float
    tenure: int
    emi: float
    paid_months: int
    start_date: date
    total_paid: float
    remaining_balance: float
    progress_percent: float
    created_at: Optional[str] = None


class ScheduleResponse(BaseModel):
    loan_id: str
    emi: float
    schedule: List[dict]
    total_interest: float
    total_payment: float


def loan_to_response(loan: Loan) -> LoanResponse:
    """Convert Loan model to response schema, deriving its progress."""
    progress = loan_engine.compute_remaining(loan)
    return LoanResponse(
        id=loan.id,
        amount=loan.amount,
        interest_rate=loan.interest_rate,
        tenure=loan.tenure,
        emi=loan.emi,
        paid_months=loan.paid_months,
        start_date=loan.start_date,
        total_paid=progress.total_paid,
        remaining_balance=progress.remaining_balance,
        progress_percent=progress.progress_percent,
        created_at=loan.created_at.isoformat() if loan.created_at else None,
    )


def get_owned_loan(loan_id: str, user: User, db: Session) -> Loan:
    """Fetch a live loan belonging to user or raise 404."""
    loan = (
        db.query(Loan)
        .filter(
            Loan.id == loan_id,
            Loan.owner_id == user.id,
            Loan.is_deleted == False,
        )
        .first()
    )

    if not loan:
        raise HTTPException(status_code=404, detail="Loan not found")

    return loan


@router.get("/", response_model=List[LoanResponse])
async def list_loans(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's loans, newest first."""
    loans = (
        db.query(Loan)
        .filter(Loan.owner_id == current_user.id, Loan.is_deleted == False)
        .order_by(Loan.created_at.desc())
        .all()
    )
    return [loan_to_response(loan) for loan in loans]


@router.post("/", response_model=LoanResponse, status_code=201)
async def create_loan(
    loan_data: LoanCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a loan, fixing its EMI from amount, rate and tenure."""
    try:
        emi = loan_engine.compute_emi(
            loan_data.amount, loan_data.interest_rate, loan_data.tenure
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db_loan = Loan(
        owner_id=current_user.id,
        amount=loan_data.amount,
        interest_rate=loan_data.interest_rate,
        tenure=loan_data.tenure,
        emi=emi,
        paid_months=0,
        start_date=loan_data.start_date or date.today(),
    )

    db.add(db_loan)
    db.commit()
    db.refresh(db_loan)

    return loan_to_response(db_loan)


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(
    loan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a loan by ID."""
    return loan_to_response(get_owned_loan(loan_id, current_user, db))


@router.patch("/{loan_id}", response_model=LoanResponse)
async def update_loan_progress(
    loan_id: str,
    update: LoanProgressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set how many installments have been paid."""
    db_loan = get_owned_loan(loan_id, current_user, db)

    try:
        loan_engine.update_paid_months(db_loan, update.paid_months)
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(db_loan)

    return loan_to_response(db_loan)


@router.get("/{loan_id}/schedule", response_model=ScheduleResponse)
async def get_loan_schedule(
    loan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Month-by-month amortization schedule at the loan's stored EMI."""
    db_loan = get_owned_loan(loan_id, current_user, db)

    schedule = loan_engine.generate_amortization_schedule(
        principal=db_loan.amount,
        annual_rate_percent=db_loan.interest_rate,
        tenure_months=db_loan.tenure,
        emi=db_loan.emi,
        start_date=db_loan.start_date,
    )

    return ScheduleResponse(
        loan_id=db_loan.id,
        emi=db_loan.emi,
        schedule=schedule,
        total_interest=loan_engine.calculate_total_interest(schedule),
        total_payment=round(sum(row["payment"] for row in schedule), 2),
    )


@router.delete("/{loan_id}")
async def delete_loan(
    loan_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete a loan."""
    db_loan = get_owned_loan(loan_id, current_user, db)

    db_loan.is_deleted = True
    db.commit()

    return {"deleted": True, "id": loan_id}
