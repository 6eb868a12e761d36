"""
Expense API endpoints.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fintrack.auth.dependencies import get_current_user
from fintrack.db.database import get_db
from fintrack.db.models import Expense, ExpenseCategory, User

router = APIRouter()


class ExpenseCreate(BaseModel):
    """Schema for creating an expense."""

    amount: float
    category: str
    description: Optional[str] = None
    date: Optional[dt.date] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""

    id: str
    amount: float
    category: str
    description: str
    date: dt.date
    created_at: Optional[str] = None


def expense_to_response(expense: Expense) -> ExpenseResponse:
    """Convert Expense model to response schema."""
    return ExpenseResponse(
        id=expense.id,
        amount=expense.amount,
        category=expense.category.value,
        description=expense.description or "",
        date=expense.date,
        created_at=expense.created_at.isoformat() if expense.created_at else None,
    )


@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(
    category: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's expenses, most recent date first."""
    query = db.query(Expense).filter(
        Expense.owner_id == current_user.id, Expense.is_deleted == False
    )

    if category:
        try:
            query = query.filter(Expense.category == ExpenseCategory(category.lower()))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid category")

    expenses = query.order_by(Expense.date.desc(), Expense.created_at.desc()).all()
    return [expense_to_response(e) for e in expenses]


@router.post("/", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record an expense."""
    if expense_data.amount <= 0:
        raise HTTPException(status_code=400, detail="Amount must be positive")

    try:
        category = ExpenseCategory(expense_data.category.strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid category")

    db_expense = Expense(
        owner_id=current_user.id,
        amount=expense_data.amount,
        category=category,
        description=expense_data.description or "",
        date=expense_data.date or dt.date.today(),
    )

    db.add(db_expense)
    db.commit()
    db.refresh(db_expense)

    return expense_to_response(db_expense)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete an expense."""
    db_expense = (
        db.query(Expense)
        .filter(
            Expense.id == expense_id,
            Expense.owner_id == current_user.id,
            Expense.is_deleted == False,
        )
        .first()
    )

    if not db_expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    db_expense.is_deleted = True
    db.commit()

    return {"deleted": True, "id": expense_id}
