"""
Dashboard API endpoint.

Aggregates a user's expenses, holdings and loans into the figures shown on
the overview page.
"""

from collections import defaultdict
from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fintrack.auth.dependencies import get_current_user
from fintrack.calculations import loans as loan_engine
from fintrack.calculations import valuation
from fintrack.calculations.rounding import round_currency
from fintrack.calculations.valuation import PriceSource
from fintrack.db.database import get_db
from fintrack.db.models import Expense, Investment, Loan, User
from fintrack.services.prices import get_price_sources

router = APIRouter()


class AssetValue(BaseModel):
    name: str
    value: float


class DashboardResponse(BaseModel):
    total_expenses: float
    expenses_by_category: Dict[str, float]
    total_invested: float
    total_investments: float
    investment_profit: float
    investment_profit_percent: float
    investments: List[AssetValue]
    total_loans: float
    outstanding_loans: float
    monthly_emi: float


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    price_sources: Dict[str, PriceSource] = Depends(get_price_sources),
):
    """Summarize the current user's finances."""
    expenses = db.query(Expense).filter(
        Expense.owner_id == current_user.id, Expense.is_deleted == False
    ).all()
    holdings = db.query(Investment).filter(
        Investment.owner_id == current_user.id, Investment.is_deleted == False
    ).all()
    loans = db.query(Loan).filter(
        Loan.owner_id == current_user.id, Loan.is_deleted == False
    ).all()

    by_category = defaultdict(float)
    for expense in expenses:
        by_category[expense.category.value] += expense.amount

    valued = await valuation.value_holdings(holdings, price_sources)
    portfolio = valuation.summarize_portfolio(valued)

    # Holdings of the same asset are shown as one slice
    by_asset = defaultdict(float)
    for v in valued:
        by_asset[v.holding.asset] += v.valuation.current_value

    active_loans = [
        loan for loan in loans if loan_engine.compute_remaining(loan).remaining_balance > 0
    ]

    return DashboardResponse(
        total_expenses=round_currency(sum(e.amount for e in expenses)),
        expenses_by_category={k: round_currency(v) for k, v in by_category.items()},
        total_invested=portfolio.total_invested,
        total_investments=portfolio.total_value,
        investment_profit=portfolio.total_profit,
        investment_profit_percent=portfolio.total_profit_percent,
        investments=[
            AssetValue(name=name, value=round_currency(value))
            for name, value in by_asset.items()
        ],
        total_loans=round_currency(sum(loan.amount for loan in loans)),
        outstanding_loans=round_currency(
            sum(loan_engine.compute_remaining(loan).remaining_balance for loan in loans)
        ),
        monthly_emi=round_currency(sum(loan.emi for loan in active_loans)),
    )
