"""
Investment API endpoints.

Holdings are stored as entered. Prices, values and profit are computed on
every read from the configured price sources.
"""

from dataclasses import asdict
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from fintrack.auth.dependencies import get_current_user
from fintrack.calculations import valuation
from fintrack.calculations.errors import CalculationError
from fintrack.calculations.valuation import HoldingValuation, PriceSource
from fintrack.db.database import get_db
from fintrack.db.models import Investment, InvestmentType, User
from fintrack.services.prices import get_price_sources

router = APIRouter()


class InvestmentCreate(BaseModel):
    """Schema for creating an investment."""

    asset: str = Field(max_length=50)
    type: str
    quantity: float
    invested_amount: float
    purchase_date: Optional[date] = None


class InvestmentResponse(BaseModel):
    """Schema for a stored investment."""

    id: str
    asset: str
    type: str
    quantity: float
    invested_amount: float
    purchase_date: date
    created_at: Optional[str] = None


class ValuedInvestmentResponse(InvestmentResponse):
    """Investment enriched with its current valuation."""

    current_price: float
    price_is_fallback: bool
    current_value: float
    profit: float
    profit_percent: float


class PortfolioSummaryResponse(BaseModel):
    total_invested: float
    total_value: float
    total_profit: float
    total_profit_percent: float


class InvestmentListResponse(BaseModel):
    investments: List[ValuedInvestmentResponse]
    summary: PortfolioSummaryResponse
    total: int


def investment_to_response(investment: Investment) -> InvestmentResponse:
    """Convert Investment model to response schema."""
    return InvestmentResponse(
        id=investment.id,
        asset=investment.asset,
        type=investment.type.value,
        quantity=investment.quantity,
        invested_amount=investment.invested_amount,
        purchase_date=investment.purchase_date,
        created_at=investment.created_at.isoformat() if investment.created_at else None,
    )


def valued_to_response(valued: HoldingValuation) -> ValuedInvestmentResponse:
    base = investment_to_response(valued.holding)
    return ValuedInvestmentResponse(
        **base.model_dump(),
        current_price=valued.quote.price,
        price_is_fallback=valued.quote.is_fallback,
        current_value=valued.valuation.current_value,
        profit=valued.valuation.profit,
        profit_percent=valued.valuation.profit_percent,
    )


def list_owned_investments(user: User, db: Session) -> List[Investment]:
    return (
        db.query(Investment)
        .filter(Investment.owner_id == user.id, Investment.is_deleted == False)
        .order_by(Investment.created_at.desc())
        .all()
    )


@router.get("/", response_model=InvestmentListResponse)
async def list_investments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    price_sources: Dict[str, PriceSource] = Depends(get_price_sources),
):
    """List the current user's holdings valued at current prices."""
    holdings = list_owned_investments(current_user, db)
    valued = await valuation.value_holdings(holdings, price_sources)
    summary = valuation.summarize_portfolio(valued)

    return InvestmentListResponse(
        investments=[valued_to_response(v) for v in valued],
        summary=PortfolioSummaryResponse(**asdict(summary)),
        total=len(valued),
    )


@router.post("/", response_model=InvestmentResponse, status_code=201)
async def create_investment(
    investment_data: InvestmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a new holding."""
    asset = investment_data.asset.strip().upper()
    if not asset:
        raise HTTPException(status_code=400, detail="Asset symbol is required")

    try:
        kind = InvestmentType(investment_data.type.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=400, detail="Type must be either stock or crypto"
        )

    try:
        valuation.validate_holding(
            investment_data.quantity, investment_data.invested_amount
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db_investment = Investment(
        owner_id=current_user.id,
        asset=asset,
        type=kind,
        quantity=investment_data.quantity,
        invested_amount=investment_data.invested_amount,
        purchase_date=investment_data.purchase_date or date.today(),
    )

    db.add(db_investment)
    db.commit()
    db.refresh(db_investment)

    return investment_to_response(db_investment)


@router.delete("/{investment_id}")
async def delete_investment(
    investment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete a holding."""
    db_investment = (
        db.query(Investment)
        .filter(
            Investment.id == investment_id,
            Investment.owner_id == current_user.id,
            Investment.is_deleted == False,
        )
        .first()
    )

    if not db_investment:
        raise HTTPException(status_code=404, detail="Investment not found")

    db_investment.is_deleted = True
    db.commit()

    return {"deleted": True, "id": investment_id}
