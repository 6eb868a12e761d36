"""
API routes for the finance tracker.
"""

from fastapi import APIRouter

from fintrack.api import auth, expenses, loans, investments, dashboard, ai, calculations

router = APIRouter()

# Include sub-routers
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
router.include_router(loans.router, prefix="/loans", tags=["loans"])
router.include_router(investments.router, prefix="/investments", tags=["investments"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
