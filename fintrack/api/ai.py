"""
AI assistant chat endpoint.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fintrack.auth.dependencies import get_current_user
from fintrack.db.database import get_db
from fintrack.db.models import Expense, Investment, Loan, User
from fintrack.services.assistant import (
    AssistantService,
    build_financial_context,
    get_assistant_service,
)

router = APIRouter()


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    response: str


@router.post("/", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Answer a question using a summary of the user's records as context."""
    message = request.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    context = build_financial_context(
        expenses=db.query(Expense).filter(
            Expense.owner_id == current_user.id, Expense.is_deleted == False
        ),
        investments=db.query(Investment).filter(
            Investment.owner_id == current_user.id, Investment.is_deleted == False
        ),
        loans=db.query(Loan).filter(
            Loan.owner_id == current_user.id, Loan.is_deleted == False
        ),
    )

    return ChatResponse(response=await assistant.reply(message, context))
