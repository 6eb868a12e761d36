"""
AI assistant backed by an OpenAI-compatible chat completion proxy.

Falls back to a canned summary when no proxy is configured, and to a
fixed apology when the proxy cannot be reached.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import httpx

from fintrack.config import Settings, get_settings

logger = logging.getLogger(__name__)

UNAVAILABLE_REPLY = (
    "I'm having trouble connecting to the AI service right now. However, I can "
    "see your financial data. Would you like me to provide some general "
    "financial tips instead?"
)


@dataclass
class FinancialContext:
    """Totals from a user's records that are shared with the assistant."""

    total_expenses: float
    total_invested: float
    total_loans: float
    expense_count: int
    investment_count: int
    loan_count: int

    def describe(self) -> str:
        return (
            "User's Financial Summary:\n"
            f"- Total Expenses: ${self.total_expenses:.2f}\n"
            f"- Total Investments: ${self.total_invested:.2f}\n"
            f"- Total Loans: ${self.total_loans:.2f}\n"
            f"- Number of Expenses: {self.expense_count}\n"
            f"- Number of Investments: {self.investment_count}\n"
            f"- Number of Loans: {self.loan_count}"
        )


def build_financial_context(
    expenses: Iterable, investments: Iterable, loans: Iterable
) -> FinancialContext:
    """Summarize expense, investment and loan records for a prompt."""
    expenses, investments, loans = list(expenses), list(investments), list(loans)
    return FinancialContext(
        total_expenses=sum(e.amount for e in expenses),
        total_invested=sum(i.invested_amount for i in investments),
        total_loans=sum(loan.amount for loan in loans),
        expense_count=len(expenses),
        investment_count=len(investments),
        loan_count=len(loans),
    )


class AssistantService:
    """Chat client for the configured AI proxy."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.proxy_url = settings.ai_proxy_url
        self.api_key = settings.ai_api_key
        self.model = settings.ai_model
        self.timeout = settings.ai_timeout_seconds
        self.transport = transport

    def mock_reply(self, message: str, context: FinancialContext) -> str:
        return (
            f'I understand you\'re asking about: "{message}". Based on your '
            f"financial data, you have ${context.total_expenses:.2f} in expenses, "
            f"${context.total_invested:.2f} in investments, and "
            f"${context.total_loans:.2f} in loans. To get personalized AI advice, "
            "please configure the AI_PROXY_URL in your environment variables."
        )

    def build_payload(self, message: str, context: FinancialContext) -> dict:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": (
                        "You are a helpful financial advisor. "
                        f"{context.describe()}\n\nUser Question: {message}\n"
                        "Provide concise, actionable advice in 2-3 sentences."
                    ),
                },
                {"role": "user", "content": message},
            ],
            "max_tokens": 150,
            "temperature": 0.7,
        }

    @staticmethod
    def extract_reply(data) -> str:
        """Read the reply from an OpenAI-style or plain {"response": ...} body."""
        if not isinstance(data, dict):
            return "No response from AI"
        choices = data.get("choices") or []
        if choices and isinstance(choices[0], dict):
            content = (choices[0].get("message") or {}).get("content")
            if content:
                return content
        return data.get("response") or "No response from AI"

    async def reply(self, message: str, context: FinancialContext) -> str:
        """
        Answer a user's question about their finances.

        Args:
            message: The user's question
            context: Summary of the user's records

        Returns:
            Reply text; never raises for proxy failures
        """
        if not self.proxy_url:
            logger.info("AI proxy not configured, returning summary reply")
            return self.mock_reply(message, context)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    self.proxy_url,
                    json=self.build_payload(message, context),
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"AI proxy request failed: {e}")
            return UNAVAILABLE_REPLY

        return self.extract_reply(data)


def get_assistant_service() -> AssistantService:
    """FastAPI dependency for the assistant."""
    return AssistantService(get_settings())
