#!/usr/bin/env python3
"""
Create a demo user with sample expenses, investments and a loan.

Usage:
    python scripts/seed_demo_data.py [email] [password]

Defaults to demo@example.com / demo1234. Does nothing if the user exists.
"""

import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta

from fintrack.auth.password import hash_password
from fintrack.calculations.loans import compute_emi, update_paid_months
from fintrack.db.database import init_db, session_scope
from fintrack.db.models import (
    Expense,
    ExpenseCategory,
    Investment,
    InvestmentType,
    Loan,
    User,
)


def seed(email: str, password: str):
    init_db()

    with session_scope() as db:
        existing = db.query(User).filter(User.email == email.lower()).first()
        if existing:
            print(f"User already exists: {existing.email}. Skipping.")
            return

        user = User(
            email=email.lower(),
            name="Demo User",
            hashed_password=hash_password(password),
        )
        db.add(user)
        db.flush()

        today = date.today()
        expenses = [
            (42.50, ExpenseCategory.food, "Groceries"),
            (18.00, ExpenseCategory.transport, "Metro card"),
            (120.00, ExpenseCategory.bills, "Electricity"),
            (35.00, ExpenseCategory.fun, "Concert tickets"),
            (12.99, ExpenseCategory.other, "Phone case"),
        ]
        for offset, (amount, category, description) in enumerate(expenses):
            db.add(Expense(
                owner_id=user.id,
                amount=amount,
                category=category,
                description=description,
                date=today - timedelta(days=offset * 3),
            ))

        db.add(Investment(
            owner_id=user.id, asset="AAPL", type=InvestmentType.stock,
            quantity=10, invested_amount=1500,
        ))
        db.add(Investment(
            owner_id=user.id, asset="BTC", type=InvestmentType.crypto,
            quantity=0.05, invested_amount=2000,
        ))

        loan = Loan(
            owner_id=user.id,
            amount=5000,
            interest_rate=8.5,
            tenure=24,
            emi=compute_emi(5000, 8.5, 24),
            paid_months=0,
            start_date=today.replace(day=1),
        )
        update_paid_months(loan, 6)
        db.add(loan)

        print(f"Created demo user: {user.email}")
        print(f"  Expenses: {len(expenses)}")
        print("  Investments: AAPL (stock), BTC (crypto)")
        print(f"  Loan: ${loan.amount:,.2f} at {loan.interest_rate}% for "
              f"{loan.tenure} months, EMI ${loan.emi:,.2f}")


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else "demo@example.com"
    password = sys.argv[2] if len(sys.argv) > 2 else "demo1234"
    seed(email, password)
