"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fintrack.main import app
from fintrack.db.database import get_db
from fintrack.calculations.errors import PriceUnavailable
from fintrack.services.prices import get_price_sources
# Import all models to ensure all tables are created
from fintrack.db.models import Base, User, Expense, Loan, Investment, RefreshToken
from fintrack.auth.password import hash_password


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


class FakePriceSource:
    """In-memory price source; unknown symbols are unavailable."""

    def __init__(self, prices=None):
        self.prices = dict(prices or {})
        self.calls = []

    async def get_price(self, symbol):
        self.calls.append(symbol)
        if symbol not in self.prices:
            raise PriceUnavailable(f"No test price for {symbol}")
        return self.prices[symbol]


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def price_sources():
    """Price sources used by the API; tests set prices on them directly."""
    sources = {"stock": FakePriceSource(), "crypto": FakePriceSource()}
    app.dependency_overrides[get_price_sources] = lambda: sources
    yield sources
    app.dependency_overrides.pop(get_price_sources, None)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def make_user(db_session, email, password="testpassword123", name="Test User"):
    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    return make_user(db_session, "test@example.com")


@pytest.fixture
def other_user(db_session):
    """A second user whose records must stay invisible to test_user."""
    return make_user(db_session, "other@example.com", name="Other User")


def login(client, email, password="testpassword123"):
    response = client.post(
        "/api/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def authenticated_client(client, test_user):
    """Create authenticated test client."""
    tokens = login(client, "test@example.com")
    client.headers["Authorization"] = f"Bearer {tokens['access_token']}"
    return client
