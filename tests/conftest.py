"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from household_budget.api.main import create_app
from household_budget.domain.models import (
    DebtAccount,
    Envelope,
    PayFrequency,
)


TODAY = date(2026, 10, 19)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def debt_accounts() -> list[DebtAccount]:
    """Three cards with distinct APRs, balances and priorities"""
    return [
        DebtAccount(id="visa", name="Visa", current_balance=1000.0, apr=24.0, minimum_payment=50.0, payoff_priority=2),
        DebtAccount(id="store", name="Store Card", current_balance=500.0, apr=18.0, minimum_payment=25.0),
        DebtAccount(id="amex", name="Amex", current_balance=3000.0, apr=12.0, minimum_payment=90.0, payoff_priority=1),
    ]


@pytest.fixture
def rent_envelope() -> Envelope:
    """Rent due in four weeks, partly saved"""
    return Envelope(
        id="rent",
        name="Rent",
        target_amount=1000.0,
        frequency=PayFrequency.MONTHLY,
        due_date=date(2026, 11, 16),
        current_balance=200.0,
    )

