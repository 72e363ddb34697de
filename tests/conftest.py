"""Shared fixtures for lmnp-core tests."""

import datetime as dt

import pytest

from lmnp_core.models import (
    AccountingPeriod,
    Amortization,
    Declaration,
    Expense,
    Property,
    Revenue,
)
from lmnp_core.repositories import Repositories

USER_ID = "user-1"


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def year_2023() -> AccountingPeriod:
    return AccountingPeriod.calendar_year(2023)


@pytest.fixture
def sofa() -> Amortization:
    """Asset bought on Jan 1st 2023: 1200 over 10 years, 120 per year."""
    return Amortization(
        id="amo-1",
        user_id=USER_ID,
        property_id="property-1",
        item_name="Canapé",
        category="mobilier",
        purchase_date="2023-01-01",
        purchase_amount=1200,
        useful_life_years=10,
        annual_amortization=120,
        status="active",
    )


@pytest.fixture
def properties() -> list[Property]:
    return [
        Property(id="property-1", user_id=USER_ID, address="12 rue des Lilas, Lyon"),
        Property(id="property-2", user_id=USER_ID, address="3 quai Rambaud, Lyon"),
    ]


@pytest.fixture
def revenues() -> list[Revenue]:
    return [
        Revenue(
            id="rev-1",
            user_id=USER_ID,
            property_id="property-1",
            amount=1000,
            date="2023-03-01",
            description="Loyer mars",
            type="rent",
        ),
    ]


@pytest.fixture
def expenses() -> list[Expense]:
    return [
        Expense(
            id="exp-1",
            user_id=USER_ID,
            property_id="property-1",
            amount=200,
            date="2023-03-15",
            description="Plomberie",
            category="maintenance",
            deductible=True,
        ),
    ]


@pytest.fixture
def declaration_2023() -> Declaration:
    return Declaration(
        id="decl-2023",
        user_id=USER_ID,
        year=2023,
        properties=["property-1"],
        created_at=dt.datetime(2024, 1, 10, tzinfo=dt.timezone.utc),
    )


@pytest.fixture
def repositories(revenues, expenses, sofa, properties) -> Repositories:
    return Repositories.in_memory(
        revenues=revenues,
        expenses=expenses,
        amortizations=[sofa],
        properties=properties,
    )
