"""Pytest configuration and shared fixtures."""

import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from alembic.config import Config

from alembic import command

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@pytest.fixture(scope="function")
def temp_db_path():
    """Create a temporary database file for testing."""
    with tempfile.NamedTemporaryFile(delete=False, suffix=".db") as tmp:
        db_path = tmp.name
    yield db_path
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.remove(db_path + suffix)


@pytest.fixture(scope="function")
def test_db_schema(temp_db_path):
    """Create test database schema using Alembic migration."""
    alembic_config = Config(str(ALEMBIC_INI))
    alembic_config.set_main_option(
        "sqlalchemy.url", f"sqlite:///{os.path.abspath(temp_db_path)}"
    )
    command.upgrade(alembic_config, "head")
    yield temp_db_path


@pytest.fixture(scope="function")
def test_db(test_db_schema):
    """Create a Database instance for testing."""
    from fundledger.database import Database

    db = Database(db_path=test_db_schema)
    return db


@pytest.fixture
def sample_account():
    """Sample account data."""
    return {
        "name": "Operating Cash",
        "account_number": "1000-001",
        "account_type": "asset",
        "balance": Decimal("15000.50"),
        "description": "Main operating account",
    }


@pytest.fixture
def sample_transaction():
    """Sample transaction data (account_id set by the test)."""
    return {
        "transaction_type": "debit",
        "amount": Decimal("250.75"),
        "description": "Office supplies",
        "transaction_date": date(2024, 3, 15),
        "reference_number": "INV-2024-031",
    }


@pytest.fixture
def sample_fund():
    """Sample fund data."""
    return {
        "name": "Global Equity Fund",
        "fund_type": "equity",
        "inception_date": date(2019, 1, 2),
        "nav": Decimal("125.4321"),
        "total_assets": Decimal("850000000.00"),
        "management_fee": Decimal("1.2500"),
        "description": "Large-cap global equities",
    }


@pytest.fixture
def sample_investor():
    """Sample investor data."""
    return {
        "name": "Jordan Lee",
        "email": "jordan.lee@example.com",
        "investor_type": "individual",
        "total_invested": Decimal("250000.00"),
        "phone": "+1-555-0100",
        "address": "12 Harbor Way",
    }


@pytest.fixture
def sample_portfolio():
    """Sample portfolio data (investor_id and fund_id set by the test)."""
    return {
        "name": "Growth Portfolio",
        "total_value": Decimal("180000.00"),
        "cash_balance": Decimal("20000.00"),
        "performance": Decimal("-2.3456"),
    }


@pytest.fixture
def sample_asset():
    """Sample asset data (portfolio_id set by the test)."""
    return {
        "symbol": "AAPL",
        "name": "Apple Inc",
        "asset_type": "stock",
        "quantity": Decimal("10.125000"),
        "unit_price": Decimal("189.2500"),
        "market_value": Decimal("1916.16"),
        "cost_basis": Decimal("1500.00"),
        "purchase_date": date(2023, 6, 1),
    }


@pytest.fixture
def account(test_db, sample_account):
    """A persisted Account."""
    from fundledger.models import Account

    return Account.create(test_db, **sample_account)


@pytest.fixture
def fund(test_db, sample_fund):
    """A persisted Fund."""
    from fundledger.models import Fund

    return Fund.create(test_db, **sample_fund)


@pytest.fixture
def investor(test_db, sample_investor):
    """A persisted Investor."""
    from fundledger.models import Investor

    return Investor.create(test_db, **sample_investor)


@pytest.fixture
def portfolio(test_db, sample_portfolio, investor, fund):
    """A persisted Portfolio owned by the investor and fund fixtures."""
    from fundledger.models import Portfolio

    return Portfolio.create(
        test_db, investor_id=investor.id, fund_id=fund.id, **sample_portfolio
    )
