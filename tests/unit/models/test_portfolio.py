"""Unit tests for Portfolio model."""

from decimal import Decimal

import pytest

from fundledger.models.asset import Asset
from fundledger.models.errors import IntegrityViolationError, ValidationError
from fundledger.models.investor import Investor
from fundledger.models.portfolio import Portfolio


class TestPortfolioValidation:
    """Test Portfolio business rule validation."""

    def test_requires_existing_investor_and_fund(self, test_db, sample_portfolio):
        """Test that both parents must exist, and both failures are reported."""
        with pytest.raises(ValidationError) as exc_info:
            Portfolio.create(test_db, investor_id=41, fund_id=42, **sample_portfolio)

        message = str(exc_info.value)
        assert "Investor with ID 41 not found" in message
        assert "Fund with ID 42 not found" in message
        assert Portfolio.all(test_db) == []

    def test_requires_existing_fund(self, test_db, investor, sample_portfolio):
        with pytest.raises(ValidationError, match="Fund with ID 999 not found"):
            Portfolio.create(
                test_db, investor_id=investor.id, fund_id=999, **sample_portfolio
            )

    @pytest.mark.parametrize("field", ["total_value", "cash_balance"])
    def test_values_cannot_be_negative(
        self, test_db, investor, fund, sample_portfolio, field
    ):
        sample_portfolio[field] = Decimal("-0.01")

        with pytest.raises(ValidationError, match=f"{field} cannot be negative"):
            Portfolio.create(
                test_db, investor_id=investor.id, fund_id=fund.id, **sample_portfolio
            )

    def test_performance_fits_numeric_8_4(
        self, test_db, investor, fund, sample_portfolio
    ):
        sample_portfolio["performance"] = Decimal("10000")

        with pytest.raises(ValidationError, match="numeric\\(8,4\\)"):
            Portfolio.create(
                test_db, investor_id=investor.id, fund_id=fund.id, **sample_portfolio
            )


class TestPortfolioPersistence:
    """Test Portfolio create/list/update/delete."""

    def test_signed_performance_round_trips(self, test_db, portfolio):
        found = Portfolio.find_by_id(test_db, portfolio.id)

        assert found.performance == Decimal("-2.3456")
        assert found.total_value == Decimal("180000.00")
        assert found.cash_balance == Decimal("20000.00")

    def test_for_investor_separates_investors(
        self, test_db, investor, fund, sample_investor, sample_portfolio
    ):
        """Test two children for one investor and one for a sibling investor."""
        sibling = Investor.create(
            test_db, **dict(sample_investor, email="sibling@example.com")
        )
        first = Portfolio.create(
            test_db, investor_id=investor.id, fund_id=fund.id, **sample_portfolio
        )
        sibling_portfolio = Portfolio.create(
            test_db, investor_id=sibling.id, fund_id=fund.id, **sample_portfolio
        )
        second = Portfolio.create(
            test_db, investor_id=investor.id, fund_id=fund.id, **sample_portfolio
        )

        assert [p.id for p in Portfolio.for_investor(test_db, investor.id)] == [
            first.id,
            second.id,
        ]
        assert [p.id for p in Portfolio.for_investor(test_db, sibling.id)] == [
            sibling_portfolio.id
        ]

    def test_for_investor_empty_for_missing_investor(self, test_db):
        assert Portfolio.for_investor(test_db, 999) == []

    def test_update_reassigns_to_existing_investor_only(
        self, test_db, portfolio, sample_investor
    ):
        other = Investor.create(
            test_db, **dict(sample_investor, email="other@example.com")
        )

        portfolio.update(investor_id=other.id, performance=Decimal("4.5"))
        found = Portfolio.find_by_id(test_db, portfolio.id)
        assert found.investor_id == other.id
        assert found.performance == Decimal("4.5000")

        with pytest.raises(ValidationError, match="Investor with ID 999 not found"):
            portfolio.update(investor_id=999)
        assert Portfolio.find_by_id(test_db, portfolio.id).investor_id == other.id

    def test_delete_portfolio_blocked_by_assets(self, test_db, portfolio, sample_asset):
        """Test that a portfolio holding assets cannot be deleted."""
        Asset.create(test_db, portfolio_id=portfolio.id, **sample_asset)
        Asset.create(test_db, portfolio_id=portfolio.id, **sample_asset)

        with pytest.raises(IntegrityViolationError, match="has 2 associated assets"):
            portfolio.delete()

        assert Portfolio.find_by_id(test_db, portfolio.id) is not None

    def test_delete_empty_portfolio(self, test_db, portfolio):
        assert Portfolio.delete_by_id(test_db, portfolio.id) is True
        assert Portfolio.find_by_id(test_db, portfolio.id) is None
        assert Portfolio.delete_by_id(test_db, portfolio.id) is False

    def test_delete_missing_portfolio_returns_false(self, test_db):
        assert Portfolio.delete_by_id(test_db, 0) is False
        assert Portfolio.delete_by_id(test_db, 999) is False
