"""Portfolio model class

A Portfolio belongs to exactly one Investor and one Fund, and is the
parent of its Assets. It cannot be deleted while Assets reference it.

total_value moves with its Assets: every Asset write shifts it by the
change in that Asset's market_value.
"""

import logging
from decimal import Decimal

from fundledger.data_normalization import (
    CURRENCY_SCALE,
    from_storage,
    to_storage,
    utc_now,
)
from fundledger.database import Database
from fundledger.models.active_model import ActiveModel
from fundledger.models.integrity import DependentLookup

logger = logging.getLogger(__name__)


class Portfolio(ActiveModel):
    table_name = "portfolios"
    primary_key = "id"
    entity_name = "Portfolio"

    _allowed_fields = {
        "id",
        "name",
        "investor_id",
        "fund_id",
        "total_value",
        "cash_balance",
        "performance",
        "created_at",
        "updated_at",
    }
    _required_fields = (
        "name",
        "investor_id",
        "fund_id",
        "total_value",
        "cash_balance",
        "performance",
    )
    # performance is a signed percentage
    _decimal_fields = {
        "total_value": (15, 2),
        "cash_balance": (15, 2),
        "performance": (8, 4),
    }
    _foreign_keys = {
        "investor_id": ("investors", "Investor"),
        "fund_id": ("funds", "Fund"),
    }

    def __repr__(self):
        return (
            f"Portfolio(id={self.id}, investor_id={self.investor_id}, "
            f"fund_id={self.fund_id})"
        )

    def validate(self):
        """Validate the portfolio"""
        errors = self._field_errors()

        for field in ("total_value", "cash_balance"):
            value = getattr(self, field)
            if isinstance(value, Decimal) and value < 0:
                errors.append(f"{field} cannot be negative, got {value}")

        self._raise_if_errors(errors)

    @classmethod
    def _dependent_lookups(cls) -> list[DependentLookup]:
        from fundledger.models.asset import Asset

        return [Asset.dependent_lookup("portfolio_id")]

    def assets(self) -> list:
        from fundledger.models.asset import Asset

        return Asset.for_portfolio(self._database, self.id)

    @classmethod
    def for_investor(cls, database: Database, investor_id: int) -> list["Portfolio"]:
        return cls.list_by_foreign_key(database, "investor_id", investor_id)

    @classmethod
    def for_fund(cls, database: Database, fund_id: int) -> list["Portfolio"]:
        return cls.list_by_foreign_key(database, "fund_id", fund_id)

    @classmethod
    def adjust_total_value(cls, conn, portfolio_id: int, delta: Decimal) -> None:
        """Shift a portfolio's stored total_value by delta.

        Runs on the caller's connection so the change commits or rolls back
        with the asset write that caused it. The result is floored at zero.

        Args:
            conn: Connection inside an open transaction
            portfolio_id: Portfolio to adjust
            delta: Signed amount to add
        """
        row = conn.execute(
            "SELECT total_value, created_at FROM portfolios WHERE id = ?",
            (portfolio_id,),
        ).fetchone()
        if row is None or not delta:
            return

        total = from_storage(row[0]) + delta
        if total < 0:
            logger.warning(
                f"Portfolio {portfolio_id} total_value would drop to {total}, "
                f"keeping 0"
            )
            total = Decimal("0")

        conn.execute(
            "UPDATE portfolios SET total_value = ?, updated_at = ? WHERE id = ?",
            (
                to_storage(total, CURRENCY_SCALE),
                max(utc_now(), row[1]),
                portfolio_id,
            ),
        )
        logger.debug(f"Portfolio {portfolio_id} total_value is now {total}")
