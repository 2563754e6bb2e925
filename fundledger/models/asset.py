"""Asset model class

A holding inside a Portfolio. Quantities keep 6 fractional digits for
fractional shares; unit prices keep 4.

Creating, updating or deleting an Asset adjusts the owning Portfolio's
total_value in the same transaction.
"""

from decimal import Decimal
from typing import Any

from fundledger.data_normalization import from_storage
from fundledger.database import Database
from fundledger.models.active_model import ActiveModel
from fundledger.models.portfolio import Portfolio

ASSET_TYPES = (
    "stock",
    "bond",
    "etf",
    "mutual_fund",
    "commodity",
    "real_estate",
    "alternative",
)


class Asset(ActiveModel):
    table_name = "assets"
    primary_key = "id"
    entity_name = "Asset"

    _allowed_fields = {
        "id",
        "portfolio_id",
        "symbol",
        "name",
        "asset_type",
        "quantity",
        "unit_price",
        "market_value",
        "cost_basis",
        "purchase_date",
        "created_at",
        "updated_at",
    }
    _required_fields = (
        "portfolio_id",
        "symbol",
        "name",
        "asset_type",
        "quantity",
        "unit_price",
        "market_value",
        "cost_basis",
        "purchase_date",
    )
    _decimal_fields = {
        "quantity": (15, 6),
        "unit_price": (15, 4),
        "market_value": (15, 2),
        "cost_basis": (15, 2),
    }
    _date_fields = ("purchase_date",)
    _enum_fields = {"asset_type": ASSET_TYPES}
    _foreign_keys = {"portfolio_id": ("portfolios", "Portfolio")}

    def __repr__(self):
        return f"Asset(id={self.id}, symbol={self.symbol}, quantity={self.quantity})"

    def validate(self):
        """Validate the asset"""
        errors = self._field_errors()

        for field in self._decimal_fields:
            value = getattr(self, field)
            if isinstance(value, Decimal) and value <= 0:
                errors.append(f"{field} must be positive, got {value}")

        self._raise_if_errors(errors)

    @classmethod
    def for_portfolio(cls, database: Database, portfolio_id: int) -> list["Asset"]:
        return cls.list_by_foreign_key(database, "portfolio_id", portfolio_id)

    def _save_to_database(self, conn, is_new: bool) -> None:
        previous = None
        if not is_new:
            previous = conn.execute(
                "SELECT portfolio_id, market_value FROM assets WHERE id = ?",
                (self.id,),
            ).fetchone()

        super()._save_to_database(conn, is_new)

        delta = self.market_value
        if previous is not None:
            old_portfolio_id, old_value = previous[0], from_storage(previous[1])
            if old_portfolio_id == self.portfolio_id:
                delta -= old_value
            else:
                Portfolio.adjust_total_value(conn, old_portfolio_id, -old_value)
        Portfolio.adjust_total_value(conn, self.portfolio_id, delta)

    @classmethod
    def _before_delete(cls, conn, row: dict[str, Any]) -> None:
        Portfolio.adjust_total_value(
            conn, row["portfolio_id"], -from_storage(row["market_value"])
        )
