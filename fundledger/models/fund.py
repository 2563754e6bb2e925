"""Fund model class

This model represents an investment Fund.

Attributes:
- id: The fund ID
- name: The fund display name
- fund_type: One of equity, fixed_income, mixed, alternative
- inception_date: When the fund started
- nav: Net asset value per unit, 4 fractional digits, must be positive
- total_assets: Assets under management, 2 fractional digits, non-negative
- management_fee: Fee percentage, 4 fractional digits, non-negative
- description: Optional free text
- created_at / updated_at: Record timestamps

A Fund cannot be deleted while Portfolios reference it.
"""

from decimal import Decimal

from fundledger.models.active_model import ActiveModel
from fundledger.models.integrity import DependentLookup

FUND_TYPES = ("equity", "fixed_income", "mixed", "alternative")


class Fund(ActiveModel):
    table_name = "funds"
    primary_key = "id"
    entity_name = "Fund"

    _allowed_fields = {
        "id",
        "name",
        "fund_type",
        "inception_date",
        "nav",
        "total_assets",
        "management_fee",
        "description",
        "created_at",
        "updated_at",
    }
    _required_fields = (
        "name",
        "fund_type",
        "inception_date",
        "nav",
        "total_assets",
        "management_fee",
    )
    _decimal_fields = {
        "nav": (15, 4),
        "total_assets": (15, 2),
        "management_fee": (5, 4),
    }
    _date_fields = ("inception_date",)
    _enum_fields = {"fund_type": FUND_TYPES}

    def __repr__(self):
        return f"Fund(id={self.id}, name={self.name}, nav={self.nav})"

    def validate(self):
        """Validate the fund"""
        errors = self._field_errors()

        if isinstance(self.nav, Decimal) and self.nav <= 0:
            errors.append(f"nav must be positive, got {self.nav}")

        if isinstance(self.total_assets, Decimal) and self.total_assets < 0:
            errors.append(f"total_assets cannot be negative, got {self.total_assets}")

        if isinstance(self.management_fee, Decimal) and self.management_fee < 0:
            errors.append(
                f"management_fee cannot be negative, got {self.management_fee}"
            )

        self._raise_if_errors(errors)

    @classmethod
    def _dependent_lookups(cls) -> list[DependentLookup]:
        from fundledger.models.portfolio import Portfolio

        return [Portfolio.dependent_lookup("fund_id")]

    def portfolios(self) -> list:
        from fundledger.models.portfolio import Portfolio

        return Portfolio.for_fund(self._database, self.id)
