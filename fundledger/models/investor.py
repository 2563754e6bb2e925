"""Investor model class

This model represents an Investor.

Attributes:
- id: The investor ID
- name: The investor display name
- email: Unique contact email
- investor_type: individual or institutional
- total_invested: Capital committed, 2 fractional digits, non-negative
- phone / address: Optional contact details
- created_at / updated_at: Record timestamps

An Investor cannot be deleted while Portfolios reference it.
"""

import re
from decimal import Decimal

from fundledger.database import Database
from fundledger.models.active_model import ActiveModel
from fundledger.models.integrity import DependentLookup

INVESTOR_TYPES = ("individual", "institutional")

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Investor(ActiveModel):
    table_name = "investors"
    primary_key = "id"
    entity_name = "Investor"

    _allowed_fields = {
        "id",
        "name",
        "email",
        "investor_type",
        "total_invested",
        "phone",
        "address",
        "created_at",
        "updated_at",
    }
    _required_fields = ("name", "email", "investor_type", "total_invested")
    _decimal_fields = {"total_invested": (15, 2)}
    _enum_fields = {"investor_type": INVESTOR_TYPES}
    _unique_fields = ("email",)

    def __repr__(self):
        return f"Investor(id={self.id}, email={self.email})"

    def validate(self):
        """Validate the investor"""
        errors = self._field_errors()

        if isinstance(self.email, str) and self.email and not _EMAIL_PATTERN.match(
            self.email
        ):
            errors.append(f"email is not a valid address: {self.email!r}")

        if isinstance(self.total_invested, Decimal) and self.total_invested < 0:
            errors.append(
                f"total_invested cannot be negative, got {self.total_invested}"
            )

        self._raise_if_errors(errors)

    @classmethod
    def _dependent_lookups(cls) -> list[DependentLookup]:
        from fundledger.models.portfolio import Portfolio

        return [Portfolio.dependent_lookup("investor_id")]

    def portfolios(self) -> list:
        from fundledger.models.portfolio import Portfolio

        return Portfolio.for_investor(self._database, self.id)

    @classmethod
    def find_by_email(cls, database: Database, email: str):
        return cls.find_by(database, email=email)
