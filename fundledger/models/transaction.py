"""Transaction model class

A Transaction is a debit or credit posted to exactly one Account.
Transactions are immutable once created and are removed together
with their Account.
"""

from decimal import Decimal

from fundledger.database import Database
from fundledger.models.active_model import ActiveModel

TRANSACTION_TYPES = ("debit", "credit")


class Transaction(ActiveModel):
    table_name = "transactions"
    primary_key = "id"
    entity_name = "Transaction"

    _allowed_fields = {
        "id",
        "account_id",
        "transaction_type",
        "amount",
        "description",
        "transaction_date",
        "reference_number",
        "created_at",
        "updated_at",
    }
    _required_fields = ("account_id", "transaction_type", "amount", "transaction_date")
    _decimal_fields = {"amount": (15, 2)}
    _date_fields = ("transaction_date",)
    _enum_fields = {"transaction_type": TRANSACTION_TYPES}
    _foreign_keys = {"account_id": ("accounts", "Account")}
    _updatable = False

    def __repr__(self):
        return (
            f"Transaction(id={self.id}, account_id={self.account_id}, "
            f"{self.transaction_type} {self.amount})"
        )

    def validate(self):
        """Validate the transaction"""
        errors = self._field_errors()

        if isinstance(self.amount, Decimal) and self.amount <= 0:
            errors.append(f"amount must be positive, got {self.amount}")

        self._raise_if_errors(errors)

    @classmethod
    def for_account(cls, database: Database, account_id: int) -> list["Transaction"]:
        return cls.list_by_foreign_key(database, "account_id", account_id)
