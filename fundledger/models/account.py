"""Account model class

This model represents a ledger Account.

Attributes:
- id: The account ID
- name: The account display name
- account_number: Unique account number
- account_type: One of asset, liability, equity, revenue, expense
- balance: Exact decimal balance (2 fractional digits, any sign)
- description: Optional free text
- created_at: The timestamp of the account creation
- updated_at: The timestamp of the last account update

Accounts have no update path once created. Deleting an Account removes
its Transactions in the same storage transaction.
"""

from fundledger.database import Database
from fundledger.models.active_model import ActiveModel

ACCOUNT_TYPES = ("asset", "liability", "equity", "revenue", "expense")


class Account(ActiveModel):
    table_name = "accounts"
    primary_key = "id"
    entity_name = "Account"

    _allowed_fields = {
        "id",
        "name",
        "account_number",
        "account_type",
        "balance",
        "description",
        "created_at",
        "updated_at",
    }
    _required_fields = ("name", "account_number", "account_type", "balance")
    _decimal_fields = {"balance": (15, 2)}
    _enum_fields = {"account_type": ACCOUNT_TYPES}
    _unique_fields = ("account_number",)
    _cascade_deletes = (("transactions", "account_id"),)
    _updatable = False

    def __repr__(self):
        return f"Account(id={self.id}, account_number={self.account_number})"

    def transactions(self) -> list:
        """Transactions posted to this account, in insertion order."""
        from fundledger.models.transaction import Transaction

        return Transaction.for_account(self._database, self.id)

    @classmethod
    def find_by_account_number(cls, database: Database, account_number: str):
        return cls.find_by(database, account_number=account_number)
