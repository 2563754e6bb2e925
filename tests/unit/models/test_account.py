"""Unit tests for Account model.

Tests the Account model's validation, persistence, and query methods.
"""

from decimal import Decimal

import pytest

from fundledger.models.account import Account
from fundledger.models.active_model import ActiveModelError
from fundledger.models.errors import UniqueConstraintError, ValidationError
from fundledger.models.transaction import Transaction


class TestAccountFieldValidation:
    """Test Account field name validation."""

    def test_account_rejects_invalid_fields(self, test_db, sample_account):
        """Test that Account rejects invalid field names in __init__."""
        with pytest.raises(ValueError, match="Invalid fields"):
            Account(test_db, **sample_account, invalid_field="should fail")

    def test_account_rejects_typo_in_field_name(self, test_db):
        """Test that Account catches typos in field names."""
        with pytest.raises(ValueError, match="Invalid fields"):
            Account(
                test_db,
                name="Cash",
                acount_number="1000",  # Typo: should be "account_number"
                account_type="asset",
                balance=0,
            )


class TestAccountValidation:
    """Test Account business rule validation."""

    def test_validate_passes_with_valid_data(self, test_db, sample_account):
        """Test that validate() passes with valid account data."""
        account = Account(test_db, **sample_account)
        account.validate()

    def test_validate_requires_account_type_in_chart(self, test_db, sample_account):
        """Test that account_type must be a known account class."""
        sample_account["account_type"] = "savings"
        account = Account(test_db, **sample_account)

        with pytest.raises(ValidationError, match="account_type must be one of"):
            account.validate()

    def test_validate_collects_multiple_errors(self, test_db):
        """Test that validate() collects and reports all validation errors."""
        account = Account(test_db, name="", account_type="savings")

        with pytest.raises(ValidationError) as exc_info:
            account.validate()

        error_message = str(exc_info.value)
        assert "name is required" in error_message
        assert "account_number is required" in error_message
        assert "balance is required" in error_message
        assert "account_type must be one of" in error_message

    def test_validate_accepts_negative_balance(self, test_db, sample_account):
        """Test that balances may carry any sign (liabilities)."""
        sample_account.update(account_type="liability", balance=Decimal("-5000.75"))
        account = Account(test_db, **sample_account)
        account.validate()
        assert account.balance == Decimal("-5000.75")

    def test_validate_rejects_balance_overflow(self, test_db, sample_account):
        """Test that balances must fit numeric(15,2)."""
        sample_account["balance"] = Decimal("10000000000000")
        account = Account(test_db, **sample_account)

        with pytest.raises(ValidationError, match="numeric\\(15,2\\)"):
            account.validate()


class TestAccountPersistence:
    """Test Account create/find/delete."""

    def test_create_and_find_round_trips_balance(self, test_db, sample_account):
        """Test that balances read back exactly."""
        sample_account["balance"] = Decimal("999999999.99")
        account = Account.create(test_db, **sample_account)

        found = Account.find_by_id(test_db, account.id)

        assert found.balance == Decimal("999999999.99")
        assert found.account_number == "1000-001"
        assert found.description == "Main operating account"

    def test_description_is_optional(self, test_db, sample_account):
        del sample_account["description"]
        account = Account.create(test_db, **sample_account)
        assert Account.find_by_id(test_db, account.id).description is None

    def test_duplicate_account_number_rejected(self, test_db, sample_account):
        """Test that a second account with the same number is rejected."""
        first = Account.create(test_db, **sample_account)

        duplicate = dict(sample_account, name="Another", balance=Decimal("1.00"))
        with pytest.raises(UniqueConstraintError, match="account_number '1000-001'"):
            Account.create(test_db, **duplicate)

        remaining = Account.all(test_db)
        assert len(remaining) == 1
        found = Account.find_by_id(test_db, first.id)
        assert found.name == "Operating Cash"
        assert found.balance == Decimal("15000.50")
        assert found.updated_at == first.updated_at

    def test_find_by_account_number(self, test_db, account):
        assert Account.find_by_account_number(test_db, "1000-001").id == account.id
        assert Account.find_by_account_number(test_db, "missing") is None

    def test_account_has_no_update_path(self, test_db, account):
        """Test that accounts cannot be updated once created."""
        with pytest.raises(ActiveModelError, match="cannot be updated"):
            account.update(name="Renamed")

        assert Account.find_by_id(test_db, account.id).name == "Operating Cash"

    def test_delete_missing_account_returns_false(self, test_db):
        assert Account.delete_by_id(test_db, 0) is False
        assert Account.delete_by_id(test_db, 12345) is False

    def test_delete_account_removes_its_transactions(
        self, test_db, account, sample_account, sample_transaction
    ):
        """Test that deleting an account removes its transactions atomically."""
        other = Account.create(
            test_db, **dict(sample_account, account_number="2000-001")
        )
        Transaction.create(test_db, account_id=account.id, **sample_transaction)
        Transaction.create(test_db, account_id=account.id, **sample_transaction)
        kept = Transaction.create(test_db, account_id=other.id, **sample_transaction)

        assert account.delete() is True

        assert Account.find_by_id(test_db, account.id) is None
        assert Transaction.for_account(test_db, account.id) == []
        assert [t.id for t in Transaction.all(test_db)] == [kept.id]

    def test_transactions_helper(self, test_db, account, sample_transaction):
        Transaction.create(test_db, account_id=account.id, **sample_transaction)
        assert len(account.transactions()) == 1
