"""ActiveRecord-style model classes for ledger, fund and portfolio data.

Models provide object-relational mapping with ActiveRecord pattern.
"""

from fundledger.models.account import Account
from fundledger.models.active_model import ActiveModel
from fundledger.models.asset import Asset
from fundledger.models.errors import (
    ActiveModelError,
    IntegrityViolationError,
    UniqueConstraintError,
    ValidationError,
)
from fundledger.models.fund import Fund
from fundledger.models.investor import Investor
from fundledger.models.portfolio import Portfolio
from fundledger.models.transaction import Transaction

__all__ = [
    "ActiveModel",
    "ActiveModelError",
    "Account",
    "Asset",
    "Fund",
    "IntegrityViolationError",
    "Investor",
    "Portfolio",
    "Transaction",
    "UniqueConstraintError",
    "ValidationError",
]
