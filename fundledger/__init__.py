"""fundledger - ledger, fund and portfolio records with referential integrity."""

__version__ = "0.1.0"
