"""Initial schema

Revision ID: 3a7c52e9d014
Revises:
Create Date: 2026-10-18 09:30:12.418206

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3a7c52e9d014"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Decimal columns are TEXT: SQLite NUMERIC/REAL affinity would coerce
# exact decimal text to binary floating point.


def upgrade() -> None:
    """Upgrade schema."""
    # Table: accounts
    op.create_table(
        "accounts",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("account_number", sa.Text(), nullable=False, unique=True),
        sa.Column("account_type", sa.Text(), nullable=False),
        sa.Column("balance", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint(
            "account_type IN ('asset', 'liability', 'equity', 'revenue', 'expense')",
            name="check_accounts_account_type",
        ),
        sa.CheckConstraint(
            "updated_at >= created_at", name="check_accounts_timestamps"
        ),
    )

    # Table: transactions
    op.create_table(
        "transactions",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("transaction_type", sa.Text(), nullable=False),
        sa.Column("amount", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("transaction_date", sa.Text(), nullable=False),
        sa.Column("reference_number", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="RESTRICT"),
        sa.CheckConstraint(
            "transaction_type IN ('debit', 'credit')",
            name="check_transactions_transaction_type",
        ),
        sa.CheckConstraint(
            "updated_at >= created_at", name="check_transactions_timestamps"
        ),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])

    # Table: funds
    op.create_table(
        "funds",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("fund_type", sa.Text(), nullable=False),
        sa.Column("inception_date", sa.Text(), nullable=False),
        sa.Column("nav", sa.Text(), nullable=False),
        sa.Column("total_assets", sa.Text(), nullable=False),
        sa.Column("management_fee", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint(
            "fund_type IN ('equity', 'fixed_income', 'mixed', 'alternative')",
            name="check_funds_fund_type",
        ),
        sa.CheckConstraint("updated_at >= created_at", name="check_funds_timestamps"),
    )

    # Table: investors
    op.create_table(
        "investors",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("investor_type", sa.Text(), nullable=False),
        sa.Column("total_invested", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint(
            "investor_type IN ('individual', 'institutional')",
            name="check_investors_investor_type",
        ),
        sa.CheckConstraint(
            "updated_at >= created_at", name="check_investors_timestamps"
        ),
    )

    # Table: portfolios
    op.create_table(
        "portfolios",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("investor_id", sa.Integer(), nullable=False),
        sa.Column("fund_id", sa.Integer(), nullable=False),
        sa.Column("total_value", sa.Text(), nullable=False),
        sa.Column("cash_balance", sa.Text(), nullable=False),
        sa.Column("performance", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["investor_id"], ["investors.id"], ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(["fund_id"], ["funds.id"], ondelete="RESTRICT"),
        sa.CheckConstraint(
            "updated_at >= created_at", name="check_portfolios_timestamps"
        ),
    )
    op.create_index("ix_portfolios_investor_id", "portfolios", ["investor_id"])
    op.create_index("ix_portfolios_fund_id", "portfolios", ["fund_id"])

    # Table: assets
    op.create_table(
        "assets",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("portfolio_id", sa.Integer(), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("asset_type", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Text(), nullable=False),
        sa.Column("unit_price", sa.Text(), nullable=False),
        sa.Column("market_value", sa.Text(), nullable=False),
        sa.Column("cost_basis", sa.Text(), nullable=False),
        sa.Column("purchase_date", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["portfolio_id"], ["portfolios.id"], ondelete="RESTRICT"
        ),
        sa.CheckConstraint(
            "asset_type IN ('stock', 'bond', 'etf', 'mutual_fund', "
            "'commodity', 'real_estate', 'alternative')",
            name="check_assets_asset_type",
        ),
        sa.CheckConstraint("updated_at >= created_at", name="check_assets_timestamps"),
    )
    op.create_index("ix_assets_portfolio_id", "assets", ["portfolio_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_assets_portfolio_id", table_name="assets")
    op.drop_table("assets")
    op.drop_index("ix_portfolios_fund_id", table_name="portfolios")
    op.drop_index("ix_portfolios_investor_id", table_name="portfolios")
    op.drop_table("portfolios")
    op.drop_table("investors")
    op.drop_table("funds")
    op.drop_index("ix_transactions_account_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("accounts")
