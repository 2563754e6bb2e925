"""CLI interface for record management and reporting.

Commands:
    init-db                 Create or upgrade the database schema
    list ENTITY             List records of one kind
    delete ENTITY ID        Delete a record (guarded for parents)
    summary                 Show fund and portfolio summaries
"""

import logging
import os

import click
from alembic import command
from alembic.config import Config
from dotenv import load_dotenv

from fundledger.aggregation import dashboard_summary
from fundledger.database import Database, DatabaseError
from fundledger.models import (
    Account,
    ActiveModelError,
    Asset,
    Fund,
    IntegrityViolationError,
    Investor,
    Portfolio,
    Transaction,
)

# Load environment variables
load_dotenv()

# Configure logging for CLI
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

ENTITIES = {
    "accounts": Account,
    "transactions": Transaction,
    "funds": Fund,
    "investors": Investor,
    "portfolios": Portfolio,
    "assets": Asset,
}


def get_db_path() -> str:
    return os.getenv("DB_PATH", "data/fundledger.db")


def ensure_database_initialized(db_path: str) -> None:
    """Ensure database schema is at the latest Alembic revision.

    Args:
        db_path: Path to database file
    """
    alembic_config = Config(os.getenv("ALEMBIC_CONFIG", "alembic.ini"))
    db_path_absolute = os.path.abspath(db_path)
    alembic_config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path_absolute}")
    command.upgrade(alembic_config, "head")


@click.group()
def cli():
    """fundledger CLI - ledger, fund and portfolio records."""
    pass


@cli.command("init-db")
def init_db():
    """Create or upgrade the database schema."""
    db_path = get_db_path()
    click.echo(f"Initializing database schema at {db_path}...")
    ensure_database_initialized(db_path)
    click.echo("✓ Database schema initialized")


@cli.command("list")
@click.argument("entity", type=click.Choice(sorted(ENTITIES)))
def list_records(entity: str):
    """List records of one kind, in insertion order."""
    database = Database(db_path=get_db_path())
    records = ENTITIES[entity].all(database)

    if not records:
        click.echo(f"No {entity} found")
        return

    for record in records:
        fields = ", ".join(
            f"{key}={value}"
            for key, value in record.to_dict().items()
            if key not in ("created_at", "updated_at")
        )
        click.echo(fields)


@cli.command()
@click.argument("entity", type=click.Choice(sorted(ENTITIES)))
@click.argument("record_id", type=int)
def delete(entity: str, record_id: int):
    """Delete a record by ID.

    Investors, funds and portfolios cannot be deleted while other
    records still reference them.
    """
    database = Database(db_path=get_db_path())
    model = ENTITIES[entity]

    try:
        deleted = model.delete_by_id(database, record_id)
    except IntegrityViolationError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)
    except (ActiveModelError, DatabaseError) as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        raise SystemExit(1)

    if not deleted:
        click.echo(f"✗ {model.entity_name} {record_id} not found", err=True)
        raise SystemExit(1)

    click.echo(f"✓ Deleted {model.entity_name} {record_id}")


@cli.command()
def summary():
    """Show fund and portfolio summaries."""
    database = Database(db_path=get_db_path())
    result = dashboard_summary(database)

    funds = result["fund_summary"]
    portfolios = result["portfolio_summary"]

    click.echo("Funds")
    click.echo(f"  Total funds:          {funds['total_funds']}")
    click.echo(f"  Assets under mgmt:    {funds['total_assets_under_management']}")
    click.echo(f"  Average NAV:          {funds['average_nav']}")
    click.echo(f"  Top performing fund:  {funds['top_performing_fund'] or '-'}")
    click.echo("Portfolios")
    click.echo(f"  Total portfolios:     {portfolios['total_portfolios']}")
    click.echo(f"  Total value:          {portfolios['total_portfolio_value']}")
    click.echo(f"  Average performance:  {portfolios['average_performance']}")
    click.echo(
        f"  Best performing:      {portfolios['best_performing_portfolio'] or '-'}"
    )
    click.echo(f"Total invested capital: {result['total_invested_capital']}")


if __name__ == "__main__":
    cli()
