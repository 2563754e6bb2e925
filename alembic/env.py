import os
from logging.config import fileConfig

from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

from alembic import context

# Load environment variables
load_dotenv()

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Callers (CLI, test fixtures) may set sqlalchemy.url explicitly;
# otherwise the database location comes from the environment
if not config.get_main_option("sqlalchemy.url"):
    db_path = os.getenv("DB_PATH", "data/fundledger.db")
    db_path_absolute = os.path.abspath(db_path)
    os.makedirs(os.path.dirname(db_path_absolute), exist_ok=True)
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path_absolute}")

sqlalchemy_url = config.get_main_option("sqlalchemy.url")

# Interpret the config file for Python logging.
# Keep loggers created before migrations run (CLI, pytest) enabled.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Schema is maintained by hand in versions/; no autogenerate metadata
target_metadata = None


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is acceptable
    here as well.  By skipping the Engine creation
    we don't even need a DBAPI to be available.

    Calls to context.execute() here emit the given string to the
    script output.

    """
    context.configure(
        url=sqlalchemy_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    In this scenario we need to create an Engine
    and associate a connection with the context.

    """
    connectable = create_engine(
        sqlalchemy_url,
        poolclass=pool.NullPool,
        connect_args={"check_same_thread": False},
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
