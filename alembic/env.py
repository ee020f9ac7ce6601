import importlib, pkgutil

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
# add your model's MetaData object here
# for 'autogenerate' support
from blockdocs.models.base import Base
from blockdocs.settings import get_settings


# Force import all model modules so their tables are registered
def import_all_model_modules():
    import blockdocs.models
    for _, module_name, is_pkg in pkgutil.iter_modules(blockdocs.models.__path__):
        if not is_pkg:
            importlib.import_module(f"blockdocs.models.{module_name}")

import_all_model_modules()


blockdocs_settings = get_settings()

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


# Set the target_metadata for Alembic autogenerate
target_metadata = Base.metadata

# Alembic runs synchronously: address the primary database through its sync driver
primary = blockdocs_settings.primary_database()
config.set_main_option("sqlalchemy.url", primary.sync_dsn.replace("%", "%%"))

# sqlite cannot ALTER most things in place
render_as_batch = primary.is_sqlite


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine. Calls to
    context.execute() here emit the given string to the script output.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with sync SQLAlchemy engine."""
    section = config.get_section(config.config_ini_section) or {}
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
