"""
Alembic migration environment for the floodwatch schema.

The database URL comes from DATABASE_URL (or the application settings), never
from alembic.ini, so migrations always target the same database as the API.
"""

import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine, pool

from alembic import context

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from floodwatch.core.config import settings  # noqa: E402
from floodwatch.core.database import Base  # noqa: E402
import floodwatch.models  # noqa: E402,F401  registers tables on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

database_url = os.getenv("DATABASE_URL", settings.database_url)
configure_options = {
    "target_metadata": Base.metadata,
    "compare_type": True,
}

if context.is_offline_mode():
    # Emit SQL to stdout instead of executing it
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options,
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(database_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **configure_options)
        with context.begin_transaction():
            context.run_migrations()
