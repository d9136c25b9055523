from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

from src.api.common.utils.database import DATABASE_URL, engine

# Register every table with SQLModel.metadata
from src.api.clients.models.client import Client  # noqa: F401
from src.api.projects.models.project import Project  # noqa: F401
from src.api.tasks.models import Task, TimeEntry, WorkCategory  # noqa: F401
from src.api.retainers.models import RetainerPeriod  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
