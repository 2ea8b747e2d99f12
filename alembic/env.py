from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from crm.core.config import settings
from crm.models.base import Base

# register every table on Base.metadata
import crm.models.assignment_history  # noqa: F401
import crm.models.audit_log  # noqa: F401
import crm.models.auth_session  # noqa: F401
import crm.models.client  # noqa: F401
import crm.models.comment  # noqa: F401
import crm.models.creative  # noqa: F401
import crm.models.notification  # noqa: F401
import crm.models.payment  # noqa: F401
import crm.models.publication  # noqa: F401
import crm.models.task  # noqa: F401
import crm.models.user  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
