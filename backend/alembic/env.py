from logging.config import fileConfig
from sqlalchemy import create_engine
from alembic import context

# backend/ is on sys.path through prepend_sys_path in alembic.ini
from config import Settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Same file database.get_db() opens
db_url = Settings.from_env().database_url


def run_migrations_offline() -> None:
    """Emit the migration SQL for the configured database without connecting."""
    context.configure(
        url=db_url,
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations to the configured sqlite file."""
    engine = create_engine(db_url)

    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=None,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
