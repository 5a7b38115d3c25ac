from logging.config import fileConfig
from alembic import context
from sqlalchemy import create_engine
from school_backend.model import Base  # registers every table on the metadata
from school_backend.settings import settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

def get_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.database_url

def run_migrations_offline():
    context.configure(url=get_url(), target_metadata=Base.metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = create_engine(get_url())
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
