import os
import click
from alembic import command
from alembic.config import Config
from school_backend.database import Database
from school_backend.model import Base
from school_backend.scripts.initialize_system_data import initialize_system_data
from school_backend.settings import settings

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

def alembic_config(database_url: str) -> Config:
    config = Config(os.path.join(PACKAGE_DIR, "alembic.ini"))
    config.set_main_option("script_location", os.path.join(PACKAGE_DIR, "alembic"))
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config

def create_schema(database: Database, create_all: bool):
    if create_all:
        Base.metadata.create_all(database.engine)
    else:
        command.upgrade(alembic_config(database.url), "head")

def drop_schema(database: Database, create_all: bool):
    if create_all:
        Base.metadata.drop_all(database.engine)
    else:
        command.downgrade(alembic_config(database.url), "base")

@click.command()
@click.option("--reset", is_flag=True, help="Drop all tables before creating them again")
@click.option("--delete", is_flag=True, help="Drop all tables and stop")
@click.option("--create-all", is_flag=True, help="Create tables from the models instead of running migrations")
def setup(reset: bool, delete: bool, create_all: bool):
    """Create the schema and the permission catalog."""

    if reset and delete:
        raise click.UsageError("--reset and --delete cannot be combined")

    database = Database(settings.database_url)

    try:
        if reset or delete:
            click.echo(click.style("🗑️  Dropping all tables...", fg="yellow"))
            drop_schema(database, create_all)

        if delete:
            click.echo(click.style("✅ Database cleared", fg="green"))
            return

        click.echo("🏗️  Creating schema...")
        create_schema(database, create_all)

        with database.session() as db:
            initialize_system_data(db)

        click.echo(click.style("✅ Database setup completed", fg="green"))

    except click.ClickException:
        raise

    except Exception as e:
        raise click.ClickException(f"Database setup failed: {e}")

    finally:
        database.dispose()
