"""
The school command line: exit codes and schema setup against SQLite files.
"""

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine, inspect, text

from school_backend.cli.cli import cli
from school_backend.settings import settings


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'school.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)
    return url


def count(url: str, table: str) -> int:
    engine = create_engine(url)
    try:
        with engine.connect() as connection:
            return connection.execute(text(f"SELECT count(*) FROM {table}")).scalar()
    finally:
        engine.dispose()


@pytest.mark.unit
class TestSetupCommand:

    def test_reset_and_delete_are_exclusive(self, runner, database_url):
        result = runner.invoke(cli, ["setup", "--reset", "--delete"])

        assert result.exit_code == 2
        assert "cannot be combined" in result.output

    def test_create_all(self, runner, database_url):
        result = runner.invoke(cli, ["setup", "--create-all"])

        assert result.exit_code == 0, result.output
        assert "Database setup completed" in result.output
        assert count(database_url, "permissions") == 52
        assert count(database_url, "roles") == 4

    def test_delete(self, runner, database_url):
        runner.invoke(cli, ["setup", "--create-all"])

        result = runner.invoke(cli, ["setup", "--delete", "--create-all"])

        assert result.exit_code == 0, result.output
        engine = create_engine(database_url)
        assert "permissions" not in inspect(engine).get_table_names()
        engine.dispose()


@pytest.mark.unit
class TestSeedCommands:

    def test_seed_against_unreachable_database(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'school.db'}")

        result = runner.invoke(cli, ["seed"])

        assert result.exit_code == 1
        assert "Demo seed failed" in result.output

    def test_seed_journey_then_demo_users(self, runner, database_url):
        runner.invoke(cli, ["setup", "--create-all"])

        journey = runner.invoke(cli, ["seed-journey"])
        demo = runner.invoke(cli, ["seed"])

        assert journey.exit_code == 0, journey.output
        assert demo.exit_code == 0, demo.output
        assert "admin@demo.com" in demo.output
        assert count(database_url, "courses") == 1
        assert count(database_url, "users") == 4
