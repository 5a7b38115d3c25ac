import click
from school_backend.database import Database
from school_backend.scripts.seed_demo_users import DEMO_PASSWORD, DEMO_USERS, seed_demo_users
from school_backend.scripts.seed_journey import seed_journey_course
from school_backend.settings import settings

@click.command()
def seed():
    """Upsert the demo users, unit and profiles."""

    database = Database(settings.database_url)

    try:
        with database.session() as db:
            seed_demo_users(db)
    except Exception as e:
        raise click.ClickException(f"Demo seed failed: {e}")
    finally:
        database.dispose()

    click.echo(click.style("🎉 Demo seed completed", fg="green"))
    click.echo("\n📋 Demo logins:")
    for user in DEMO_USERS:
        click.echo(f"   • {user['email']} / {DEMO_PASSWORD} ({user['role']})")

@click.command()
def seed_journey():
    """Create the Journey course unless it exists."""

    database = Database(settings.database_url)

    try:
        with database.session() as db:
            course_id = seed_journey_course(db)
    except Exception as e:
        raise click.ClickException(f"Journey seed failed: {e}")
    finally:
        database.dispose()

    click.echo(click.style(f"🎉 Journey course ready ({course_id})", fg="green"))
