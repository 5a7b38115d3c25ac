import logging
import click
from dotenv import load_dotenv

# Environment must be loaded before settings are read
load_dotenv()

from school_backend.settings import settings
from .setup_db import setup
from .seed import seed, seed_journey
from .serve import serve

@click.group()
def cli():
    logging.basicConfig(level=settings.LOG_LEVEL)

cli.add_command(setup,"setup")
cli.add_command(seed,"seed")
cli.add_command(seed_journey,"seed-journey")
cli.add_command(serve,"serve")

if __name__ == '__main__':
    cli()
