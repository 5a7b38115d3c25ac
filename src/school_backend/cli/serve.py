import click
import uvicorn
from school_backend.settings import settings

@click.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", default=8000, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the API server."""

    uvicorn.run("school_backend.server:app", host=host, port=port, log_level=settings.LOG_LEVEL.lower(), reload=reload, workers=1)
