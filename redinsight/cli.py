"""Command-line interface for RedInsight."""

import logging

import typer
import uvicorn

from redinsight import __version__
from redinsight.config.settings import settings
from redinsight.utils.logging_utils import setup_logging

app = typer.Typer(help="RedInsight - browse Reddit through a same-origin JSON proxy")

logger = logging.getLogger(__name__)


@app.command()
def serve() -> None:
    """Run the proxy and the viewer UI. Host and port come from HOST / PORT."""
    setup_logging()
    logger.info(f"🚀 {settings.APP_NAME} server running on http://localhost:{settings.PORT}")
    uvicorn.run(
        "redinsight.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(f"{settings.APP_NAME} {__version__}")


if __name__ == "__main__":
    app()
